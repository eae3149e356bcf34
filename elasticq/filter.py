"""Filter clauses for the search DSL."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence


def _jsonable(value: Any) -> Any:
    """Turn DSL objects into plain JSON-compatible values."""
    if hasattr(value, "to_dict"):
        return _jsonable(value.to_dict())
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


class TermExecutionMode(str, Enum):
    """How a terms filter is executed."""

    DEFAULT = ""
    PLAIN = "plain"
    FIELD = "field_data"
    BOOL = "bool"
    AND = "and"
    OR = "or"


class FilterWrap:
    """Several filters joined by a bool clause ("and" or "or")."""

    def __init__(self) -> None:
        self.bool_clause = "and"
        self.filters: list[Any] = []

    def __str__(self) -> str:
        return f"fopv: {len(self.filters)}:{self.filters}"

    def bool(self, clause: str) -> None:
        self.bool_clause = clause

    def add_filters(self, filters: Sequence[Any]) -> None:
        """Add filters; a leading string among several sets the bool clause."""
        filters = list(filters)
        if len(filters) > 1 and isinstance(filters[0], str):
            self.bool_clause = str(filters[0])
            filters = filters[1:]
        self.filters.extend(filters)

    def to_dict(self) -> Any:
        if len(self.filters) > 1:
            return {self.bool_clause: [_jsonable(f) for f in self.filters]}
        if len(self.filters) == 1:
            return _jsonable(self.filters[0])
        return None


@dataclass
class GeoLocation:
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.latitude, "lon": self.longitude}


@dataclass
class GeoField:
    field: str
    location: GeoLocation


@dataclass
class RangeFilter:
    """Bounds for a range filter; unset bounds are omitted."""

    gte: Any = None
    lte: Any = None
    gt: Any = None
    lt: Any = None
    time_zone: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = {
            key: _jsonable(value)
            for key, value in (("gte", self.gte), ("lte", self.lte), ("gt", self.gt), ("lt", self.lt))
            if value is not None
        }
        if self.time_zone:
            out["time_zone"] = self.time_zone
        return out


class FilterOp:
    """A filter query built with chained calls."""

    def __init__(self) -> None:
        self._terms: Optional[dict[str, Any]] = None
        self._term: dict[str, Any] = {}
        self._range: dict[str, RangeFilter] = {}
        self._exists: Optional[str] = None
        self._missing: Optional[str] = None
        self._and: list[FilterOp] = []
        self._or: list[FilterOp] = []
        self._not: list[FilterOp] = []
        self._limit: Optional[int] = None
        self._type: Optional[str] = None
        self._ids: Optional[dict[str, Any]] = None
        self._geo_distance: Optional[dict[str, Any]] = None
        self._geo_distance_range: Optional[dict[str, Any]] = None

    def term(self, field: str, value: Any) -> FilterOp:
        """Add or replace a term on a field."""
        self._term[field] = value
        return self

    def and_(self, *filters: FilterOp) -> FilterOp:
        self._and.extend(filters)
        return self

    def or_(self, *filters: FilterOp) -> FilterOp:
        self._or.extend(filters)
        return self

    def not_(self, *filters: FilterOp) -> FilterOp:
        self._not.extend(filters)
        return self

    def geo_distance(self, distance: str, *fields: GeoField) -> FilterOp:
        self._geo_distance = {"distance": distance}
        for geo in fields:
            self._geo_distance[geo.field] = geo.location
        return self

    def geo_distance_range(self, from_: str, to: str, *fields: GeoField) -> FilterOp:
        self._geo_distance_range = {"from": from_, "to": to}
        for geo in fields:
            self._geo_distance_range[geo.field] = geo.location
        return self

    def terms(self, field: str, execution_mode: Any, *values: Any) -> FilterOp:
        """Set the single terms clause of this filter."""
        mode = TermExecutionMode(execution_mode)
        self._terms = {}
        if mode is not TermExecutionMode.DEFAULT:
            self._terms["execution"] = mode.value
        self._terms[field] = list(values)
        return self

    def range(self, field: str, gte: Any, gt: Any, lte: Any, lt: Any, time_zone: str) -> FilterOp:
        self._range[field] = RangeFilter(gte=gte, lte=lte, gt=gt, lt=lt, time_zone=time_zone)
        return self

    def type(self, field_type: str) -> FilterOp:
        self._type = field_type
        return self

    def ids(self, *ids: Any) -> FilterOp:
        self._ids = {"values": list(ids)}
        return self

    def ids_by_types(self, types: Sequence[str], *ids: Any) -> FilterOp:
        self._ids = {"type": list(types), "values": list(ids)}
        return self

    def exists(self, field: str) -> FilterOp:
        self._exists = field
        return self

    def missing(self, field: str) -> FilterOp:
        self._missing = field
        return self

    def limit(self, max_results: int) -> FilterOp:
        self._limit = max_results
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self._terms:
            out["terms"] = _jsonable(self._terms)
        if self._term:
            out["term"] = _jsonable(self._term)
        if self._range:
            out["range"] = {field: r.to_dict() for field, r in self._range.items()}
        if self._exists is not None:
            out["exists"] = {"field": self._exists}
        if self._missing is not None:
            out["missing"] = {"field": self._missing}
        if self._and:
            out["and"] = [f.to_dict() for f in self._and]
        if self._or:
            out["or"] = [f.to_dict() for f in self._or]
        if self._not:
            out["not"] = [f.to_dict() for f in self._not]
        if self._limit is not None:
            out["limit"] = {"value": self._limit}
        if self._type is not None:
            out["type"] = {"value": self._type}
        if self._ids is not None:
            out["ids"] = {key: _jsonable(value) for key, value in self._ids.items() if value}
        if self._geo_distance is not None:
            out["geo_distance"] = _jsonable(self._geo_distance)
        if self._geo_distance_range is not None:
            out["geo_distance_range"] = _jsonable(self._geo_distance_range)
        return out


def new_filter() -> FilterOp:
    """Start a new filter."""
    return FilterOp()


def compound_filter(*filters: Any) -> FilterWrap:
    """Join filters; a leading "and"/"or" string among several sets the clause."""
    wrap = FilterWrap()
    wrap.add_filters(filters)
    return wrap


def new_geo_field(field: str, latitude: float, longitude: float) -> GeoField:
    return GeoField(field=field, location=GeoLocation(latitude, longitude))