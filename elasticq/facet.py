"""Facets for the search DSL."""

from __future__ import annotations

from typing import Any, Optional

from elasticq.filter import FilterWrap
from elasticq.query import Term, Terms


class RangeDsl:
    """A range facet on one field with optional facet filter."""

    def __init__(self, field: str = "") -> None:
        self.field = field
        self.values: list[tuple[str, str]] = []
        self.filter_val: Optional[FilterWrap] = None

    def range(self, from_: str, to: str) -> RangeDsl:
        """Add a bucket; an empty bound is left open."""
        self.values.append((from_, to))
        return self

    def filter(self, *filters: Any) -> RangeDsl:
        """Add facet filters; a leading "and"/"or" among several sets the clause."""
        if self.filter_val is None:
            self.filter_val = FilterWrap()
        self.filter_val.add_filters(filters)
        return self

    def to_dict(self) -> dict[str, Any]:
        definition: dict[str, Any] = {}
        if self.field:
            definition["field"] = self.field
        if self.values:
            definition["ranges"] = [
                {key: bound for key, bound in (("from", low), ("to", high)) if bound}
                for low, high in self.values
            ]
        out: dict[str, Any] = {"range": definition}
        if self.filter_val is not None:
            out["facet_filter"] = self.filter_val.to_dict()
        return out


class FacetDsl:
    """A set of term and range facets sharing one size."""

    def __init__(self) -> None:
        self.size_val = ""
        self.terms: dict[str, Term] = {}
        self.ranges: dict[str, RangeDsl] = {}

    def size(self, size: str) -> FacetDsl:
        self.size_val = size
        return self

    def fields(self, *fields: str) -> FacetDsl:
        """A terms facet over the fields, keyed by the first one."""
        if not fields:
            return self
        self.terms[fields[0]] = Term(Terms(fields=list(fields)))
        return self

    def regex(self, field: str, match: str) -> FacetDsl:
        """A terms facet on field limited to terms matching the regex."""
        self.terms[field] = Term(Terms(fields=[field], regex=match))
        return self

    def term(self, t: Term) -> FacetDsl:
        """Add a prepared terms facet, keyed by its first field."""
        if not t.terms.fields:
            raise ValueError("a term facet needs at least one field")
        self.terms[t.terms.fields[0]] = t
        return self

    def range(self, r: RangeDsl) -> FacetDsl:
        """Add a range facet, keyed by its field."""
        self.ranges[r.field] = r
        return self

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key, t in self.terms.items():
            t.terms.size = self.size_val
            data[key] = t.to_dict()
        for key, r in self.ranges.items():
            data[key] = r.to_dict()
        return data


def facet() -> FacetDsl:
    """Start a new facet set."""
    return FacetDsl()


def facet_range(field: str) -> RangeDsl:
    """Start a range facet on the given field."""
    return RangeDsl(field)