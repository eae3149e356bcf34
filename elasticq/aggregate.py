"""Aggregations for the search DSL."""

from __future__ import annotations

from typing import Any, Optional

from elasticq.filter import FilterWrap


class AggregateDsl:
    """A named aggregation with optional filter and sub-aggregations."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.type_name = ""
        self.type_value: Optional[dict[str, Any]] = None
        self.filters: Optional[FilterWrap] = None
        self.aggregates_val: dict[str, AggregateDsl] = {}

    def aggregates(self, *aggs: AggregateDsl) -> AggregateDsl:
        """Add sub-aggregations, keyed by their names."""
        for agg in aggs:
            self.aggregates_val[agg.name] = agg
        return self

    def _field(self, type_name: str, field: str, **extra: Any) -> AggregateDsl:
        self.type_value = {"field": field, **extra}
        self.type_name = type_name
        return self

    def min(self, field: str) -> AggregateDsl:
        return self._field("min", field)

    def max(self, field: str) -> AggregateDsl:
        return self._field("max", field)

    def sum(self, field: str) -> AggregateDsl:
        return self._field("sum", field)

    def avg(self, field: str) -> AggregateDsl:
        return self._field("avg", field)

    def stats(self, field: str) -> AggregateDsl:
        return self._field("stats", field)

    def extended_stats(self, field: str) -> AggregateDsl:
        return self._field("extended_stats", field)

    def value_count(self, field: str) -> AggregateDsl:
        return self._field("value_count", field)

    def percentiles(self, field: str) -> AggregateDsl:
        return self._field("percentiles", field)

    def cardinality(self, field: str, rehash: bool, threshold: int) -> AggregateDsl:
        """A cardinality count; rehash is the server default and is not sent."""
        extra: dict[str, Any] = {}
        if threshold > 0:
            extra["precision_threshold"] = threshold
        return self._field("cardinality", field, **extra)

    def global_(self) -> AggregateDsl:
        self.type_value = {}
        self.type_name = "global"
        return self

    def filter(self, *filters: Any) -> AggregateDsl:
        """Restrict the aggregation by filters; a leading "and"/"or" sets the clause."""
        if not filters:
            return self
        if self.filters is None:
            self.filters = FilterWrap()
        self.filters.add_filters(filters)
        return self

    def missing(self, field: str) -> AggregateDsl:
        return self._field("missing", field)

    def terms(self, field: str) -> AggregateDsl:
        return self._field("terms", field)

    def terms_with_size(self, field: str, size: int) -> AggregateDsl:
        return self._field("terms", field, size=size)

    def significant_terms(self, field: str) -> AggregateDsl:
        return self._field("significant_terms", field)

    def histogram(self, field: str, interval: int) -> AggregateDsl:
        return self._field("histogram", field, interval=interval)

    def date_histogram(self, field: str, interval: str) -> AggregateDsl:
        return self._field("date_histogram", field, interval=interval)

    def to_dict(self) -> dict[str, Any]:
        root: dict[str, Any] = {}
        if self.type_value is not None:
            root[self.type_name] = dict(self.type_value)
        if self.filters is not None:
            root["filter"] = self.filters.to_dict()
        if self.aggregates_val:
            root["aggregations"] = {
                agg.name: agg.to_dict() for agg in self.aggregates_val.values()
            }
        return root


def aggregate(name: str) -> AggregateDsl:
    """Start a new aggregation with the given name."""
    return AggregateDsl(name)