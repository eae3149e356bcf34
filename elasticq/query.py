"""Query clauses for the search DSL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from elasticq.filter import FilterOp, FilterWrap


@dataclass
class QueryString:
    """A Lucene query_string search; empty settings are left out."""

    default_operator: str = ""
    default_field: str = ""
    query: str = ""
    exists: str = ""
    missing: str = ""
    fields: list[str] = field(default_factory=list)
    lenient: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.default_operator:
            out["default_operator"] = self.default_operator
        if self.default_field:
            out["default_field"] = self.default_field
        if self.query:
            out["query"] = self.query
        if self.exists:
            out["_exists_"] = self.exists
        if self.missing:
            out["_missing_"] = self.missing
        if self.fields:
            out["fields"] = list(self.fields)
        if self.lenient:
            out["lenient"] = True
        return out


def new_query_string(field: str, query: str) -> QueryString:
    """A query_string search for query on the given default field."""
    return QueryString(default_field=field, query=query)


@dataclass
class MultiMatch:
    """A match query run against several fields."""

    query: str
    fields: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"query": self.query, "fields": list(self.fields)}


@dataclass
class Terms:
    """Fields, size and regex of a terms clause."""

    fields: list[str] = field(default_factory=list)
    size: str = ""
    regex: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if len(self.fields) == 1:
            out["field"] = self.fields[0]
        elif len(self.fields) > 1:
            out["fields"] = list(self.fields)
        if self.regex:
            out["regex"] = self.regex
        if self.size:
            out["size"] = self.size
        return out


@dataclass
class Term:
    """A terms clause with an optional facet filter."""

    terms: Terms = field(default_factory=Terms)
    filter_val: Optional[FilterWrap] = None

    def filter(self, *filters: Any) -> Term:
        """Add filters; a leading "and"/"or" among several sets the clause."""
        if self.filter_val is None:
            self.filter_val = FilterWrap()
        self.filter_val.add_filters(filters)
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"terms": self.terms.to_dict()}
        if self.filter_val is not None:
            out["facet_filter"] = self.filter_val.to_dict()
        return out


def new_term(*fields: str) -> Term:
    """A terms clause over the given fields."""
    return Term(Terms(fields=list(fields)))


class QueryDsl:
    """A search query built with chained calls."""

    def __init__(self) -> None:
        self.match_all = False
        self.term_map: dict[str, str] = {}
        self.query_string: Optional[QueryString] = None
        self.multi_match_val: Optional[MultiMatch] = None
        self.function_score_val: Optional[dict[str, Any]] = None
        self.filter_val: Optional[FilterOp] = None

    def all(self) -> QueryDsl:
        """Match every document."""
        self.match_all = True
        return self

    def range(self, fop: FilterOp) -> QueryDsl:
        """Use fop as the filter unless one is already set."""
        if self.filter_val is None:
            self.filter_val = fop
        return self

    def term(self, name: str, value: str) -> QueryDsl:
        self.term_map[name] = value
        return self

    def function_score(self, mode: str, *functions: dict[str, Any]) -> QueryDsl:
        self.function_score_val = {"functions": list(functions), "score_mode": mode}
        return self

    def search(self, search_for: str) -> QueryDsl:
        """A raw Lucene query_string search."""
        self.query_string = new_query_string("", "")
        self.query_string.query = search_for
        return self

    def qs(self, qs: QueryString) -> QueryDsl:
        self.query_string = qs
        return self

    def set_lenient(self, lenient: bool) -> QueryDsl:
        """Ignore format failures in the query string search."""
        if self.query_string is None:
            raise ValueError("no query string to make lenient")
        self.query_string.lenient = lenient
        return self

    def fields(self, fields: str, search: str, exists: str, missing: str) -> QueryDsl:
        """A query_string search on one field or a comma separated list of fields."""
        field_list = fields.split(",")
        qs = new_query_string("", "")
        qs.query = search
        if len(field_list) == 1:
            qs.default_field = fields
        else:
            qs.fields = field_list
        qs.exists = exists
        qs.missing = missing
        self.query_string = qs
        return self

    def filter(self, f: FilterOp) -> QueryDsl:
        self.filter_val = f
        return self

    def multi_match(self, s: str, fields: Sequence[str]) -> QueryDsl:
        self.multi_match_val = MultiMatch(query=s, fields=list(fields))
        return self

    def _embed(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.match_all:
            out["match_all"] = {}
        if self.term_map:
            out["term"] = dict(self.term_map)
        if self.query_string is not None:
            out["query_string"] = self.query_string.to_dict()
        if self.multi_match_val is not None:
            out["multi_match"] = self.multi_match_val.to_dict()
        if self.function_score_val:
            out["function_score"] = self.function_score_val
        return out

    def to_dict(self) -> dict[str, Any]:
        """The query body; a filter alongside a query is wrapped as "filtered"."""
        has_query = (
            self.query_string is not None
            or bool(self.term_map)
            or self.match_all
            or self.multi_match_val is not None
        )
        embed = self._embed()
        if self.filter_val is not None and has_query:
            return {"filtered": {"query": embed, "filter": self.filter_val.to_dict()}}
        return embed


def query() -> QueryDsl:
    """Start a new query."""
    return QueryDsl()