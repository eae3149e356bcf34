"""The chainable search builder and its request bodies."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from elasticq.aggregate import AggregateDsl
from elasticq.facet import FacetDsl
from elasticq.filter import FilterOp
from elasticq.highlight import HighlightDsl
from elasticq.query import QueryDsl, Term, query
from elasticq.request import Connection
from elasticq.sort import SortDsl


class SearchDsl:
    """A search against one index, built with chained calls."""

    def __init__(self, index: str) -> None:
        self.index = index
        self.args: dict[str, Any] = {}
        self.types: list[str] = []
        self.from_val = 0
        self.size_val = 0
        self.facet_val: Optional[FacetDsl] = None
        self.query_val: Optional[QueryDsl] = None
        self.sort_body: list[SortDsl] = []
        self.filter_val: Optional[FilterOp] = None
        self.aggregates_val: dict[str, AggregateDsl] = {}
        self.highlight_val: Optional[HighlightDsl] = None

    def bytes(self, conn: Connection) -> bytes:
        """Run the search and return the raw response body."""
        return conn.do_command("POST", self.url(), self.args, self)

    def result(self, conn: Connection) -> dict[str, Any]:
        """Run the search and return the decoded response."""
        return json.loads(self.bytes(conn))

    def url(self) -> str:
        types = "/" + ",".join(self.types) if self.types else ""
        return f"/{self.index}{types}/_search"

    def pretty(self) -> SearchDsl:
        self.args["pretty"] = "1"
        return self

    def type(self, index_type: str) -> SearchDsl:
        """Restrict the search to a document type; may be called repeatedly."""
        self.types.append(index_type)
        return self

    def from_(self, from_: str) -> SearchDsl:
        self.args["from"] = from_
        return self

    def search(self, srch: str) -> SearchDsl:
        """A simple query_string search."""
        self.query_val = query().search(srch)
        return self

    def size(self, size: str) -> SearchDsl:
        self.args["size"] = size
        return self

    def fields(self, *fields: str) -> SearchDsl:
        self.args["fields"] = ",".join(fields)
        return self

    def source(self, return_source: bool) -> SearchDsl:
        self.args["_source"] = "true" if return_source else "false"
        return self

    def facet(self, f: FacetDsl) -> SearchDsl:
        self.facet_val = f
        return self

    def aggregates(self, *aggs: AggregateDsl) -> SearchDsl:
        """Add aggregations, keyed by their names."""
        for agg in aggs:
            self.aggregates_val[agg.name] = agg
        return self

    def query(self, q: QueryDsl) -> SearchDsl:
        self.query_val = q
        return self

    def filter(self, fl: FilterOp) -> SearchDsl:
        """Set the filter, replacing any earlier one."""
        self.filter_val = fl
        return self

    def sort(self, *sorts: SortDsl) -> SearchDsl:
        self.sort_body.extend(sorts)
        return self

    def scroll(self, duration: str) -> SearchDsl:
        self.args["scroll"] = duration
        return self

    def search_type(self, search_type: str) -> SearchDsl:
        self.args["search_type"] = search_type
        return self

    def highlight(self, highlight: HighlightDsl) -> SearchDsl:
        self.highlight_val = highlight
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.from_val:
            out["from"] = self.from_val
        if self.size_val:
            out["size"] = self.size_val
        if self.facet_val is not None:
            out["facets"] = self.facet_val.to_dict()
        if self.query_val is not None:
            out["query"] = self.query_val.to_dict()
        if self.sort_body:
            out["sort"] = [s.to_value() for s in self.sort_body]
        if self.filter_val is not None:
            out["filter"] = self.filter_val.to_dict()
        if self.aggregates_val:
            out["aggregations"] = {name: agg.to_dict() for name, agg in self.aggregates_val.items()}
        if self.highlight_val is not None:
            out["highlight"] = self.highlight_val.to_dict()
        return out


def search(index: str) -> SearchDsl:
    """Start a search on the given index."""
    return SearchDsl(index)


@dataclass
class OneTermQuery:
    """A query holding a single term."""

    term: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"query": {"term": self.term}}


@dataclass
class SearchRequest:
    """A plain search body with paging, one term query and a term filter."""

    from_: int = 0
    size: int = 0
    query: OneTermQuery = field(default_factory=OneTermQuery)
    filter_term: Term = field(default_factory=Term)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.from_:
            out["from"] = self.from_
        if self.size:
            out["size"] = self.size
        out["query"] = self.query.to_dict()
        out["filter"] = {"term": self.filter_term.to_dict()}
        return out