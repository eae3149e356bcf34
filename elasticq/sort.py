"""Sort clauses for the search DSL."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class SortDsl:
    """Sort on one field, ascending unless made descending."""

    name: str
    is_desc: bool = False

    def desc(self) -> SortDsl:
        self.is_desc = True
        return self

    def asc(self) -> SortDsl:
        self.is_desc = False
        return self

    def to_value(self) -> Any:
        """The JSON value: the field name, or {name: "desc"}."""
        if self.is_desc:
            return {self.name: "desc"}
        return self.name


def sort(field: str) -> SortDsl:
    """Start a sort on the given field."""
    return SortDsl(field)