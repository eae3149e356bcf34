"""Highlighting for the search DSL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class HighlightEmbed:
    """Highlight settings, used globally or per field; empty settings are left out."""

    boundary_chars_val: str = ""
    boundary_max_scan_val: int = 0
    pre_tags: Optional[list[str]] = None
    post_tags: Optional[list[str]] = None
    fragment_size_val: int = 0
    num_of_fragments_val: int = 0
    highlight_query: Any = None
    matched_fields_val: list[str] = field(default_factory=list)
    order_val: str = ""
    type_val: str = ""

    def boundary_chars(self, chars: str) -> HighlightEmbed:
        self.boundary_chars_val = chars
        return self

    def boundary_max_scan(self, maximum: int) -> HighlightEmbed:
        self.boundary_max_scan_val = maximum
        return self

    def frag_size(self, size: int) -> HighlightEmbed:
        self.fragment_size_val = size
        return self

    def num_frags(self, num_frags: int) -> HighlightEmbed:
        self.num_of_fragments_val = num_frags
        return self

    def matched_fields(self, *fields: str) -> HighlightEmbed:
        self.matched_fields_val = list(fields)
        return self

    def order(self, order: str) -> HighlightEmbed:
        self.order_val = order
        return self

    def tags(self, pre: str, post: str) -> HighlightEmbed:
        """Append a pair of pre and post tags."""
        self.pre_tags = [*(self.pre_tags or []), pre]
        self.post_tags = [*(self.post_tags or []), post]
        return self

    def type(self, highlight_type: str) -> HighlightEmbed:
        self.type_val = highlight_type
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.boundary_chars_val:
            out["boundary_chars"] = self.boundary_chars_val
        if self.boundary_max_scan_val:
            out["boundary_max_scan"] = self.boundary_max_scan_val
        if self.pre_tags:
            out["pre_tags"] = list(self.pre_tags)
        if self.post_tags:
            out["post_tags"] = list(self.post_tags)
        if self.fragment_size_val:
            out["fragment_size"] = self.fragment_size_val
        if self.num_of_fragments_val:
            out["number_of_fragments"] = self.num_of_fragments_val
        if self.highlight_query is not None:
            out["highlight_query"] = self.highlight_query.to_dict()
        if self.matched_fields_val:
            out["matched_fields"] = list(self.matched_fields_val)
        if self.order_val:
            out["order"] = self.order_val
        if self.type_val:
            out["type"] = self.type_val
        return out


class HighlightDsl:
    """The highlight section of a search."""

    def __init__(self) -> None:
        self.settings: Optional[HighlightEmbed] = None
        self.tag_schema = ""
        self.fields: Optional[dict[str, HighlightEmbed]] = None

    def add_field(self, name: str, settings: Optional[HighlightEmbed]) -> HighlightDsl:
        """Highlight a field, with its own settings if given."""
        if self.fields is None:
            self.fields = {}
        self.fields[name] = settings if settings is not None else HighlightEmbed()
        return self

    def schema(self, schema: str) -> HighlightDsl:
        self.tag_schema = schema
        return self

    def set_options(self, options: HighlightEmbed) -> HighlightDsl:
        """Global settings, written at the top level of the section."""
        self.settings = options
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.fields is not None:
            out["fields"] = {name: embed.to_dict() for name, embed in self.fields.items()}
        if self.tag_schema:
            out["tag_schema"] = self.tag_schema
        if self.settings is not None:
            out.update(self.settings.to_dict())
        return out


def new_highlight() -> HighlightDsl:
    return HighlightDsl()


def new_highlight_opts() -> HighlightEmbed:
    return HighlightEmbed()