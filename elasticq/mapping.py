"""Type mappings: options, building properties from dataclasses, and put-mapping calls.

Properties are read from dataclass fields. A field's metadata may hold:

* ``"json"``: the JSON name, as ``"name,omitempty"``; ``"-"`` skips the field.
* ``"elastic"``: comma separated ``key:value`` mapping attributes, such as
  ``"type:string,index:not_analyzed"``.
* ``"embedded"``: true to merge a nested dataclass's properties into the parent.

Field annotations are used as given; where an annotation is a string, a
dataclass ``default_factory`` stands in for it.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import json
import types
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union, get_args, get_origin

from elasticq.request import Connection

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
)


@dataclass
class TimestampOptions:
    enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled}


@dataclass
class AnalyzerOptions:
    path: str = ""
    index: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in (("path", self.path), ("index", self.index)) if value}


@dataclass
class ParentOptions:
    type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type}


@dataclass
class RoutingOptions:
    required: bool = False
    path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in (("required", self.required), ("path", self.path)) if value}


@dataclass
class SizeOptions:
    enabled: bool = False
    store: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in (("enabled", self.enabled), ("store", self.store)) if value}


@dataclass
class SourceOptions:
    enabled: bool = False
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.enabled:
            out["enabled"] = True
        if self.includes:
            out["includes"] = list(self.includes)
        if self.excludes:
            out["excludes"] = list(self.excludes)
        return out


@dataclass
class TypeOptions:
    store: bool = False
    index: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in (("store", self.store), ("index", self.index)) if value}


@dataclass
class TTLOptions:
    enabled: bool = False
    default: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"enabled": self.enabled}
        if self.default:
            out["default"] = self.default
        return out


@dataclass
class IdOptions:
    index: str = ""
    path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in (("index", self.index), ("path", self.path)) if value}


@dataclass
class MappingOptions:
    """The settings of one type mapping; unset optional sections are left out."""

    id: IdOptions = field(default_factory=IdOptions)
    timestamp: TimestampOptions = field(default_factory=TimestampOptions)
    analyzer: Optional[AnalyzerOptions] = None
    parent: Optional[ParentOptions] = None
    routing: Optional[RoutingOptions] = None
    size: Optional[SizeOptions] = None
    source: Optional[SourceOptions] = None
    ttl: Optional[TTLOptions] = None
    type: Optional[TypeOptions] = None
    properties: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "_id": self.id.to_dict(),
            "_timestamp": self.timestamp.to_dict(),
        }
        optional = (
            ("_analyzer", self.analyzer),
            ("_parent", self.parent),
            ("_routing", self.routing),
            ("_size", self.size),
            ("_source", self.source),
            ("_ttl", self.ttl),
            ("_type", self.type),
        )
        for key, section in optional:
            if section is not None:
                out[key] = section.to_dict()
        out["properties"] = self.properties
        return out


def mapping_for_type(type_name: str, opts: MappingOptions) -> dict[str, MappingOptions]:
    """A mapping holding the options of one type."""
    return {type_name: opts}


def mapping_options(mapping: Mapping[str, MappingOptions]) -> MappingOptions:
    """The options of the (first) type in a mapping."""
    for options in mapping.values():
        return options
    raise ValueError(f"Malformed input: {dict(mapping)!r}")


def split_tag(tag: str) -> list[str]:
    """Split an elastic tag into its comma separated attributes."""
    tag = tag.strip(" ")
    if not tag:
        return []
    return tag.split(",")


def _target_type(tp: Any) -> Any:
    """Look through Optional and sequence annotations to the element type."""
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            tp = args[0]
            origin = get_origin(tp)
    if origin in _SEQUENCE_ORIGINS:
        args = get_args(tp)
        if args:
            tp = args[0]
    return tp


def _field_type(fld: dataclasses.Field) -> Any:
    """The field's annotation, or its dataclass default factory if the annotation is text."""
    if isinstance(fld.type, str):
        factory = fld.default_factory
        if isinstance(factory, type) and dataclasses.is_dataclass(factory):
            return factory
        return None
    return fld.type


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def get_properties(cls: Any, prop: dict[str, Any]) -> None:
    """Add the mapping properties described by a dataclass's fields to prop."""
    if not dataclasses.is_dataclass(cls):
        raise TypeError("instance kind was not struct")
    if not isinstance(cls, type):
        cls = type(cls)
    for fld in dataclasses.fields(cls):
        name = str(fld.metadata.get("json", "")).split(",")[0]
        if name == "-":
            continue
        if not name:
            name = fld.name

        attrs: dict[str, Any] = {}
        for attr in split_tag(str(fld.metadata.get("elastic", ""))):
            parts = attr.split(":")
            if len(parts) < 2:
                raise ValueError(f"malformed elastic attribute {attr!r} on field {fld.name}")
            attrs[parts[0]] = parts[1]

        if not attrs or attrs.get("type") == "nested":
            target = _target_type(_field_type(fld))
            if _is_dataclass_type(target):
                if fld.metadata.get("embedded"):
                    get_properties(target, prop)
                else:
                    inner: dict[str, Any] = {}
                    get_properties(target, inner)
                    attrs["properties"] = inner
        if attrs:
            prop[name] = attrs


def put_mapping(
    conn: Connection,
    index: str,
    type_name: str,
    instance: Any,
    opt: MappingOptions,
) -> bytes:
    """Put the mapping of a type, with properties taken from a dataclass.

    Properties already in opt are kept; opt itself is not changed.
    Returns the raw response body.
    """
    if not dataclasses.is_dataclass(instance):
        raise TypeError("instance kind was not struct")
    properties = dict(opt.properties or {})
    get_properties(instance, properties)
    options = dataclasses.replace(opt, properties=properties)
    body = json.dumps({type_name: options.to_dict()})
    return conn.do_command("PUT", f"/{index}/{type_name}/_mapping", None, body)


def put_mapping_from_json(
    conn: Connection,
    index: str,
    type_name: str,
    mapping: Union[bytes, str],
) -> bytes:
    """Put a mapping given as raw JSON, without checking its structure.

    Returns the raw response body.
    """
    if isinstance(mapping, (bytes, bytearray)):
        mapping = bytes(mapping).decode("utf-8")
    return conn.do_command("PUT", f"/{index}/{type_name}/_mapping", None, mapping)