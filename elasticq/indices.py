"""Index administration calls: create, delete, flush, refresh and friends."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Mapping, Optional

from elasticq.request import Connection, RecordNotFound


def _decode(body: bytes) -> Any:
    return json.loads(body)


def _joined(indices: tuple[str, ...]) -> str:
    return ",".join(indices)


def _settings_body(settings: Any, allow_mapping: bool) -> Any:
    """Turn a settings object into a JSON-ready value, or raise TypeError."""
    if isinstance(settings, Mapping):
        if allow_mapping:
            return dict(settings)
        raise TypeError("Settings kind was not struct")
    if hasattr(settings, "to_dict"):
        return settings.to_dict()
    if dataclasses.is_dataclass(settings) and not isinstance(settings, type):
        return dataclasses.asdict(settings)
    if allow_mapping:
        raise TypeError("Settings kind was not struct or map")
    raise TypeError("Settings kind was not struct")


def clear_cache(
    conn: Connection,
    clear_id: bool,
    clear_bloom: bool,
    args: Optional[Mapping[str, Any]],
    *indices: str,
) -> Any:
    """Clear the caches of the given indices, or of all indices.

    clear_id and clear_bloom are accepted but not sent; pass cache options in args.
    """
    url = f"/{_joined(indices)}/_cache/clear" if indices else "/_cache/clear"
    return _decode(conn.do_command("POST", url, args, None))


def create_index(conn: Connection, index: str) -> Any:
    """Create an index."""
    if not index:
        raise ValueError("You must specify an index to create")
    return _decode(conn.do_command("PUT", f"/{index}", None, None))


def create_index_with_settings(conn: Connection, index: str, settings: Any) -> Any:
    """Create an index with the given settings (a mapping or a dataclass)."""
    body = _settings_body(settings, allow_mapping=True)
    if not index:
        raise ValueError("You must specify an index to create")
    return _decode(conn.do_command("PUT", f"/{index}", None, body))


def delete_index(conn: Connection, index: str) -> Any:
    """Delete an index."""
    if not index:
        raise ValueError("You must specify at least one index to delete")
    return _decode(conn.do_command("DELETE", f"/{index}", None, None))


def delete_mapping(conn: Connection, index: str, type_name: str) -> Any:
    """Delete the mapping of a type from an index."""
    if not index:
        raise ValueError("You must specify at least one index to delete a mapping from")
    if not type_name:
        raise ValueError("You must specify at least one mapping to delete")
    return _decode(conn.do_command("DELETE", f"/{index}/{type_name}", None, None))


def flush(conn: Connection, *indices: str) -> Any:
    """Flush the given indices, or all indices."""
    url = f"/{_joined(indices)}/_flush" if indices else "/_flush"
    return _decode(conn.do_command("POST", url, None, None))


def indices_exists(conn: Connection, *indices: str) -> bool:
    """True if the indices exist, False if the server answers 404.

    Any other failure is raised.
    """
    url = f"/{_joined(indices)}" if indices else ""
    try:
        conn.do_command("HEAD", url, None, None)
    except RecordNotFound:
        return False
    return True


def _open_close(conn: Connection, index: str, mode: str) -> Any:
    url = f"/{index}/{mode}" if index else f"/{mode}"
    return _decode(conn.do_command("POST", url, None, None))


def open_indices(conn: Connection) -> Any:
    """Open every index."""
    return _open_close(conn, "_all", "_open")


def close_indices(conn: Connection) -> Any:
    """Close every index."""
    return _open_close(conn, "_all", "_close")


def open_index(conn: Connection, index: str) -> Any:
    """Open one index."""
    return _open_close(conn, index, "_open")


def close_index(conn: Connection, index: str) -> Any:
    """Close one index."""
    return _open_close(conn, index, "_close")


def optimize_indices(conn: Connection, args: Optional[Mapping[str, Any]], *indices: str) -> Any:
    """Optimize the given indices, or all indices."""
    url = f"/{_joined(indices)}/_optimize" if indices else "/_optimize"
    return _decode(conn.do_command("POST", url, args, None))


def put_settings(conn: Connection, index: str, settings: Any) -> Any:
    """Update index settings; settings must be a dataclass or have to_dict."""
    body = _settings_body(settings, allow_mapping=False)
    url = f"/{index}/_settings" if index else "/_settings"
    return _decode(conn.do_command("PUT", url, None, body))


def refresh(conn: Connection, *indices: str) -> Any:
    """Refresh the given indices, or all indices."""
    url = f"/{_joined(indices)}/_refresh" if indices else "/_refresh"
    return _decode(conn.do_command("POST", url, None, None))


def snapshot(conn: Connection, *indices: str) -> Any:
    """Snapshot the given indices, or all indices, through the gateway."""
    url = f"/{_joined(indices)}/_gateway/snapshot" if indices else "/_gateway/snapshot"
    return _decode(conn.do_command("POST", url, None, None))


def status(conn: Connection, args: Optional[Mapping[str, Any]], *indices: str) -> Any:
    """Status details of the given indices, or of all indices."""
    url = f"/{_joined(indices)}/_status" if indices else "/_status"
    return _decode(conn.do_command("GET", url, args, None))