"""Snapshot repositories: create, take, restore and list snapshots."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from elasticq.request import Connection

logger = logging.getLogger(__name__)

_FRACTION = re.compile(r"\.(\d+)")


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; None stays None."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


@dataclass
class SnapshotInfo:
    """One snapshot as listed by the server."""

    snapshot: str = ""
    indices: list[str] = field(default_factory=list)
    state: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SnapshotInfo:
        return cls(
            snapshot=data.get("snapshot", ""),
            indices=list(data.get("indices") or []),
            state=data.get("state", ""),
            start_time=_parse_time(data.get("start_time")),
            end_time=_parse_time(data.get("end_time")),
        )


@dataclass
class GetSnapshotsResponse:
    """The snapshots of a repository."""

    snapshots: list[SnapshotInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GetSnapshotsResponse:
        return cls([SnapshotInfo.from_dict(item) for item in data.get("snapshots") or []])


def create_snapshot_repository(
    conn: Connection,
    name: str,
    args: Optional[Mapping[str, Any]],
    settings: Any,
) -> Any:
    """Register a snapshot repository on the cluster."""
    body = conn.do_command("POST", f"/_snapshot/{name}", args, settings)
    return json.loads(body)


def take_snapshot(
    conn: Connection,
    repository: str,
    name: str,
    args: Optional[Mapping[str, Any]],
    query: Any,
) -> Any:
    """Take a snapshot with the given name in an existing repository."""
    body = conn.do_command("PUT", f"/_snapshot/{repository}/{name}", args, query)
    return json.loads(body)


def restore_snapshot(
    conn: Connection,
    repository: str,
    name: str,
    args: Optional[Mapping[str, Any]],
    query: Any,
) -> Any:
    """Restore a named snapshot from an existing repository."""
    body = conn.do_command("POST", f"/_snapshot/{repository}/{name}/_restore", args, query)
    logger.debug("restore response: %s", body.decode("utf-8", "replace"))
    return json.loads(body)


def _get_snapshots(
    conn: Connection,
    repository: str,
    name: str,
    args: Optional[Mapping[str, Any]],
) -> GetSnapshotsResponse:
    body = conn.do_command("GET", f"/_snapshot/{repository}/{name}", args, None)
    return GetSnapshotsResponse.from_dict(json.loads(body))


def get_snapshot_by_name(
    conn: Connection,
    repository: str,
    name: str,
    args: Optional[Mapping[str, Any]],
) -> GetSnapshotsResponse:
    """The snapshots with the given name in a repository."""
    return _get_snapshots(conn, repository, name, args)


def get_snapshots(
    conn: Connection,
    repository: str,
    args: Optional[Mapping[str, Any]],
) -> GetSnapshotsResponse:
    """All snapshots in a repository."""
    return _get_snapshots(conn, repository, "_all", args)