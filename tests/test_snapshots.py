import json
import threading
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from elasticq.request import Connection, RecordNotFound, ResponseError
from elasticq.snapshots import (
    GetSnapshotsResponse,
    SnapshotInfo,
    create_snapshot_repository,
    get_snapshot_by_name,
    get_snapshots,
    restore_snapshot,
    take_snapshot,
)


class _Handler(BaseHTTPRequestHandler):
    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.server.requests.append((self.command, self.path, body))
        status, payload = self.server.reply
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = do_POST = do_PUT = do_DELETE = _handle

    def log_message(self, *args):
        pass


@pytest.fixture
def server():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    httpd.requests = []
    httpd.reply = (200, b'{"acknowledged": true}')
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()


@pytest.fixture
def conn(server):
    return Connection(domain="127.0.0.1", port=str(server.server_address[1]))


LISTING = {
    "snapshots": [
        {
            "snapshot": "snap1",
            "indices": ["alpha", "beta"],
            "state": "SUCCESS",
            "start_time": "2015-03-01T10:00:00.000Z",
            "end_time": "2015-03-01T10:05:30.000Z",
        }
    ]
}


def test_create_snapshot_repository(server, conn):
    settings = {"type": "fs", "settings": {"location": "/tmp/backups"}}
    result = create_snapshot_repository(conn, "backups", None, settings)
    method, path, body = server.requests[0]
    assert method == "POST"
    assert path == "/_snapshot/backups"
    assert json.loads(body) == settings
    assert result == {"acknowledged": True}


def test_take_snapshot_with_args(server, conn):
    query = {"indices": "alpha,beta"}
    result = take_snapshot(conn, "backups", "snap1", {"wait_for_completion": True}, query)
    method, path, body = server.requests[0]
    assert method == "PUT"
    assert path == "/_snapshot/backups/snap1?wait_for_completion=true"
    assert json.loads(body) == query
    assert result["acknowledged"] is True


def test_restore_snapshot(server, conn):
    result = restore_snapshot(conn, "backups", "snap1", None, None)
    method, path, body = server.requests[0]
    assert method == "POST"
    assert path == "/_snapshot/backups/snap1/_restore"
    assert body == b""
    assert result == {"acknowledged": True}


def test_get_snapshots_uses_all(server, conn):
    server.reply = (200, json.dumps(LISTING).encode())
    response = get_snapshots(conn, "backups", None)
    method, path, _ = server.requests[0]
    assert method == "GET"
    assert path == "/_snapshot/backups/_all"
    assert [s.snapshot for s in response.snapshots] == ["snap1"]
    assert response.snapshots[0].indices == ["alpha", "beta"]
    assert response.snapshots[0].state == "SUCCESS"


def test_get_snapshot_by_name_parses_times(server, conn):
    server.reply = (200, json.dumps(LISTING).encode())
    response = get_snapshot_by_name(conn, "backups", "snap1", None)
    assert server.requests[0][1] == "/_snapshot/backups/snap1"
    info = response.snapshots[0]
    assert info.start_time == datetime(2015, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert info.end_time > info.start_time


def test_get_snapshots_missing_repository(server, conn):
    server.reply = (404, b'{"error": "RepositoryMissingException"}')
    with pytest.raises(RecordNotFound):
        get_snapshots(conn, "nowhere", None)


def test_take_snapshot_server_error(server, conn):
    server.reply = (500, b'{"error": "boom"}')
    with pytest.raises(ResponseError):
        take_snapshot(conn, "backups", "snap1", None, None)


def test_response_from_empty_dict():
    assert GetSnapshotsResponse.from_dict({}).snapshots == []


def test_snapshot_info_without_times():
    info = SnapshotInfo.from_dict({"snapshot": "s", "state": "IN_PROGRESS"})
    assert info.start_time is None
    assert info.end_time is None
    assert info.indices == []
    assert info.snapshot == "s"