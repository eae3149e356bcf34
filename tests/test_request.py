import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from elasticq.request import (
    Connection,
    RecordNotFound,
    Request,
    ResponseError,
    escape,
)


class _Handler(BaseHTTPRequestHandler):
    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.server.seen.append(
            {
                "method": self.command,
                "path": self.path,
                "content_type": self.headers.get("Content-Type"),
                "body": body,
            }
        )
        path = self.path.split("?")[0]
        if path == "/ok":
            self._reply(200, b'{"ok": true}')
        elif path == "/missing":
            self._reply(404, b'{"error": "missing", "status": 404}')
        else:
            self._reply(500, b'{"error": "boom"}')

    def _reply(self, status, payload):
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    do_GET = do_POST = do_PUT = do_DELETE = do_HEAD = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    httpd.seen = []
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()


@pytest.fixture
def conn(server):
    return Connection(domain="127.0.0.1", port=str(server.server_address[1]))


def test_escape_none_is_empty():
    assert escape(None) == ""


@pytest.mark.parametrize(
    "args, expected",
    [
        ({"foo": "bar"}, "foo=bar"),
        ({"foo": 1}, "foo=1"),
        ({"foo": 3.141592}, "foo=3.141592"),
        ({"foo": ["bar", "baz"]}, "foo=bar%2Cbaz"),
        ({"foo": True}, "foo=true"),
        ({"foo": False}, "foo=false"),
    ],
)
def test_escape_single_values(args, expected):
    assert escape(args) == expected


def test_escape_combination_sorted():
    result = escape({"foo": "bar", "bar": 1, "baz": 3.141592, "test": ["a", "b"]})
    assert result == "bar=1&baz=3.141592&foo=bar&test=a%2Cb"


def test_escape_float_without_exponent():
    assert escape({"foo": 100.0}) == "foo=100"


@pytest.mark.parametrize("bad", [[1, 2], {"a": 1}, object()])
def test_escape_invalid_type(bad):
    with pytest.raises(TypeError, match="foo"):
        escape({"foo": bad})


def test_do_command_returns_body_and_query(conn, server):
    body = conn.do_command("GET", "/ok", {"pretty": "1"}, None)
    assert json.loads(body) == {"ok": True}
    assert server.seen[-1]["path"] == "/ok?pretty=1"
    assert server.seen[-1]["method"] == "GET"


def test_do_command_sends_json_body(conn, server):
    result = conn.do_command("PUT", "/ok", None, {"name": "bob"})
    assert json.loads(result) == {"ok": True}
    assert json.loads(server.seen[-1]["body"]) == {"name": "bob"}


def test_do_command_sends_string_body(conn, server):
    result = conn.do_command("POST", "/ok", None, '{"raw": 1}')
    assert json.loads(result) == {"ok": True}
    assert server.seen[-1]["body"] == b'{"raw": 1}'


def test_do_command_not_found(conn):
    with pytest.raises(RecordNotFound) as info:
        conn.do_command("DELETE", "/missing", None, None)
    assert b"missing" in info.value.body


def test_do_command_server_error(conn):
    with pytest.raises(ResponseError) as info:
        conn.do_command("GET", "/boom", None, None)
    assert info.value.status == 500


def test_request_tracer_called(conn):
    calls = []
    conn.request_tracer = lambda method, url, body: calls.append((method, url, body))
    conn.do_command("POST", "/ok", None, "hello")
    assert calls == [("POST", conn.base_url + "/ok", "hello")]


def test_request_set_body_json(conn, server):
    request = conn.new_request("POST", "/ok")
    request.set_body_json({"a": [1, 2]})
    status, body = request.do()
    assert status == 200
    assert server.seen[-1]["content_type"] == "application/json"
    assert json.loads(server.seen[-1]["body"]) == {"a": [1, 2]}


def test_request_set_body_string_and_bytes(conn, server):
    request = Request("PUT", conn.base_url + "/ok")
    request.set_body_string("text")
    assert request.body == b"text"
    request.set_body_bytes(b"raw")
    status, _ = request.do()
    assert status == 200
    assert server.seen[-1]["body"] == b"raw"


def test_request_do_404_raises(conn):
    request = Request("HEAD", conn.base_url + "/missing")
    with pytest.raises(RecordNotFound):
        request.do()


def test_request_do_error_status_returned(conn):
    request = Request("GET", conn.base_url + "/boom")
    status, body = request.do()
    assert status == 500
    assert json.loads(body) == {"error": "boom"}