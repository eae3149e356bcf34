"""HTTP transport for talking to an Elasticsearch node."""

from __future__ import annotations

import base64
import json
import math
import struct
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Mapping, Optional


class RecordNotFound(Exception):
    """The server answered 404: the record, index or mapping does not exist."""

    def __init__(self, body: bytes = b"") -> None:
        super().__init__("record not found")
        self.body = body


class ResponseError(Exception):
    """The server answered with an error status other than 404."""

    def __init__(self, status: int, body: bytes) -> None:
        text = body.decode("utf-8", "replace")
        super().__init__(f"request failed with status {status}: {text}")
        self.status = status
        self.body = body


def _format_float32(value: float) -> str:
    """Shortest decimal text that reads back as the same 32-bit float, no exponent."""
    if math.isnan(value):
        return "NaN"
    try:
        single = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return "+Inf" if value > 0 else "-Inf"
    if math.isinf(single):
        return "+Inf" if single > 0 else "-Inf"
    text = repr(single)
    for digits in range(1, 10):
        candidate = f"{single:.{digits}g}"
        if struct.unpack("f", struct.pack("f", float(candidate)))[0] == single:
            text = candidate
            break
    return format(Decimal(text), "f")


def _format_arg(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float32(value)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return ",".join(value)
    raise TypeError(f"Could not format URL argument: {key}")


def escape(args: Optional[Mapping[str, Any]]) -> str:
    """Encode request arguments as a query string, keys in sorted order."""
    if not args:
        return ""
    pairs = [(key, _format_arg(key, value)) for key, value in sorted(args.items())]
    return urllib.parse.urlencode(pairs)


def _json_default(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if hasattr(value, "to_value"):
        return value.to_value()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode_body(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, default=_json_default).encode("utf-8")


class Request:
    """A single HTTP request to the cluster."""

    def __init__(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Optional[bytes] = None,
        timeout: float = 60.0,
    ) -> None:
        self.method = method
        self.url = url
        self.headers = dict(headers or {})
        self.body = body
        self.timeout = timeout

    def set_body_json(self, data: Any) -> None:
        """Serialise data as JSON and use it as the body."""
        self.set_body_bytes(json.dumps(data, default=_json_default).encode("utf-8"))
        self.headers["Content-Type"] = "application/json"

    def set_body_string(self, body: str) -> None:
        self.set_body_bytes(body.encode("utf-8"))

    def set_body_bytes(self, body: bytes) -> None:
        self.body = bytes(body)

    def do(self) -> tuple[int, bytes]:
        """Send the request and return the status code and body.

        Raises RecordNotFound when the server answers 404.
        """
        request = urllib.request.Request(
            self.url, data=self.body, headers=self.headers, method=self.method
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status, data = response.status, response.read()
        except urllib.error.HTTPError as exc:
            status, data = exc.code, exc.read()
            exc.close()
        if status == 404:
            raise RecordNotFound(data)
        return status, data


@dataclass
class Connection:
    """Connection settings for one Elasticsearch node."""

    domain: str = "localhost"
    port: str = "9200"
    protocol: str = "http"
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = 60.0
    request_tracer: Optional[Callable[[str, str, str], None]] = None

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.domain}:{self.port}"

    def new_request(self, method: str, path: str, query: str = "") -> Request:
        url = self.base_url + path
        if query:
            url += ("&" if "?" in path else "?") + query
        headers = {"Accept": "application/json"}
        if self.username is not None:
            credentials = f"{self.username}:{self.password or ''}".encode("utf-8")
            headers["Authorization"] = "Basic " + base64.b64encode(credentials).decode("ascii")
        return Request(method, url, headers=headers, timeout=self.timeout)

    def do_command(
        self,
        method: str,
        url: str,
        args: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> bytes:
        """Run a request and return the response body.

        Raises RecordNotFound on 404 and ResponseError on other error statuses.
        """
        request = self.new_request(method, url, escape(args))
        payload = _encode_body(body)
        if payload is not None:
            request.set_body_bytes(payload)
        if self.request_tracer is not None:
            text = payload.decode("utf-8", "replace") if payload is not None else ""
            self.request_tracer(method, request.url, text)
        status, data = request.do()
        if status > 304:
            raise ResponseError(status, data)
        return data