"""A JSON-RPC client talking to a server over a UNIX socket."""

from __future__ import annotations

import codecs
import json
import socket
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional, Union

from clnkit.errors import (
    JSONDecodeFailure,
    MalformedResponseError,
    TransportError,
    VersionMismatchError,
)
from clnkit.jsonrpc import JSONRPC_VERSION, Request, Response

Timeout = Optional[Union[float, timedelta]]

_CHUNK = 65536
_CLOSERS = ("}", "]", '"')


def _seconds(timeout: Timeout) -> Optional[float]:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return timeout


def _read_document(sock: socket.socket) -> Any:
    """Read the first JSON value sent on the socket."""
    decoder = json.JSONDecoder()
    text = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    while True:
        chunk = sock.recv(_CHUNK)
        at_end = not chunk
        try:
            buffer += text.decode(chunk, final=at_end)
        except UnicodeDecodeError as exc:
            raise JSONDecodeFailure(str(exc)) from exc
        stripped = buffer.strip()
        if not stripped:
            if at_end:
                raise MalformedResponseError()
            continue
        if at_end or stripped.endswith(_CLOSERS):
            try:
                value, _ = decoder.raw_decode(stripped)
                return value
            except json.JSONDecodeError as exc:
                if at_end:
                    raise JSONDecodeFailure(str(exc)) from exc


class Client:
    """Handle to a JSON-RPC server listening on a UNIX socket.

    Every request opens a fresh connection, so the request id is always "0".
    """

    def __init__(self, sockpath: Union[str, Path], timeout: Timeout = None) -> None:
        self.sockpath = Path(sockpath)
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"Client(sockpath={str(self.sockpath)!r}, timeout={self.timeout!r})"

    def send_request(self, method: str, params: Any) -> Response:
        """Send one request and return the decoded response."""
        request = Request(method=method, params=params, id="0", jsonrpc=JSONRPC_VERSION)
        try:
            payload = request.to_json().encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise JSONDecodeFailure(str(exc)) from exc
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.connect(str(self.sockpath))
                sock.settimeout(_seconds(self.timeout))
                sock.sendall(payload)
                document = _read_document(sock)
        except OSError as exc:
            raise TransportError(str(exc)) from exc
        response = Response.from_dict(document)
        if response.jsonrpc is not None and response.jsonrpc != JSONRPC_VERSION:
            raise VersionMismatchError()
        return response