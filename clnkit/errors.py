"""Errors raised by the JSON-RPC client and by plugin commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass
class RpcError:
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> "RpcError":
        """Build an error object from its decoded JSON form."""
        if not isinstance(data, dict):
            raise JSONDecodeFailure("error object must be a JSON object")
        code = data.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            raise JSONDecodeFailure("error object needs an integer `code`")
        if not _I32_MIN <= code <= _I32_MAX:
            raise JSONDecodeFailure(f"error code {code} is out of range")
        message = data.get("message")
        if not isinstance(message, str):
            raise JSONDecodeFailure("error object needs a string `message`")
        return cls(code=code, message=message, data=data.get("data"))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the error object."""
        return {"code": self.code, "message": self.message, "data": self.data}


class ClientError(Exception):
    """Base class of every error raised by the RPC client."""

    _default = "RPC client error"
    _prefix = ""

    def __init__(self, detail: Any = None) -> None:
        super().__init__(self._default if detail is None else detail)

    def __str__(self) -> str:
        return f"{self._prefix}{self.args[0]}"


class JSONDecodeFailure(ClientError):
    """The JSON sent or received could not be handled."""

    _default = "invalid JSON"
    _prefix = "JSON decode error: "


class TransportError(ClientError):
    """The socket could not be reached, written or read."""

    _default = "socket failure"
    _prefix = "IO error response: "


class RpcCallError(ClientError):
    """The server answered with a JSON-RPC error object."""

    def __init__(self, error: RpcError) -> None:
        super().__init__(error)
        self.error = error

    def __str__(self) -> str:
        return f"RPC error response: {self.error!r}"


class MalformedResponseError(ClientError):
    """The response has neither an error nor a result."""

    _default = "Malformed RPC response"


class NonceMismatchError(ClientError):
    """The response id does not match the request id."""

    _default = "Nonce of response did not match nonce of request"


class VersionMismatchError(ClientError):
    """The response carries a `jsonrpc` version other than 2.0."""

    _default = '`jsonrpc` field set to non-"2.0"'


class PluginError(Exception):
    """An error returned by a plugin command, sent back as a JSON-RPC error."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-RPC error object for this error."""
        return {"code": self.code, "message": self.message, "data": self.data}

    def __str__(self) -> str:
        return f"code: {self.code}, msg: {self.message}"