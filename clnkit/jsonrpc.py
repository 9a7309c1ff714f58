"""JSON-RPC 2.0 request and response objects and payload helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from clnkit.errors import (
    JSONDecodeFailure,
    MalformedResponseError,
    RpcCallError,
    RpcError,
)

JSONRPC_VERSION = "2.0"
_MAX_INT_ID = 0xFFFF

RequestId = Union[str, int]


def normalize_id(value: Any) -> RequestId:
    """Check a request id: a string, or an integer from 0 to 65535."""
    if isinstance(value, bool):
        raise TypeError("a request id cannot be a boolean")
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        if 0 <= value <= _MAX_INT_ID:
            return value
        raise ValueError(f"integer request id {value} is out of range")
    raise TypeError(f"a request id must be a string or an integer, not {type(value).__name__}")


def init_payload() -> dict[str, Any]:
    """Return a new empty JSON object."""
    return {}


def init_success_response(id: Any) -> dict[str, Any]:
    """Return the skeleton of a successful response to the request `id`."""
    return {"id": normalize_id(id), "jsonrpc": JSONRPC_VERSION}


def _plain_params(params: Any) -> Any:
    to_params = getattr(params, "to_params", None)
    return to_params() if callable(to_params) else params


@dataclass
class Request:
    """A JSON-RPC request; without an id it is a notification."""

    method: str
    params: Any
    id: Optional[RequestId] = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, leaving out the id when there is none."""
        out: dict[str, Any] = {"method": self.method, "params": _plain_params(self.params)}
        if self.id is not None:
            out["id"] = self.id
        out["jsonrpc"] = self.jsonrpc
        return out

    def to_json(self) -> str:
        """Serialize the request compactly."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Request":
        """Build a request from its decoded JSON form."""
        if not isinstance(data, dict):
            raise JSONDecodeFailure("request must be a JSON object")
        method = data.get("method")
        if not isinstance(method, str):
            raise JSONDecodeFailure("request needs a string `method`")
        if "params" not in data:
            raise JSONDecodeFailure("missing field `params`")
        jsonrpc = data.get("jsonrpc")
        if not isinstance(jsonrpc, str):
            raise JSONDecodeFailure("request needs a string `jsonrpc`")
        raw_id = data.get("id")
        try:
            request_id = None if raw_id is None else normalize_id(raw_id)
        except (TypeError, ValueError) as exc:
            raise JSONDecodeFailure(str(exc)) from exc
        return cls(method=method, params=data["params"], id=request_id, jsonrpc=jsonrpc)


@dataclass
class Response:
    """A JSON-RPC response carrying either a result or an error."""

    id: RequestId
    result: Any = None
    error: Optional[RpcError] = None
    jsonrpc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Response":
        """Build a response from its decoded JSON form."""
        if not isinstance(data, dict):
            raise JSONDecodeFailure("response must be a JSON object")
        if "id" not in data:
            raise JSONDecodeFailure("missing field `id`")
        try:
            response_id = normalize_id(data["id"])
        except (TypeError, ValueError) as exc:
            raise JSONDecodeFailure(str(exc)) from exc
        raw_error = data.get("error")
        error = None if raw_error is None else RpcError.from_dict(raw_error)
        jsonrpc = data.get("jsonrpc")
        if jsonrpc is not None and not isinstance(jsonrpc, str):
            raise JSONDecodeFailure("`jsonrpc` must be a string")
        return cls(id=response_id, result=data.get("result"), error=error, jsonrpc=jsonrpc)

    def into_result(self) -> Any:
        """Return the result, or raise the error the server sent."""
        if self.error is not None:
            raise RpcCallError(self.error)
        if self.result is None:
            raise MalformedResponseError()
        return self.result

    def is_none(self) -> bool:
        """Tell whether the result is empty."""
        return self.result is None