import pytest

from clnkit.errors import (
    ClientError,
    JSONDecodeFailure,
    MalformedResponseError,
    NonceMismatchError,
    PluginError,
    RpcCallError,
    RpcError,
    TransportError,
    VersionMismatchError,
)


def test_rpc_error_round_trip():
    original = {"code": -32601, "message": "Unknown command", "data": {"x": [1]}}
    error = RpcError.from_dict(original)
    assert error.code == -32601
    assert error.message == "Unknown command"
    assert error.to_dict() == original


def test_rpc_error_data_defaults_to_none():
    error = RpcError.from_dict({"code": 1, "message": "m"})
    assert error.data is None
    assert error == RpcError(1, "m")


@pytest.mark.parametrize(
    "payload",
    [
        {"message": "no code"},
        {"code": "1", "message": "m"},
        {"code": True, "message": "m"},
        {"code": 1},
        {"code": 2**31, "message": "m"},
        ["not", "an", "object"],
    ],
)
def test_rpc_error_rejects_malformed(payload):
    with pytest.raises(JSONDecodeFailure):
        RpcError.from_dict(payload)


def test_fixed_messages():
    assert str(MalformedResponseError()) == "Malformed RPC response"
    assert str(NonceMismatchError()) == "Nonce of response did not match nonce of request"
    assert str(VersionMismatchError()) == '`jsonrpc` field set to non-"2.0"'


def test_prefixed_messages():
    assert str(JSONDecodeFailure("bad")) == "JSON decode error: bad"
    assert str(TransportError("gone")) == "IO error response: gone"


def test_rpc_call_error_keeps_error():
    error = RpcError(-1, "boom")
    exc = RpcCallError(error)
    assert exc.error is error
    assert str(exc).startswith("RPC error response: ")
    assert "boom" in str(exc)


@pytest.mark.parametrize(
    ("exc", "prefix"),
    [
        (JSONDecodeFailure("bad"), "JSON decode error: "),
        (TransportError("gone"), "IO error response: "),
        (RpcCallError(RpcError(0, "x")), "RPC error response: "),
        (MalformedResponseError(), "Malformed RPC response"),
        (NonceMismatchError(), "Nonce of response did not match"),
        (VersionMismatchError(), "`jsonrpc` field set to non-"),
    ],
)
def test_client_errors_share_base(exc, prefix):
    with pytest.raises(ClientError) as info:
        raise exc
    assert info.value is exc
    assert str(info.value).startswith(prefix)


def test_plugin_error():
    exc = PluginError(-1, "boom")
    assert str(exc) == "code: -1, msg: boom"
    assert exc.to_dict() == {"code": -1, "message": "boom", "data": None}


def test_plugin_error_with_data():
    exc = PluginError(7, "oops", {"detail": "more"})
    assert exc.to_dict()["data"] == {"detail": "more"}
    with pytest.raises(PluginError):
        raise exc