import io
import json

import pytest

from clnkit.demo_plugin import (
    HelloRPC,
    OnChannelOpened,
    build_plugin,
    foo_macro,
    main,
    on_rpc,
)


def _messages(text):
    decoder = json.JSONDecoder()
    out = []
    pos = 0
    text = text.strip()
    while pos < len(text):
        value, end = decoder.raw_decode(text, pos)
        out.append(value)
        pos = end
        while pos < len(text) and text[pos].isspace():
            pos += 1
    return out


def _request(method, params, id=None):
    req = {"jsonrpc": "2.0", "method": method, "params": params}
    if id is not None:
        req["id"] = id
    return req


INIT_PARAMS = {
    "options": {"foo": True},
    "configuration": {
        "lightning-dir": "/tmp/lightning",
        "rpc-file": "lightning-rpc",
        "startup": True,
        "network": "regtest",
        "feature_set": {},
    },
}


def test_plugin_rpc_call_hello():
    output = io.StringIO()
    plugin = build_plugin(output)
    response = plugin.handle_request(_request("hello", {}, id="0"))
    assert "result" in response
    assert "error" not in response
    assert "language" in response["result"]
    logs = _messages(output.getvalue())
    assert logs[0]["method"] == "log"
    assert logs[0]["params"]["level"] == "debug"


def test_plugin_macros_rpc_call():
    plugin = build_plugin(io.StringIO())
    response = plugin.handle_request(_request("foo_macro", {}, id="0"))
    assert "is_dynamic" in response["result"]
    assert response["result"]["is_dynamic"] is True
    assert response["result"]["rpc_request"] == {}


def test_manifest_lists_everything_registered():
    plugin = build_plugin(io.StringIO())
    manifest = plugin.handle_request(_request("getmanifest", {}, id=1))["result"]
    assert {m["name"] for m in manifest["rpcmethods"]} == {"hello", "foo_macro"}
    assert set(manifest["subscriptions"]) == {"channel_opened", "rpc_command"}
    assert [o["name"] for o in manifest["options"]] == ["foo"]
    assert manifest["options"][0]["type"] == "flag"
    assert manifest["dynamic"] is True


def test_init_runs_callback_and_stores_options():
    output = io.StringIO()
    plugin = build_plugin(output)
    response = plugin.handle_request(_request("init", INIT_PARAMS, id=2))
    assert response["result"] == {}
    assert plugin.get_opt("foo") is True
    assert plugin.configuration.network == "regtest"
    logs = _messages(output.getvalue())
    assert logs[-1]["params"]["message"] == "Custom init method called"


def test_channel_opened_notification_logs():
    output = io.StringIO()
    plugin = build_plugin(output)
    assert plugin.handle_request(_request("channel_opened", {"id": "peer"})) is None
    logs = _messages(output.getvalue())
    assert logs[-1]["params"]["message"] == "A new channel was opened!"


def test_rpc_command_notification_logs_info():
    output = io.StringIO()
    plugin = build_plugin(output)
    plugin.handle_request(_request("rpc_command", {}))
    logs = _messages(output.getvalue())
    assert logs[-1]["params"] == {"level": "info", "message": "received an RPC notification"}


def test_commands_usable_directly():
    output = io.StringIO()
    plugin = build_plugin(output)
    assert HelloRPC().call(plugin, {}) == {"language": "Hello from clnkit"}
    OnChannelOpened().call_void(plugin, {})
    on_rpc(plugin, {})
    assert foo_macro(plugin, [1]) == {"is_dynamic": True, "rpc_request": [1]}
    assert len(_messages(output.getvalue())) == 3


def test_unknown_method_returns_error():
    plugin = build_plugin(io.StringIO())
    response = plugin.handle_request(_request("nope", {}, id=3))
    assert response["error"]["code"] == -1
    assert "result" not in response


def test_main_serves_stdin(monkeypatch):
    lines = "\n".join(
        [
            json.dumps(_request("getmanifest", {}, id=1)),
            "",
            json.dumps(_request("hello", {}, id=2)),
        ]
    ) + "\n"
    stdout = io.StringIO()
    monkeypatch.setattr("sys.stdin", io.StringIO(lines))
    monkeypatch.setattr("sys.stdout", stdout)
    assert main([]) == 0
    messages = _messages(stdout.getvalue())
    responses = [m for m in messages if "id" in m]
    assert [r["id"] for r in responses] == [1, 2]
    assert "language" in responses[1]["result"]


def test_main_rejects_unknown_arguments():
    with pytest.raises(SystemExit):
        main(["--bogus"])