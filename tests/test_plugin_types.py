import logging

import pytest

from clnkit.plugin_types import (
    ClnConfiguration,
    InitConf,
    LogLevel,
    ProxyInfo,
    RPCHookInfo,
    RPCMethodInfo,
    RpcOption,
)

CONFIGURATION = {
    "lightning-dir": "/tmp/ln",
    "rpc-file": "lightning-rpc",
    "startup": True,
    "network": "regtest",
    "feature_set": {"init": "02"},
}


@pytest.mark.parametrize(
    "level, text",
    [
        (LogLevel.DEBUG, "debug"),
        (LogLevel.INFO, "info"),
        (LogLevel.WARN, "warn"),
        (LogLevel.ERROR, "error"),
    ],
)
def test_log_level_text(level, text):
    assert str(level) == text


@pytest.mark.parametrize(
    "levelno, expected",
    [
        (5, LogLevel.DEBUG),
        (logging.DEBUG, LogLevel.DEBUG),
        (logging.INFO, LogLevel.INFO),
        (logging.WARNING, LogLevel.WARN),
        (logging.ERROR, LogLevel.ERROR),
        (logging.CRITICAL, LogLevel.ERROR),
    ],
)
def test_log_level_from_logging(levelno, expected):
    assert LogLevel.from_logging(levelno) is expected


def test_rpc_option_to_dict_uses_type_key():
    option = RpcOption(name="foo", opt_type="flag", description="an option")
    data = option.to_dict()
    assert data["type"] == "flag"
    assert data["name"] == "foo"
    assert data["default"] is None
    assert data["deprecated"] is False
    assert "opt_type" not in data


def test_method_info_is_hashable_and_equal():
    first = RPCMethodInfo("hello", "", "greets", "greets")
    second = RPCMethodInfo("hello", "", "greets", "greets")
    assert first == second
    assert len({first, second}) == 1
    assert first.to_dict()["long_description"] == "greets"


def test_hook_info_to_dict():
    hook = RPCHookInfo("htlc_accepted", before=["a", "b"])
    assert hook.to_dict() == {"name": "htlc_accepted", "before": ["a", "b"], "after": None}
    assert hash(hook) == hash(RPCHookInfo("htlc_accepted", before=("a", "b")))


@pytest.mark.parametrize("key", ["type", "tup"])
def test_proxy_accepts_both_kind_keys(key):
    proxy = ProxyInfo.from_dict({key: "ipv4", "address": "127.0.0.1", "port": 9050})
    assert proxy.proxy_type == "ipv4"
    assert proxy.port == 9050


def test_configuration_from_dict():
    data = dict(CONFIGURATION, proxy={"type": "ipv4", "address": "127.0.0.1", "port": 9050})
    data["torv3-enabled"] = True
    conf = ClnConfiguration.from_dict(data)
    assert conf.lightning_dir == "/tmp/ln"
    assert conf.rpc_file == "lightning-rpc"
    assert conf.network == "regtest"
    assert conf.feature_set == {"init": "02"}
    assert conf.proxy.address == "127.0.0.1"
    assert conf.torv3_enabled is True
    assert conf.always_use_proxy is None


def test_configuration_missing_field():
    data = dict(CONFIGURATION)
    del data["network"]
    with pytest.raises(ValueError):
        ClnConfiguration.from_dict(data)


def test_configuration_wrong_type():
    with pytest.raises(ValueError):
        ClnConfiguration.from_dict(dict(CONFIGURATION, startup="yes"))


def test_init_conf_from_dict():
    init = InitConf.from_dict({"options": {"foo": True}, "configuration": CONFIGURATION})
    assert init.options == {"foo": True}
    assert init.configuration.network == "regtest"


def test_init_conf_missing_configuration():
    with pytest.raises(ValueError):
        InitConf.from_dict({"options": {}})