"""Types describing a plugin's options, methods, hooks and init data."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional


class LogLevel(enum.Enum):
    """Severity of a log message sent to the node."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @classmethod
    def from_logging(cls, levelno: int) -> "LogLevel":
        """Map a :mod:`logging` level number to the closest node level."""
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG

    def __str__(self) -> str:
        return self.value


def _require(data: dict, key: str) -> Any:
    if data.get(key) is None:
        raise ValueError(f"missing field `{key}`")
    return data[key]


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"field `{key}` must be a boolean")
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an integer")
    return value


def _as_object(value: Any, key: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"field `{key}` must be a JSON object")
    return value


@dataclass
class RpcOption:
    """A command-line option the plugin registers with the node."""

    name: str
    opt_type: str
    description: str
    default: Optional[str] = None
    deprecated: bool = False
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the option as it appears in the manifest."""
        return {
            "name": self.name,
            "type": self.opt_type,
            "default": self.default,
            "description": self.description,
            "deprecated": self.deprecated,
            "value": self.value,
        }


@dataclass(frozen=True)
class RPCMethodInfo:
    """Manifest entry of an RPC method offered by the plugin."""

    name: str
    usage: str
    description: str
    long_description: str
    deprecated: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the manifest entry."""
        return {
            "name": self.name,
            "usage": self.usage,
            "description": self.description,
            "long_description": self.long_description,
            "deprecated": self.deprecated,
        }


@dataclass(frozen=True)
class RPCHookInfo:
    """Manifest entry of a hook the plugin subscribes to."""

    name: str
    before: Optional[tuple[str, ...]] = None
    after: Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        for attr in ("before", "after"):
            value = getattr(self, attr)
            if value is not None:
                object.__setattr__(self, attr, tuple(value))

    def to_dict(self) -> dict[str, Any]:
        """Return the manifest entry."""
        return {
            "name": self.name,
            "before": None if self.before is None else list(self.before),
            "after": None if self.after is None else list(self.after),
        }


@dataclass
class ProxyInfo:
    """Proxy settings the node passes to the plugin."""

    proxy_type: str
    address: str
    port: int

    @classmethod
    def from_dict(cls, data: Any) -> "ProxyInfo":
        """Build proxy settings from their JSON form; the kind is read from `type` or `tup`."""
        data = _as_object(data, "proxy")
        kind_key = "type" if "type" in data else "tup"
        return cls(
            proxy_type=_as_str(_require(data, kind_key), kind_key),
            address=_as_str(_require(data, "address"), "address"),
            port=_as_int(_require(data, "port"), "port"),
        )


@dataclass
class ClnConfiguration:
    """Node configuration sent with the `init` call."""

    lightning_dir: str
    rpc_file: str
    startup: bool
    network: str
    feature_set: dict[str, str]
    proxy: Optional[ProxyInfo] = None
    torv3_enabled: Optional[bool] = None
    always_use_proxy: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ClnConfiguration":
        """Build the configuration from its JSON form."""
        data = _as_object(data, "configuration")
        features = _as_object(_require(data, "feature_set"), "feature_set")
        feature_set = {
            _as_str(key, "feature_set"): _as_str(value, "feature_set")
            for key, value in features.items()
        }
        proxy = data.get("proxy")
        torv3 = data.get("torv3-enabled")
        always = data.get("always_use_proxy")
        return cls(
            lightning_dir=_as_str(_require(data, "lightning-dir"), "lightning-dir"),
            rpc_file=_as_str(_require(data, "rpc-file"), "rpc-file"),
            startup=_as_bool(_require(data, "startup"), "startup"),
            network=_as_str(_require(data, "network"), "network"),
            feature_set=feature_set,
            proxy=None if proxy is None else ProxyInfo.from_dict(proxy),
            torv3_enabled=None if torv3 is None else _as_bool(torv3, "torv3-enabled"),
            always_use_proxy=None if always is None else _as_bool(always, "always_use_proxy"),
        )


@dataclass
class InitConf:
    """Parameters of the `init` call: option values and node configuration."""

    options: dict[str, Any]
    configuration: ClnConfiguration

    @classmethod
    def from_dict(cls, data: Any) -> "InitConf":
        """Build the init parameters from their JSON form."""
        data = _as_object(data, "init")
        options = _as_object(_require(data, "options"), "options")
        return cls(
            options=dict(options),
            configuration=ClnConfiguration.from_dict(_require(data, "configuration")),
        )