"""Decorators turning plain functions into plugin commands."""

from __future__ import annotations

import functools
import re
from typing import Any, Callable

from clnkit.plugin import Plugin, RPCCommand

_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")

MethodFunction = Callable[[Plugin, Any], Any]
NotificationFunction = Callable[[Plugin, Any], None]


def to_pascal_case(name: str) -> str:
    """Join the words of `name` with each word capitalised: "rpc_command" -> "RpcCommand"."""
    words = [
        word
        for segment in _SEPARATORS.split(name)
        for word in _WORD.findall(segment)
    ]
    return "".join(word[:1].upper() + word[1:].lower() for word in words)


class _MethodCommand(RPCCommand):
    """An RPC method backed by a function taking the plugin and the request."""

    def __init__(self, func: MethodFunction, name: str, description: str, usage: str) -> None:
        self._func = func
        self.name = name
        self.description = description
        self.long_description = description
        self.usage = usage
        functools.update_wrapper(self, func)

    def call(self, plugin: Plugin, request: Any) -> Any:
        return self._func(plugin, request)

    def __call__(self, plugin: Plugin, request: Any) -> Any:
        return self._func(plugin, request)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class _NotificationCommand(RPCCommand):
    """A notification handler backed by a function taking the plugin and the event."""

    def __init__(self, func: NotificationFunction, on_event: str) -> None:
        self._func = func
        self.on_event = on_event
        functools.update_wrapper(self, func)

    def call_void(self, plugin: Plugin, request: Any) -> None:
        self._func(plugin, request)

    def __call__(self, plugin: Plugin, request: Any) -> None:
        self._func(plugin, request)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(on_event={self.on_event!r})"


def _check_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not to_pascal_case(value):
        raise ValueError(f"{what} must be a non-empty name")
    return value


def rpc_method(rpc_name: str, description: str, usage: str = "") -> Callable[[MethodFunction], RPCCommand]:
    """Make a function `(plugin, request) -> result` into an RPC method command.

    The command carries `name`, `description`, `long_description` and `usage`,
    and its class is named after `rpc_name` in PascalCase.
    """
    _check_name(rpc_name, "rpc_name")

    def decorate(func: MethodFunction) -> RPCCommand:
        if not callable(func):
            raise TypeError("rpc_method must decorate a callable")
        command_class = type(
            to_pascal_case(rpc_name),
            (_MethodCommand,),
            {"__module__": getattr(func, "__module__", __name__)},
        )
        return command_class(func, rpc_name, description, usage)

    return decorate


def notification(on: str) -> Callable[[NotificationFunction], RPCCommand]:
    """Make a function `(plugin, event)` into a handler of the notification `on`.

    The command carries `on_event`, and its class is named "On" followed by
    `on` in PascalCase.
    """
    _check_name(on, "on")

    def decorate(func: NotificationFunction) -> RPCCommand:
        if not callable(func):
            raise TypeError("notification must decorate a callable")
        command_class = type(
            f"On{to_pascal_case(on)}",
            (_NotificationCommand,),
            {"__module__": getattr(func, "__module__", __name__)},
        )
        return command_class(func, on)

    return decorate


def add_rpc(plugin: Plugin, command: RPCCommand) -> Plugin:
    """Register a command made by `rpc_method` under its own name."""
    if not isinstance(command, _MethodCommand):
        raise TypeError("add_rpc expects a command made by rpc_method")
    return plugin.add_rpc_method(command.name, command.usage, command.description, command)


def register_notification(plugin: Plugin, command: RPCCommand) -> Plugin:
    """Subscribe a command made by `notification` to its event."""
    if not isinstance(command, _NotificationCommand):
        raise TypeError("register_notification expects a command made by notification")
    return plugin.register_notification(command.on_event, command)