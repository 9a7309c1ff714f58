"""Plugin runtime: command registry, builtin methods and the request loop."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Callable, Iterable, Optional, TextIO, Union

from clnkit.errors import JSONDecodeFailure, PluginError
from clnkit.jsonrpc import Request, init_payload, init_success_response
from clnkit.plugin_types import (
    ClnConfiguration,
    InitConf,
    LogLevel,
    RPCHookInfo,
    RPCMethodInfo,
    RpcOption,
)

InitCallback = Callable[["Plugin"], Any]


def plugin_error(message: str) -> PluginError:
    """Return a plugin error with the generic code -1."""
    return PluginError(-1, message, None)


def _write_message(output: TextIO, message: dict[str, Any]) -> None:
    output.write(json.dumps(message, separators=(",", ":"), ensure_ascii=False))
    output.flush()


def _write_log(output: TextIO, level: LogLevel, message: str) -> None:
    payload = init_payload()
    payload["level"] = str(level)
    payload["message"] = message
    _write_message(output, Request(method="log", params=payload).to_dict())


class RPCCommand:
    """A command the plugin runs for an RPC method, hook or notification.

    Subclasses override `call` for methods and hooks, and `call_void` for
    notifications.
    """

    def call(self, plugin: "Plugin", request: Any) -> Any:
        """Handle a request and return its result; raise PluginError on failure."""
        return {}

    def call_void(self, plugin: "Plugin", request: Any) -> None:
        """Handle a notification."""
        return None


class ManifestRPC(RPCCommand):
    """The builtin `getmanifest` method."""

    def call(self, plugin: "Plugin", request: Any) -> dict[str, Any]:
        response = init_payload()
        response["options"] = [option.to_dict() for option in plugin.option.values()]
        response["rpcmethods"] = [info.to_dict() for info in plugin.rpc_info.values()]
        response["subscriptions"] = list(plugin.rpc_notification)
        response["hooks"] = [info.to_dict() for info in plugin.hook_info.values()]
        response["dynamic"] = plugin.dynamic
        return response


class InitRPC(RPCCommand):
    """The builtin `init` method: stores configuration and option values."""

    def __init__(self, on_init: Optional[InitCallback] = None) -> None:
        self.on_init = on_init

    def call(self, plugin: "Plugin", request: Any) -> Any:
        try:
            init = InitConf.from_dict(request)
        except ValueError as exc:
            raise plugin_error(str(exc)) from exc
        plugin.configuration = init.configuration
        unknown = [name for name in init.options if name not in plugin.option]
        if unknown:
            raise plugin_error(f"unknown option `{unknown[0]}`")
        for name, value in init.options.items():
            plugin.option[name].value = value
        if self.on_init is not None:
            return self.on_init(plugin)
        return init_payload()


class Plugin:
    """A plugin: its state, options and commands, and the loop serving the node."""

    def __init__(self, state: Any = None, dynamic: bool = False, output: Optional[TextIO] = None) -> None:
        self.state = state
        self.dynamic = dynamic
        self.output = output
        self.option: dict[str, RpcOption] = {}
        self.rpc_method: dict[str, RPCCommand] = {}
        self.rpc_info: dict[str, RPCMethodInfo] = {}
        self.rpc_hook: dict[str, RPCCommand] = {}
        self.hook_info: dict[str, RPCHookInfo] = {}
        self.rpc_notification: dict[str, RPCCommand] = {}
        self.configuration: Optional[ClnConfiguration] = None
        self._on_init: Optional[InitCallback] = None

    def _output(self) -> TextIO:
        return sys.stdout if self.output is None else self.output

    def on_init(self, callback: InitCallback) -> "Plugin":
        """Set the function run at `init`; its return value is the init result."""
        self._on_init = callback
        return self

    def log(self, level: LogLevel, msg: str) -> None:
        """Send a log message to the node."""
        _write_log(self._output(), level, msg)

    def add_opt(
        self,
        name: str,
        opt_type: str,
        default: Optional[str],
        description: str,
        deprecated: bool = False,
    ) -> "Plugin":
        """Register a command-line option."""
        self.option[name] = RpcOption(
            name=name,
            opt_type=opt_type,
            description=description,
            default=default,
            deprecated=deprecated,
        )
        return self

    def get_opt(self, name: str) -> Any:
        """Return the value the node sent for an option."""
        option = self.option.get(name)
        if option is None:
            raise KeyError(name)
        if option.value is None:
            raise ValueError(f"option `{name}` has no value")
        return option.value

    def add_rpc_method(self, name: str, usage: str, description: str, callback: RPCCommand) -> "Plugin":
        """Register an RPC method."""
        self.rpc_method[name] = callback
        self.rpc_info[name] = RPCMethodInfo(
            name=name,
            usage=usage,
            description=description,
            long_description=description,
            deprecated=False,
        )
        return self

    def register_hook(
        self,
        hook_name: str,
        before: Optional[Iterable[str]],
        after: Optional[Iterable[str]],
        callback: RPCCommand,
    ) -> "Plugin":
        """Subscribe to a hook."""
        self.rpc_hook[hook_name] = callback
        self.hook_info[hook_name] = RPCHookInfo(
            name=hook_name,
            before=None if before is None else tuple(before),
            after=None if after is None else tuple(after),
        )
        return self

    def register_notification(self, name: str, callback: RPCCommand) -> "Plugin":
        """Subscribe to a notification."""
        self.rpc_notification[name] = callback
        return self

    def _call_method(self, name: str, params: Any) -> Any:
        builtins = {"getmanifest": ManifestRPC(), "init": InitRPC(self._on_init)}
        for table in (builtins, self.rpc_method, self.rpc_hook):
            command = table.get(name)
            if command is not None:
                return command.call(self, params)
        raise plugin_error(f"method `{name}` not found")

    def _handle_notification(self, name: str, params: Any) -> None:
        command = self.rpc_notification.get(name)
        if command is None:
            self.log(LogLevel.DEBUG, f"no handler for notification `{name}`")
            return
        try:
            command.call_void(self, params)
        except PluginError as err:
            self.log(LogLevel.DEBUG, f"Notification ended with an error: {err}")

    def handle_request(self, request: Union[Request, dict]) -> Optional[dict[str, Any]]:
        """Serve one request; return the response, or None for a notification."""
        if not isinstance(request, Request):
            request = Request.from_dict(request)
        if request.id is None:
            self._handle_notification(request.method, request.params)
            return None
        response = init_success_response(request.id)
        try:
            response["result"] = self._call_method(request.method, request.params)
        except PluginError as err:
            response["error"] = err.to_dict()
        return response

    def start(self, reader: Optional[Iterable[str]] = None) -> None:
        """Serve requests, one JSON object per line, until the input ends."""
        source = sys.stdin if reader is None else reader
        for line in source:
            if not line.strip():
                continue
            try:
                document = json.loads(line)
            except json.JSONDecodeError as exc:
                raise JSONDecodeFailure(str(exc)) from exc
            response = self.handle_request(document)
            if response is not None:
                _write_message(self._output(), response)


class PluginLogHandler(logging.Handler):
    """A logging handler sending records to the node as `log` notifications."""

    def __init__(self, output: Optional[TextIO] = None) -> None:
        super().__init__(logging.NOTSET)
        self.output = output

    def emit(self, record: logging.LogRecord) -> None:
        try:
            output = sys.stdout if self.output is None else self.output
            _write_log(output, LogLevel.from_logging(record.levelno), self.format(record))
        except Exception:
            self.handleError(record)