"""A small example plugin offering a couple of methods and notifications."""

from __future__ import annotations

import argparse
from typing import Any, Optional, Sequence, TextIO

from clnkit.decorators import add_rpc, notification, register_notification, rpc_method
from clnkit.plugin import Plugin, RPCCommand
from clnkit.plugin_types import LogLevel


class HelloRPC(RPCCommand):
    """The `hello` method: answers with a greeting."""

    def call(self, plugin: Plugin, request: Any) -> dict[str, Any]:
        plugin.log(LogLevel.DEBUG, "call the custom rpc method")
        return {"language": "Hello from clnkit"}


class OnChannelOpened(RPCCommand):
    """Handler of the `channel_opened` notification."""

    def call_void(self, plugin: Plugin, request: Any) -> None:
        plugin.log(LogLevel.DEBUG, "A new channel was opened!")


@rpc_method(rpc_name="foo_macro", description="This is a simple and short description")
def foo_macro(plugin: Plugin, request: Any) -> dict[str, Any]:
    """Report whether the plugin is dynamic, with the request it got."""
    return {"is_dynamic": plugin.dynamic, "rpc_request": request}


@notification(on="rpc_command")
def on_rpc(plugin: Plugin, request: Any) -> None:
    """Log every RPC command notification."""
    plugin.log(LogLevel.INFO, "received an RPC notification")


def _on_init(plugin: Plugin) -> dict[str, Any]:
    plugin.log(LogLevel.DEBUG, "Custom init method called")
    return {}


def build_plugin(output: Optional[TextIO] = None) -> Plugin:
    """Return the example plugin with all its methods, options and subscriptions."""
    plugin = (
        Plugin(state=None, dynamic=True, output=output)
        .add_rpc_method("hello", "", "show how is possible add a method", HelloRPC())
        .add_opt("foo", "flag", None, "An example of command line option", False)
        .register_notification("channel_opened", OnChannelOpened())
        .on_init(_on_init)
    )
    add_rpc(plugin, foo_macro)
    register_notification(plugin, on_rpc)
    return plugin


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the example plugin on standard input and output."""
    parser = argparse.ArgumentParser(description="Example node plugin.")
    parser.parse_args(argv)
    build_plugin().start()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())