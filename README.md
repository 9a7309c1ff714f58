# clnkit

Tools for talking to a Core Lightning node from Python:

- `clnkit.lightningrpc.LightningRPC`: a high-level client for the node's
  `lightning-rpc` UNIX socket. It has one method per RPC command and returns
  typed responses from `clnkit.responses`.
- `clnkit.client.Client`: the low-level JSON-RPC 2.0 client underneath it.
  It opens a new connection for each request.
- `clnkit.jsonrpc`: the `Request` and `Response` objects and payload helpers.
- `clnkit.plugin.Plugin`: a framework for writing plugins that speak JSON-RPC
  over standard input and output.
- `clnkit.decorators`: decorators that turn plain functions into RPC methods
  and notification handlers.
- `clnkit.conf.ClnConf`: a reader and writer for configuration files. It
  follows `include` lines.

## Installation

```
pip install clnkit
```

The package needs no third-party dependencies. It requires Python 3.10 or
later and a POSIX system, because it uses UNIX sockets.

## Calling the node

```python
from pathlib import Path

from clnkit.lightningrpc import LightningRPC
from clnkit.errors import ClientError

rpc = LightningRPC(Path.home() / ".lightning" / "lightning-rpc")

try:
    info = rpc.getinfo()
    print(info.id, info.network)
    for style in ("perkb", "perkw"):
        print(style, rpc.feerates(style))
except ClientError as exc:
    print("RPC failed:", exc)
```

To set a timeout for reading and writing the socket, give a number of seconds
or a `datetime.timedelta`:

```python
rpc.client.timeout = 0.1
```

Amounts in responses are `clnkit.rpctypes.MSat` values. `MSat.parse` accepts
plain integers and strings such as `"3msat"`.

`fundchannel` and `withdraw` take any of these:

- a `clnkit.requests.AmountOrAll`, such as `AmountOrAll.amount(100000)` or
  `AmountOrAll.all()`;
- a plain integer;
- the string `"all"`.

`invoice` with `amount_msat=None` creates an invoice for any amount.

For commands that have no method of their own, use the generic `call`. It
returns the raw result:

```python
rpc.call("listconfigs", {})
```

All errors are subclasses of `clnkit.errors.ClientError`:

| Error | Raised when |
| --- | --- |
| `TransportError` | the socket cannot be reached, written or read |
| `JSONDecodeFailure` | JSON cannot be encoded or decoded, or a result does not match its response type |
| `RpcCallError` | the node returns an error object; the object is in its `error` attribute, as an `RpcError` |
| `MalformedResponseError` | the response has neither a result nor an error |
| `VersionMismatchError` | the response has a `jsonrpc` field other than `"2.0"` |

## Writing a plugin

```python
from clnkit.plugin import Plugin, RPCCommand
from clnkit.plugin_types import LogLevel


class Hello(RPCCommand):
    def call(self, plugin, request):
        plugin.log(LogLevel.DEBUG, "hello called")
        return {"language": "Hello from Python"}


plugin = Plugin(None, True)
plugin.add_rpc_method("hello", "", "say hello", Hello())
plugin.add_opt("foo", "flag", None, "an example option", False)
plugin.start()
```

The plugin answers `getmanifest` and `init` itself.

At `init`, the node's configuration is stored in `plugin.configuration` and
the option values are stored on the registered options. Read an option value
with `plugin.get_opt(name)`. Use `plugin.on_init(callback)` to run a function
at `init`; its return value becomes the `init` result.

Hooks are registered with `register_hook`. Notifications are registered with
`register_notification`; their handlers override `call_void`.

A command reports a failure by raising `clnkit.errors.PluginError`. The error
is sent back as a JSON-RPC error object. `clnkit.plugin.plugin_error(message)`
builds one with code `-1`.

`Plugin.start` reads one JSON request per line, from standard input or from
any iterable of lines passed to it. It stops when the input ends.
`Plugin.handle_request` serves a single request and returns the response.

`clnkit.plugin.PluginLogHandler` is a `logging.Handler`. It forwards log
records to the node as `log` notifications.

### Decorators

```python
from clnkit.decorators import rpc_method, notification, add_rpc, register_notification


@rpc_method(rpc_name="foo_macro", description="a short description")
def foo_macro(plugin, request):
    return {"is_dynamic": plugin.dynamic}


@notification(on="rpc_command")
def on_rpc(plugin, request):
    ...


add_rpc(plugin, foo_macro)
register_notification(plugin, on_rpc)
```

### Example plugin

`clnkit.demo_plugin` has a complete example plugin. It provides:

- the methods `hello` and `foo_macro`;
- the option `foo`;
- subscriptions to `channel_opened` and `rpc_command`.

It is installed as a command that can be registered with `lightningd` as a
plugin:

```
clnkit-demo-plugin
```

## Configuration files

```python
from clnkit.conf import ClnConf, ParsingError

conf = ClnConf("/path/to/config", False)
conf.parse()
conf.add_conf("plugin", "/some/path")
conf.rm_conf("network", None)
print(conf.get_conf("plugin"))
conf.flush()
```

Fields keep their order, and a key may hold several values.

- Comment lines are kept.
- `include` lines are parsed into `conf.includes`.
- `get_conf` returns the values of a key from this file and from the files it
  includes.
- With `create_if_missing=True`, a missing file is created with a short header
  comment.

`ParsingError` carries a `code`: 1 for a file that cannot be read, 2 for
anything else. It is raised for:

- unreadable files;
- malformed lines;
- duplicate values and duplicate includes;
- removal of keys or values that are not present.

## What the package does not do

There is no command-line client for calling the node. The only command
installed is the example plugin. Use `LightningRPC` or `Client` from Python.