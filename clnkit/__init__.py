"""RPC client, plugin framework and configuration file tools for Core Lightning."""

__version__ = "0.1.0"