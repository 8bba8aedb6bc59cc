"""Daemon and wallet client façades."""

from walletrpc.clients.base import AlreadyBuilt, ConnectionSource, RawConfig, RpcClientBase, resolve_connection
from walletrpc.clients.daemon import DaemonRpc
from walletrpc.clients.wallet import WalletRpc

__all__ = [
    "AlreadyBuilt",
    "ConnectionSource",
    "DaemonRpc",
    "RawConfig",
    "RpcClientBase",
    "WalletRpc",
    "resolve_connection",
]
