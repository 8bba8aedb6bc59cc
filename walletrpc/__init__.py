"""Client access layer for daemon and wallet RPC services."""

from walletrpc.clients import AlreadyBuilt, DaemonRpc, RawConfig, WalletRpc
from walletrpc.config import Config, EndpointConfig, WalletIdentity
from walletrpc.process import PortRegistry, SessionManager, WalletSession
from walletrpc.reconciler import NOT_FOUND_OR_LOCKED, WalletReconciler
from walletrpc.rpc import RpcConnection
from walletrpc.utils import RpcError, TransportError, WalletRpcClientError

__version__ = "0.1.0"

__all__ = [
    "AlreadyBuilt",
    "Config",
    "DaemonRpc",
    "EndpointConfig",
    "NOT_FOUND_OR_LOCKED",
    "PortRegistry",
    "RawConfig",
    "RpcConnection",
    "RpcError",
    "SessionManager",
    "TransportError",
    "WalletIdentity",
    "WalletReconciler",
    "WalletRpc",
    "WalletRpcClientError",
    "WalletSession",
]
