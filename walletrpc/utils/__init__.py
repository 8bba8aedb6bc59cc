"""Utility functions for walletrpc."""

from walletrpc.utils.exceptions import (
    DecodeError,
    ErrorCategory,
    HttpStatusError,
    IdentityMismatchError,
    RegistryError,
    RpcError,
    SessionNotRegisteredError,
    SessionStartError,
    TransportError,
    WalletRpcClientError,
    sanitize_error_message,
)

__all__ = [
    "DecodeError",
    "ErrorCategory",
    "HttpStatusError",
    "IdentityMismatchError",
    "RegistryError",
    "RpcError",
    "SessionNotRegisteredError",
    "SessionStartError",
    "TransportError",
    "WalletRpcClientError",
    "sanitize_error_message",
]
