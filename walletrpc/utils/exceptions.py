"""
Exception hierarchy for walletrpc.

Provides:
- A base error carrying a code, a category and diagnostic details
- Transport, HTTP status, decoding and remote RPC failures
- Lifecycle errors raised by the port registry and session manager
- Identity verification failures raised by the create-or-open reconciler
- Safe error message formatting (no credential leaks)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    DECODE = "decode"
    REMOTE = "remote"
    LIFECYCLE = "lifecycle"
    VERIFICATION = "verification"


class WalletRpcClientError(Exception):
    """Base exception for all walletrpc errors."""

    def __init__(
        self,
        message: str,
        code: str | int = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.TRANSPORT,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class TransportError(WalletRpcClientError):
    """The remote service never produced a usable response."""

    def __init__(self, message: str, uri: str | None = None, code: str = "TRANSPORT_ERROR"):
        super().__init__(message, code=code, category=ErrorCategory.TRANSPORT, details={"uri": uri})
        self.uri = uri


class HttpStatusError(WalletRpcClientError):
    """HTTP error status without an RPC error body (e.g. 401 after a failed challenge)."""

    def __init__(self, status_code: int, uri: str | None = None, body: str = ""):
        super().__init__(
            f"HTTP {status_code} from {uri}",
            code="HTTP_STATUS_ERROR",
            category=ErrorCategory.HTTP_STATUS,
            details={"uri": uri, "status_code": status_code},
        )
        self.uri = uri
        self.status_code = status_code
        self.body = body


class DecodeError(WalletRpcClientError):
    """Response body could not be decoded."""

    def __init__(self, message: str, uri: str | None = None):
        super().__init__(message, code="DECODE_ERROR", category=ErrorCategory.DECODE, details={"uri": uri})
        self.uri = uri


class RpcError(WalletRpcClientError):
    """
    Well-formed rejection from the remote service.

    ``code`` is the numeric code from the response's ``error`` object and
    ``request`` is the envelope that was sent.
    """

    def __init__(self, code: int, message: str, request: Any = None):
        details: dict[str, Any] = {}
        if request is not None and hasattr(request, "redacted"):
            details["request"] = request.redacted()
        super().__init__(message, code=code, category=ErrorCategory.REMOTE, details=details)
        self.request = request

    def get_code(self) -> int:
        return int(self.code)


class RegistryError(WalletRpcClientError):
    """Port slot released without being claimed."""

    def __init__(self, slot: int):
        super().__init__(
            f"Port slot {slot} is not registered",
            code="SLOT_NOT_REGISTERED",
            category=ErrorCategory.LIFECYCLE,
            details={"slot": slot},
        )
        self.slot = slot


class SessionNotRegisteredError(WalletRpcClientError):
    """Session stopped twice, or never started by this manager."""

    def __init__(self, session_id: str | None):
        super().__init__(
            f"Wallet session not registered: {session_id}",
            code="SESSION_NOT_REGISTERED",
            category=ErrorCategory.LIFECYCLE,
            details={"session_id": session_id},
        )


class SessionStartError(WalletRpcClientError):
    """Backing wallet service did not become reachable."""

    def __init__(self, message: str, port: int | None = None):
        super().__init__(
            message,
            code="SESSION_START_FAILED",
            category=ErrorCategory.LIFECYCLE,
            details={"port": port},
        )


class IdentityMismatchError(WalletRpcClientError):
    """The opened wallet is not the expected one."""

    def __init__(self, field: str, expected: str | None = None, actual: str | None = None):
        message = f"Opened wallet {field} does not match the expected wallet"
        details: dict[str, Any] = {"field": field}
        # Mnemonics stay out of messages; addresses are public.
        if field != "mnemonic":
            message += f": expected {expected}, got {actual}"
            details.update({"expected": expected, "actual": actual})
        super().__init__(message, code="IDENTITY_MISMATCH", category=ErrorCategory.VERIFICATION, details=details)
        self.field = field


_SENSITIVE_PATTERNS = [
    re.compile(r"(password|passwd|secret|seed|mnemonic|login)['\"]?\s*(?:[=:]|\s)\s*(\"[^\"]*\"|'[^']*'|[^\s'\",}]+)", re.IGNORECASE),
    re.compile(r"(https?://)[^/\s:@]+:[^/\s@]+@", re.IGNORECASE),
    re.compile(r"\b(digest|basic)\s+\S.*$", re.IGNORECASE | re.MULTILINE),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove credentials from messages before they are logged."""
    sanitized = _SENSITIVE_PATTERNS[0].sub(lambda m: f"{m.group(1)}={replacement}", message)
    sanitized = _SENSITIVE_PATTERNS[1].sub(lambda m: f"{m.group(1)}{replacement}@", sanitized)
    sanitized = _SENSITIVE_PATTERNS[2].sub(lambda m: f"{m.group(1)} {replacement}", sanitized)
    return sanitized
