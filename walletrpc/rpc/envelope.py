"""Request envelopes for the three RPC dialects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

JSON_RPC_PATH = "json_rpc"
JSON_RPC_VERSION = "2.0"
JSON_RPC_ID = "0"

_REDACTED_KEYS = frozenset({"password", "old_password", "new_password", "seed", "mnemonic", "seed_offset", "key", "spendkey", "viewkey"})


def redact_params(params: Any) -> Any:
    """Copy of ``params`` with secret values masked."""
    if isinstance(params, dict):
        return {
            k: "[REDACTED]" if k in _REDACTED_KEYS and v else redact_params(v)
            for k, v in params.items()
        }
    if isinstance(params, list):
        return [redact_params(item) for item in params]
    return params


def join_uri(base_uri: str, path: str) -> str:
    return f"{base_uri}/{path.lstrip('/')}"


@dataclass(frozen=True)
class StructuredRequest:
    """JSON-RPC call routed through the fixed ``json_rpc`` path."""
    method: str
    params: Any = None

    def uri(self, base_uri: str) -> str:
        return join_uri(base_uri, JSON_RPC_PATH)

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "id": JSON_RPC_ID,
            "jsonrpc": JSON_RPC_VERSION,
            "method": self.method,
        }
        if self.params is not None:
            body["params"] = self.params
        return body

    def redacted(self) -> dict[str, Any]:
        return {"dialect": "json_rpc", "method": self.method, "params": redact_params(self.params)}


@dataclass(frozen=True)
class PathRequest:
    """Call where the path names the operation and params are the whole body."""
    path: str
    params: Any = None

    def uri(self, base_uri: str) -> str:
        return join_uri(base_uri, self.path)

    def body(self) -> Any:
        return self.params if self.params is not None else {}

    def redacted(self) -> dict[str, Any]:
        return {"dialect": "path", "path": self.path, "params": redact_params(self.params)}


@dataclass(frozen=True)
class BinaryRequest:
    """Call exchanging opaque byte payloads at ``<base>/<method>``."""
    method: str
    params: Any = None

    def uri(self, base_uri: str) -> str:
        return join_uri(base_uri, self.method)

    def redacted(self) -> dict[str, Any]:
        return {"dialect": "binary", "method": self.method, "params": redact_params(self.params)}
