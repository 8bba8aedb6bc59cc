"""Byte codec for binary RPC calls.

Params travel as UTF-8 JSON inside an opaque ``application/octet-stream`` body.
This is not the daemon's portable-storage format; confirm against the target
service before relying on ``*.bin`` endpoints.
"""

from __future__ import annotations

import json
from typing import Any

from walletrpc.utils.exceptions import DecodeError

CONTENT_TYPE = "application/octet-stream"


def encode_binary(params: Any) -> bytes:
    """Serialize request params to bytes."""
    return json.dumps(params if params is not None else {}, separators=(",", ":")).encode("utf-8")


def decode_binary(raw: bytes, uri: str | None = None) -> Any:
    """Deserialize a raw response body; raises DecodeError on bad input."""
    if not raw:
        raise DecodeError("empty binary response", uri=uri)
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"undecodable binary response ({len(raw)} bytes): {exc}", uri=uri) from exc
