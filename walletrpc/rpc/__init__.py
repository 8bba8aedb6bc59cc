"""RPC transport: envelopes, binary codec and the HTTP connection."""

from walletrpc.rpc.codec import decode_binary, encode_binary
from walletrpc.rpc.connection import RawResponse, RpcConnection
from walletrpc.rpc.envelope import BinaryRequest, PathRequest, StructuredRequest, redact_params

__all__ = [
    "BinaryRequest",
    "PathRequest",
    "RawResponse",
    "RpcConnection",
    "StructuredRequest",
    "decode_binary",
    "encode_binary",
    "redact_params",
]
