"""HTTP transport for daemon and wallet RPC services.

One ``RpcConnection`` owns one persistent ``httpx.AsyncClient`` whose pool is
capped at a single socket. When credentials are configured the client uses
HTTP Digest auth: requests go out without credentials and are resent with them
only after the server answers ``401`` with a challenge. The digest nonce state
lives on the connection, so calls are serialized through a lock and reach the
server in the order they were issued.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from loguru import logger

from walletrpc.config.schema import EndpointConfig
from walletrpc.rpc.codec import CONTENT_TYPE, decode_binary, encode_binary
from walletrpc.rpc.envelope import BinaryRequest, PathRequest, StructuredRequest
from walletrpc.utils.exceptions import (
    DecodeError,
    HttpStatusError,
    RpcError,
    TransportError,
    sanitize_error_message,
)

Envelope = StructuredRequest | PathRequest | BinaryRequest


@dataclass(frozen=True)
class RawResponse:
    """Undecoded response of a binary call."""
    status_code: int
    headers: dict[str, str]
    content: bytes


def _decode_json(raw: bytes, uri: str | None = None) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"non-json response body ({len(raw)} bytes): {exc}", uri=uri) from exc


def _error_code(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class RpcConnection:
    """Sends structured, path and binary requests to one base URI."""

    def __init__(
        self,
        config: EndpointConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or EndpointConfig()
        self.base_uri = self.config.base_uri
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(
            auth=self._build_auth(),
            limits=httpx.Limits(max_connections=1, max_keepalive_connections=1),
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_tls,
            transport=transport,
        )

    def _build_auth(self) -> httpx.Auth | None:
        if not self.config.has_credentials:
            return None
        return httpx.DigestAuth(self.config.username or "", self.config.password or "")

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def send_json_rpc_request(self, method: str, params: Any = None) -> Any:
        """POST a JSON-RPC envelope to ``<base>/json_rpc`` and return its result."""
        request = StructuredRequest(method, params)
        response = await self._post(request, json=request.body())
        body = self._read_body(request, response.status_code, response.content, _decode_json)
        return self._unwrap(request, response.status_code, body)

    async def send_path_request(self, path: str, params: Any = None) -> Any:
        """POST ``params`` as the whole body to ``<base>/<path>``."""
        request = PathRequest(path, params)
        response = await self._post(request, json=request.body())
        body = self._read_body(request, response.status_code, response.content, _decode_json)
        return self._unwrap(request, response.status_code, body)

    async def send_binary_request(self, method: str, params: Any = None) -> Any:
        """POST encoded ``params`` to ``<base>/<method>`` and decode the raw reply."""
        request = BinaryRequest(method, params)
        raw = await self._send_binary(request)
        body = self._read_body(request, raw.status_code, raw.content, decode_binary)
        return self._unwrap(request, raw.status_code, body)

    async def send_raw_binary_request(self, method: str, params: Any = None) -> RawResponse:
        """Binary call returning status, headers and bytes without decoding."""
        return await self._send_binary(BinaryRequest(method, params))

    async def _send_binary(self, request: BinaryRequest) -> RawResponse:
        response = await self._post(
            request,
            content=encode_binary(request.params),
            headers={"Content-Type": CONTENT_TYPE},
        )
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            content=response.content,
        )

    async def _post(self, request: Envelope, **kwargs: Any) -> httpx.Response:
        uri = request.uri(self.base_uri)
        name = getattr(request, "method", None) or getattr(request, "path", "")
        async with self._lock:
            logger.debug(f"RPC {name} -> POST {uri}")
            try:
                response = await self._client.post(uri, **kwargs)
            except httpx.RequestError as exc:
                raise TransportError(
                    f"RPC request failed: POST {uri}: {sanitize_error_message(str(exc))}",
                    uri=uri,
                ) from exc
        logger.debug(f"RPC {name} <- HTTP {response.status_code} ({len(response.content)} bytes)")
        return response

    def _read_body(
        self,
        request: Envelope,
        status_code: int,
        content: bytes,
        decoder: Callable[..., Any],
    ) -> Any:
        uri = request.uri(self.base_uri)
        try:
            return decoder(content, uri)
        except DecodeError:
            if status_code >= 400:
                raise HttpStatusError(status_code, uri=uri, body=content[:200].decode("utf-8", errors="replace"))
            raise

    def _unwrap(self, request: Envelope, status_code: int, body: Any) -> Any:
        uri = request.uri(self.base_uri)
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                raise RpcError(_error_code(error.get("code")), str(error.get("message") or ""), request)
        if status_code >= 400:
            raise HttpStatusError(status_code, uri=uri, body=json.dumps(body)[:200])
        if isinstance(body, dict) and "result" in body:
            return body["result"]
        if isinstance(request, StructuredRequest):
            raise DecodeError("json-rpc response has neither result nor error", uri=uri)
        # Path and binary endpoints may answer with a bare payload.
        return body

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RpcConnection":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
