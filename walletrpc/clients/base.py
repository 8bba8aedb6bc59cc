"""Connection sources and the shared client base."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from walletrpc.config.schema import EndpointConfig
from walletrpc.rpc.connection import RpcConnection


@dataclass(frozen=True)
class AlreadyBuilt:
    """Reuse an existing connection (shares its socket and auth state)."""
    connection: RpcConnection


@dataclass(frozen=True)
class RawConfig:
    """Build a new connection from an endpoint config."""
    config: EndpointConfig


ConnectionSource = AlreadyBuilt | RawConfig


def resolve_connection(source: ConnectionSource) -> tuple[RpcConnection, bool]:
    """Return (connection, owned). Owned connections are closed by the client."""
    if isinstance(source, AlreadyBuilt):
        return source.connection, False
    if isinstance(source, RawConfig):
        return RpcConnection(source.config), True
    raise TypeError(f"expected AlreadyBuilt or RawConfig, got {type(source).__name__}")


class RpcClientBase:
    """Façade over one ``RpcConnection``."""

    def __init__(self, source: ConnectionSource):
        self.connection, self._owns_connection = resolve_connection(source)

    @property
    def base_uri(self) -> str:
        return self.connection.base_uri

    async def aclose(self) -> None:
        if self._owns_connection and not self.connection.is_closed:
            await self.connection.aclose()

    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
