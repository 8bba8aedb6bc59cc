"""Configuration schema using Pydantic.

Endpoint, process and wallet identity settings; persisted to ~/.walletrpc/config.json.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class NetworkType(str, Enum):
    """Network the wallet service runs against."""
    MAINNET = "mainnet"
    TESTNET = "testnet"
    STAGENET = "stagenet"


class EndpointConfig(BaseModel):
    """Where an RPC service lives and how to authenticate to it."""
    model_config = ConfigDict(frozen=True)

    protocol: str = "http"
    host: str = "localhost"
    port: int = 18081
    username: str | None = None
    password: str | None = None
    uri: str | None = None  # Explicit base URI; wins over protocol/host/port
    verify_tls: bool = True  # Reject self-signed certificates if true
    timeout_seconds: float = 30.0

    @property
    def base_uri(self) -> str:
        """The single authoritative base URI for requests."""
        if self.uri:
            return self.uri.rstrip("/")
        return f"{self.protocol}://{self.host}:{self.port}"

    @property
    def has_credentials(self) -> bool:
        return bool(self.username)

    def with_port(self, port: int) -> "EndpointConfig":
        """Copy of this endpoint bound to another port (explicit URI included)."""
        uri = None
        if self.uri:
            base = self.base_uri
            scheme, sep, rest = base.partition("://")
            host = rest.split("/", 1)[0]
            if host.rfind(":") > host.rfind("]"):
                host = host[: host.rfind(":")]
            uri = f"{scheme}{sep}{host}:{port}"
        return self.model_copy(update={"port": port, "uri": uri})


class WalletProcessConfig(BaseModel):
    """How wallet service sessions are started."""
    mode: Literal["local", "remote"] = "local"  # remote: attach to already running services
    network_type: NetworkType = NetworkType.STAGENET
    executable_path: str = "monero-wallet-rpc"
    wallet_dir: str = "./test_wallets"
    access_control_origins: str = "http://localhost:8080"  # CORS access from web browser
    port_start: int = 38084
    startup_timeout_seconds: float = 60.0
    stop_timeout_seconds: float = 10.0
    poll_interval_seconds: float = 0.25
    extra_args: list[str] = Field(default_factory=list)


class WalletIdentity(BaseModel):
    """The wallet a test run expects to find (or create)."""
    name: str = "test_wallet_1"
    password: str = "supersecretpassword123"
    mnemonic: str = ""
    primary_address: str = ""
    restore_height: int = 0  # Must be the height of the wallet's first tx
    language: str = "English"


class Config(BaseSettings):
    """Root configuration for walletrpc."""
    daemon: EndpointConfig = Field(default_factory=lambda: EndpointConfig(port=38081))
    wallet_rpc: EndpointConfig = Field(default_factory=lambda: EndpointConfig(port=38084))
    process: WalletProcessConfig = Field(default_factory=WalletProcessConfig)
    wallet: WalletIdentity = Field(default_factory=WalletIdentity)
    sync_period_seconds: float = 5.0  # Period between background wallet syncs

    model_config = ConfigDict(
        env_prefix="WALLETRPC_",
        env_nested_delimiter="__"
    )
