"""Configuration module for walletrpc."""

from walletrpc.config.access import clear_config_cache, get_config
from walletrpc.config.loader import get_config_path, load_config, save_config
from walletrpc.config.schema import (
    Config,
    EndpointConfig,
    NetworkType,
    WalletIdentity,
    WalletProcessConfig,
)

__all__ = [
    "Config",
    "EndpointConfig",
    "NetworkType",
    "WalletIdentity",
    "WalletProcessConfig",
    "clear_config_cache",
    "get_config",
    "get_config_path",
    "load_config",
    "save_config",
]
