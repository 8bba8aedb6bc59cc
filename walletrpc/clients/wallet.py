"""Wallet RPC client."""

from __future__ import annotations

from typing import Any

from loguru import logger

from walletrpc.clients.base import RpcClientBase
from walletrpc.utils.exceptions import WalletRpcClientError


class WalletRpc(RpcClientBase):
    """
    Wallet service façade.

    Covers the calls needed to bring a test wallet into a ready state and to
    tear it down; everything else goes through ``self.connection`` directly.
    """

    async def open_wallet(self, name: str, password: str = "") -> None:
        await self.connection.send_json_rpc_request("open_wallet", {"filename": name, "password": password})
        logger.info(f"Opened wallet {name} at {self.base_uri}")

    async def create_wallet(
        self,
        name: str,
        password: str = "",
        mnemonic: str | None = None,
        restore_height: int = 0,
        language: str = "English",
    ) -> None:
        """Create ``name``; restores from ``mnemonic`` when one is given."""
        if mnemonic:
            await self.connection.send_json_rpc_request(
                "restore_deterministic_wallet",
                {
                    "filename": name,
                    "password": password,
                    "seed": mnemonic,
                    "restore_height": restore_height,
                    "language": language,
                },
            )
        else:
            await self.connection.send_json_rpc_request(
                "create_wallet",
                {"filename": name, "password": password, "language": language},
            )
        logger.info(f"Created wallet {name} at {self.base_uri}")

    async def get_mnemonic(self) -> str:
        result = await self.connection.send_json_rpc_request("query_key", {"key_type": "mnemonic"})
        return result["key"]

    async def get_primary_address(self) -> str:
        result = await self.connection.send_json_rpc_request("get_address", {"account_index": 0})
        return result["address"]

    async def get_height(self) -> int:
        result = await self.connection.send_json_rpc_request("get_height")
        return int(result["height"])

    async def sync(self, start_height: int | None = None) -> dict[str, Any]:
        params = {"start_height": start_height} if start_height is not None else None
        result = await self.connection.send_json_rpc_request("refresh", params)
        return {
            "blocks_fetched": int(result.get("blocks_fetched", 0)),
            "received_money": bool(result.get("received_money", False)),
        }

    async def save(self) -> None:
        await self.connection.send_json_rpc_request("store")

    async def start_syncing(self, period_seconds: float) -> None:
        """Arm periodic background refresh; returns immediately."""
        period = max(1, int(round(period_seconds)))
        await self.connection.send_json_rpc_request("auto_refresh", {"enable": True, "period": period})

    async def stop_syncing(self) -> None:
        await self.connection.send_json_rpc_request("auto_refresh", {"enable": False})

    async def close(self, save: bool = False) -> None:
        await self.connection.send_json_rpc_request("close_wallet", {"autosave_current": save})

    async def stop(self) -> None:
        """Ask the wallet service to save and shut down."""
        await self.connection.send_json_rpc_request("stop_wallet")

    async def get_version(self) -> dict[str, Any]:
        return await self.connection.send_json_rpc_request("get_version")

    async def is_connected(self) -> bool:
        try:
            await self.get_version()
            return True
        except WalletRpcClientError:
            return False
