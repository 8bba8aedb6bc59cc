"""Daemon RPC client."""

from __future__ import annotations

from typing import Any

from walletrpc.clients.base import RpcClientBase
from walletrpc.utils.exceptions import WalletRpcClientError


class DaemonRpc(RpcClientBase):
    """Read-side access to a daemon over its JSON-RPC, path and binary endpoints."""

    async def get_height(self) -> int:
        result = await self.connection.send_json_rpc_request("get_block_count")
        return int(result["count"])

    async def get_info(self) -> dict[str, Any]:
        return await self.connection.send_json_rpc_request("get_info")

    async def get_version(self) -> dict[str, Any]:
        return await self.connection.send_json_rpc_request("get_version")

    async def get_last_block_header(self) -> dict[str, Any]:
        result = await self.connection.send_json_rpc_request("get_last_block_header")
        return result["block_header"]

    async def get_transactions(self, tx_hashes: list[str], decode_as_json: bool = True) -> dict[str, Any]:
        return await self.connection.send_path_request(
            "get_transactions",
            {"txs_hashes": list(tx_hashes), "decode_as_json": decode_as_json},
        )

    async def get_blocks_by_height(self, heights: list[int]) -> Any:
        return await self.connection.send_binary_request("get_blocks_by_height.bin", {"heights": list(heights)})

    async def is_connected(self) -> bool:
        try:
            await self.get_version()
            return True
        except WalletRpcClientError:
            return False
