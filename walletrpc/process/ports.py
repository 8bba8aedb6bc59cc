"""Port slot registry for concurrently running wallet services."""

from __future__ import annotations

import asyncio

from walletrpc.utils.exceptions import RegistryError


class PortRegistry:
    """Hands out unique offsets from ``base_port``; slot 0 is never used."""

    def __init__(self, base_port: int):
        self.base_port = base_port
        self._claimed: set[int] = set()
        self._lock = asyncio.Lock()

    async def claim(self) -> int:
        async with self._lock:
            slot = 1
            while slot in self._claimed:
                slot += 1
            self._claimed.add(slot)
            return slot

    async def release(self, slot: int) -> None:
        async with self._lock:
            if slot not in self._claimed:
                raise RegistryError(slot)
            self._claimed.remove(slot)

    def port_for(self, slot: int) -> int:
        return self.base_port + slot

    @property
    def claimed(self) -> frozenset[int]:
        return frozenset(self._claimed)
