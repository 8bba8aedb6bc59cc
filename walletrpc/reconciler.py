"""Bring a named wallet into an open, verified, syncing state.

ATTEMPT_OPEN -> VERIFY_IDENTITY -> SYNC -> START_BACKGROUND_SYNC -> READY

An open that fails with ``NOT_FOUND_OR_LOCKED`` detours through CREATE before
VERIFY_IDENTITY. Any other failure propagates unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from loguru import logger

from walletrpc.config.schema import WalletIdentity
from walletrpc.utils.exceptions import IdentityMismatchError, RpcError

# Wallet service code for "wallet does not exist or failed to open",
# e.g. it is already open in another process.
NOT_FOUND_OR_LOCKED = -1


class ReconcileState(Enum):
    ATTEMPT_OPEN = "attempt_open"
    CREATE = "create"
    VERIFY_IDENTITY = "verify_identity"
    SYNC = "sync"
    START_BACKGROUND_SYNC = "start_background_sync"
    READY = "ready"


class ReconcilableWallet(Protocol):
    async def open_wallet(self, name: str, password: str = "") -> None: ...

    async def create_wallet(
        self,
        name: str,
        password: str = "",
        mnemonic: str | None = None,
        restore_height: int = 0,
        language: str = "English",
    ) -> None: ...

    async def get_mnemonic(self) -> str: ...

    async def get_primary_address(self) -> str: ...

    async def sync(self, start_height: int | None = None) -> dict: ...

    async def save(self) -> None: ...

    async def start_syncing(self, period_seconds: float) -> None: ...


class WalletReconciler:
    """Runs the create-or-open protocol once per ``run()`` call."""

    def __init__(
        self,
        wallet: ReconcilableWallet,
        identity: WalletIdentity,
        sync_period_seconds: float = 5.0,
    ):
        self.wallet = wallet
        self.identity = identity
        self.sync_period_seconds = sync_period_seconds
        self.visited: list[ReconcileState] = []

    async def run(self) -> ReconcilableWallet:
        self.visited = []
        self._enter(ReconcileState.ATTEMPT_OPEN)
        try:
            await self.wallet.open_wallet(self.identity.name, self.identity.password)
        except RpcError as e:
            if e.code != NOT_FOUND_OR_LOCKED:
                raise
            logger.info(f"Wallet {self.identity.name} not found or locked ({e.message}); creating it")
            self._enter(ReconcileState.CREATE)
            await self.wallet.create_wallet(
                self.identity.name,
                self.identity.password,
                mnemonic=self.identity.mnemonic or None,
                restore_height=self.identity.restore_height,
                language=self.identity.language,
            )

        self._enter(ReconcileState.VERIFY_IDENTITY)
        await self._verify_identity()

        self._enter(ReconcileState.SYNC)
        await self.wallet.sync()
        await self.wallet.save()

        self._enter(ReconcileState.START_BACKGROUND_SYNC)
        await self.wallet.start_syncing(self.sync_period_seconds)

        self._enter(ReconcileState.READY)
        return self.wallet

    async def _verify_identity(self) -> None:
        if self.identity.mnemonic:
            if await self.wallet.get_mnemonic() != self.identity.mnemonic:
                raise IdentityMismatchError("mnemonic")
        if self.identity.primary_address:
            address = await self.wallet.get_primary_address()
            if address != self.identity.primary_address:
                raise IdentityMismatchError("primary address", expected=self.identity.primary_address, actual=address)

    def _enter(self, state: ReconcileState) -> None:
        self.visited.append(state)
        logger.debug(f"Wallet {self.identity.name}: {state.value}")
