"""Shared daemon/wallet clients for a test run, cached per endpoint config."""

from __future__ import annotations

from loguru import logger

from walletrpc.clients.base import RawConfig
from walletrpc.clients.daemon import DaemonRpc
from walletrpc.clients.wallet import WalletRpc
from walletrpc.config.schema import Config, EndpointConfig
from walletrpc.process.manager import SessionManager, WalletSession
from walletrpc.reconciler import WalletReconciler
from walletrpc.rpc.connection import RpcConnection


class FixtureProvider:
    """
    Owns every client and wallet session handed to tests.

    Clients are keyed by their ``EndpointConfig`` so two providers never share
    state, and ``aclose()`` ends the lifetime of everything created here.
    """

    def __init__(self, config: Config | None = None, sessions: SessionManager | None = None):
        self.config = config or Config()
        self.sessions = sessions or SessionManager(self.config)
        self._daemons: dict[EndpointConfig, DaemonRpc] = {}
        self._wallets: dict[EndpointConfig, WalletRpc] = {}

    def daemon_connection(self) -> RpcConnection:
        """Fresh connection to the daemon; the caller closes it."""
        return RpcConnection(self.config.daemon)

    def get_daemon(self) -> DaemonRpc:
        key = self.config.daemon
        if key not in self._daemons:
            self._daemons[key] = DaemonRpc(RawConfig(key))
        return self._daemons[key]

    async def get_wallet(self) -> WalletRpc:
        """Cached wallet client with the test wallet opened (or created) and syncing."""
        key = self.config.wallet_rpc
        wallet = self._wallets.get(key)
        if wallet is None:
            wallet = WalletRpc(RawConfig(key))
            self._wallets[key] = wallet
        await WalletReconciler(wallet, self.config.wallet, self.config.sync_period_seconds).run()
        return wallet

    async def start_wallet_process(self) -> WalletRpc:
        """Wallet client bound to a new service on the next free port."""
        session = await self.sessions.start_session(self.config)
        return session.wallet

    async def stop_wallet_process(self, wallet: WalletRpc) -> None:
        await self.sessions.stop_session(self._session_for(wallet))

    def _session_for(self, wallet: WalletRpc) -> WalletSession | None:
        for session in self.sessions.sessions:
            if session.wallet is wallet:
                return session
        return None

    async def aclose(self) -> None:
        try:
            await self.sessions.stop_all()
        finally:
            clients = [*self._daemons.values(), *self._wallets.values()]
            self._daemons.clear()
            self._wallets.clear()
            for client in clients:
                await client.aclose()
            logger.debug(f"Fixture provider closed {len(clients)} cached clients")
