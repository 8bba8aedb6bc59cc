"""Wallet service session manager.

Each session owns one port slot. In ``local`` mode a wallet RPC process is
spawned on ``port_start + slot``; in ``remote`` mode the session attaches to a
service already listening on that port. ``start_session`` returns only once the
service answers; ``stop_session`` releases everything exactly once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from uuid import uuid4

from loguru import logger

from walletrpc.clients.base import RawConfig
from walletrpc.clients.wallet import WalletRpc
from walletrpc.config.schema import Config, EndpointConfig, WalletProcessConfig
from walletrpc.process.launcher import SpawnedProcess, build_launch_args, spawn_wallet_rpc, terminate_process
from walletrpc.process.ports import PortRegistry
from walletrpc.utils.exceptions import SessionNotRegisteredError, SessionStartError


@dataclass(eq=False)
class WalletSession:
    session_id: str
    slot: int
    port: int
    endpoint: EndpointConfig
    wallet: WalletRpc
    process: SpawnedProcess | None = None
    stop_timeout_seconds: float = 10.0

    @property
    def is_local(self) -> bool:
        return self.process is not None


class SessionManager:
    """Starts and stops wallet service sessions on unique ports."""

    def __init__(self, config: Config | None = None, registry: PortRegistry | None = None):
        self.config = config or Config()
        self.registry = registry or PortRegistry(self.config.process.port_start)
        self._sessions: dict[str, WalletSession] = {}
        self._lock = asyncio.Lock()

    @property
    def sessions(self) -> list[WalletSession]:
        return list(self._sessions.values())

    async def start_session(self, config: Config | None = None) -> WalletSession:
        cfg = config or self.config
        slot = await self.registry.claim()
        port = self.registry.port_for(slot)
        endpoint = cfg.wallet_rpc.with_port(port)
        spawned: SpawnedProcess | None = None
        wallet: WalletRpc | None = None
        try:
            if cfg.process.mode == "local":
                args = build_launch_args(cfg.process, cfg.daemon, cfg.wallet_rpc, port)
                try:
                    spawned = await spawn_wallet_rpc(args)
                except OSError as exc:
                    raise SessionStartError(
                        f"Cannot launch {cfg.process.executable_path}: {exc}", port=port
                    ) from exc
            wallet = WalletRpc(RawConfig(endpoint))
            await self._wait_until_reachable(wallet, spawned, cfg.process, port)
        except BaseException:
            await self._discard(slot, wallet, spawned, cfg.process.stop_timeout_seconds)
            raise

        session = WalletSession(
            session_id=uuid4().hex,
            slot=slot,
            port=port,
            endpoint=endpoint,
            wallet=wallet,
            process=spawned,
            stop_timeout_seconds=cfg.process.stop_timeout_seconds,
        )
        async with self._lock:
            self._sessions[session.session_id] = session
        logger.info(f"Wallet session {session.session_id} ready at {endpoint.base_uri} (slot {slot}, {cfg.process.mode})")
        return session

    async def stop_session(self, session: WalletSession) -> None:
        session_id = getattr(session, "session_id", None)
        async with self._lock:
            if session_id is None or self._sessions.get(session_id) is not session:
                raise SessionNotRegisteredError(session_id)
            del self._sessions[session_id]
        logger.info(f"Stopping wallet session {session_id} (port {session.port})")
        await self._discard(session.slot, session.wallet, session.process, session.stop_timeout_seconds)

    async def stop_all(self) -> None:
        """Stop every session; the first failure is re-raised after all were tried."""
        first_error: BaseException | None = None
        for session in self.sessions:
            try:
                await self.stop_session(session)
            except Exception as e:
                logger.error(f"Failed to stop wallet session {session.session_id} (port {session.port}): {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    async def _wait_until_reachable(
        self,
        wallet: WalletRpc,
        spawned: SpawnedProcess | None,
        process_config: WalletProcessConfig,
        port: int,
    ) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + process_config.startup_timeout_seconds
        while True:
            if spawned is not None and spawned.returncode is not None:
                raise SessionStartError(
                    f"Wallet RPC process exited with code {spawned.returncode} before becoming reachable",
                    port=port,
                )
            if await wallet.is_connected():
                return
            if loop.time() >= deadline:
                raise SessionStartError(
                    f"Wallet RPC at {wallet.base_uri} not reachable after {process_config.startup_timeout_seconds}s",
                    port=port,
                )
            await asyncio.sleep(process_config.poll_interval_seconds)

    async def _discard(
        self,
        slot: int,
        wallet: WalletRpc | None,
        spawned: SpawnedProcess | None,
        stop_timeout: float,
    ) -> None:
        try:
            if spawned is not None:
                await terminate_process(spawned, timeout=stop_timeout)
        finally:
            try:
                if wallet is not None:
                    await wallet.aclose()
            finally:
                await self.registry.release(slot)
