"""Tests for SessionManager start/stop lifecycle."""

from __future__ import annotations

import asyncio

import pytest

import walletrpc.process.manager as manager_mod
from walletrpc.clients.wallet import WalletRpc
from walletrpc.config.schema import Config, EndpointConfig, WalletProcessConfig
from walletrpc.process.manager import SessionManager
from walletrpc.utils.exceptions import SessionNotRegisteredError, SessionStartError


class FakeSpawned:
    def __init__(self, args: list[str]):
        self.args = args
        self.returncode: int | None = None
        self.pid = 4242


def _config(mode: str = "local", wallet_uri: str | None = None) -> Config:
    return Config(
        daemon=EndpointConfig(uri="http://localhost:38081", username="superuser", password="abctesting123"),
        wallet_rpc=EndpointConfig(port=38084, uri=wallet_uri, username="rpc_user", password="abc123"),
        process=WalletProcessConfig(
            mode=mode,
            executable_path="/opt/monero/monero-wallet-rpc",
            wallet_dir="/tmp/wallets",
            startup_timeout_seconds=0.2,
            poll_interval_seconds=0.01,
        ),
    )


@pytest.fixture
def lifecycle(monkeypatch):
    """Fake spawn/terminate and a reachable wallet service."""
    state = {"spawned": [], "terminated": [], "reachable": True}

    async def fake_spawn(args):
        proc = FakeSpawned(args)
        state["spawned"].append(proc)
        return proc

    async def fake_terminate(proc, timeout=10.0):
        state["terminated"].append(proc)
        proc.returncode = 0
        return 0

    async def fake_is_connected(self):
        return state["reachable"]

    monkeypatch.setattr(manager_mod, "spawn_wallet_rpc", fake_spawn)
    monkeypatch.setattr(manager_mod, "terminate_process", fake_terminate)
    monkeypatch.setattr(WalletRpc, "is_connected", fake_is_connected)
    return state


@pytest.mark.asyncio
async def test_local_session_spawns_on_next_port_and_stops_cleanly(lifecycle):
    manager = SessionManager(_config())
    session = await manager.start_session()

    assert session.slot == 1
    assert session.port == 38085
    assert session.is_local
    assert session.wallet.base_uri == "http://localhost:38085"
    args = lifecycle["spawned"][0].args
    assert args[args.index("--rpc-bind-port") + 1] == "38085"
    assert manager.sessions == [session]

    await manager.stop_session(session)
    assert lifecycle["terminated"] == [session.process]
    assert manager.registry.claimed == frozenset()
    assert manager.sessions == []
    assert session.wallet.connection.is_closed


@pytest.mark.asyncio
async def test_second_stop_fails_and_does_not_release_again(lifecycle, monkeypatch):
    manager = SessionManager(_config())
    session = await manager.start_session()

    releases: list[int] = []
    original_release = manager.registry.release

    async def spy_release(slot):
        releases.append(slot)
        await original_release(slot)

    monkeypatch.setattr(manager.registry, "release", spy_release)

    await manager.stop_session(session)
    with pytest.raises(SessionNotRegisteredError):
        await manager.stop_session(session)
    assert releases == [session.slot]
    assert len(lifecycle["terminated"]) == 1


@pytest.mark.asyncio
async def test_stopping_a_foreign_session_fails(lifecycle):
    ours = SessionManager(_config())
    theirs = SessionManager(_config())
    session = await theirs.start_session()
    with pytest.raises(SessionNotRegisteredError):
        await ours.stop_session(session)
    await theirs.stop_session(session)


@pytest.mark.asyncio
async def test_remote_mode_attaches_without_spawning(lifecycle):
    manager = SessionManager(_config(mode="remote", wallet_uri="http://127.0.0.1:38084"))
    session = await manager.start_session()

    assert lifecycle["spawned"] == []
    assert not session.is_local
    assert session.endpoint.base_uri == "http://127.0.0.1:38085"
    assert session.endpoint.username == "rpc_user"

    await manager.stop_session(session)
    assert lifecycle["terminated"] == []
    assert manager.registry.claimed == frozenset()


@pytest.mark.asyncio
async def test_concurrent_sessions_get_distinct_ports(lifecycle):
    manager = SessionManager(_config())
    sessions = await asyncio.gather(*(manager.start_session() for _ in range(4)))
    assert sorted(s.port for s in sessions) == [38085, 38086, 38087, 38088]
    await manager.stop_all()
    assert manager.registry.claimed == frozenset()
    assert len(lifecycle["terminated"]) == 4


@pytest.mark.asyncio
async def test_unreachable_service_fails_start_and_releases_slot(lifecycle):
    lifecycle["reachable"] = False
    manager = SessionManager(_config())
    with pytest.raises(SessionStartError):
        await manager.start_session()
    assert manager.registry.claimed == frozenset()
    assert manager.sessions == []
    assert lifecycle["terminated"] == lifecycle["spawned"]


@pytest.mark.asyncio
async def test_process_exiting_during_startup_fails_fast(lifecycle, monkeypatch):
    lifecycle["reachable"] = False

    async def exiting_spawn(args):
        proc = FakeSpawned(args)
        proc.returncode = 1
        lifecycle["spawned"].append(proc)
        return proc

    monkeypatch.setattr(manager_mod, "spawn_wallet_rpc", exiting_spawn)
    manager = SessionManager(_config())
    with pytest.raises(SessionStartError) as exc_info:
        await manager.start_session()
    assert "exited with code 1" in exc_info.value.message
    assert manager.registry.claimed == frozenset()


@pytest.mark.asyncio
async def test_missing_executable_fails_start_and_releases_slot(lifecycle, monkeypatch):
    async def failing_spawn(args):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(manager_mod, "spawn_wallet_rpc", failing_spawn)
    manager = SessionManager(_config())
    with pytest.raises(SessionStartError):
        await manager.start_session()
    assert manager.registry.claimed == frozenset()
    assert lifecycle["terminated"] == []


@pytest.mark.asyncio
async def test_slot_is_reused_after_stop(lifecycle):
    manager = SessionManager(_config())
    first = await manager.start_session()
    second = await manager.start_session()
    await manager.stop_session(first)
    third = await manager.start_session()
    assert third.slot == first.slot
    assert third.port == 38085
    await manager.stop_all()
    assert second.wallet.connection.is_closed


@pytest.mark.asyncio
async def test_stop_all_stops_every_session_when_one_stop_fails(lifecycle, monkeypatch):
    manager = SessionManager(_config())
    sessions = [await manager.start_session() for _ in range(3)]
    attempts: list[FakeSpawned] = []

    async def flaky_terminate(proc, timeout=10.0):
        attempts.append(proc)
        if len(attempts) == 1:
            raise OSError("kill failed")
        proc.returncode = 0
        return 0

    monkeypatch.setattr(manager_mod, "terminate_process", flaky_terminate)

    with pytest.raises(OSError, match="kill failed"):
        await manager.stop_all()

    assert len(attempts) == 3
    assert manager.sessions == []
    assert manager.registry.claimed == frozenset()
    assert all(s.wallet.connection.is_closed for s in sessions)


@pytest.mark.asyncio
async def test_session_port_comes_from_the_registry(lifecycle):
    manager = SessionManager(_config())
    base = _config()
    override = base.model_copy(update={"process": base.process.model_copy(update={"port_start": 40000})})

    session = await manager.start_session(override)

    assert session.port == manager.registry.port_for(session.slot) == 38085
    args = lifecycle["spawned"][0].args
    assert args[args.index("--rpc-bind-port") + 1] == "38085"
    await manager.stop_session(session)
