"""Wallet service processes: port registry, launcher and session manager."""

from walletrpc.process.launcher import SpawnedProcess, build_launch_args, spawn_wallet_rpc, terminate_process
from walletrpc.process.manager import SessionManager, WalletSession
from walletrpc.process.ports import PortRegistry

__all__ = [
    "PortRegistry",
    "SessionManager",
    "SpawnedProcess",
    "WalletSession",
    "build_launch_args",
    "spawn_wallet_rpc",
    "terminate_process",
]
