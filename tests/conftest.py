"""Pytest hooks and fixtures."""

import os

import pytest


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "requires_wallet_rpc: needs live daemon and wallet RPC services",
    )


def pytest_collection_modifyitems(config, items):
    """Skip requires_wallet_rpc tests unless WALLETRPC_INTEGRATION=1."""
    if os.environ.get("WALLETRPC_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="Requires live wallet RPC services (set WALLETRPC_INTEGRATION=1)")
    for item in items:
        if "requires_wallet_rpc" in item.keywords:
            item.add_marker(skip)
