"""Test-run helpers: keyed client cache and wallet service sessions."""

from walletrpc.testing.fixtures import FixtureProvider

__all__ = ["FixtureProvider"]
