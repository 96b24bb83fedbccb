"""Shared fixtures for pi.table tests."""

from __future__ import annotations

import pytest

from pi.table import LRUCache, Table


@pytest.fixture
def cache() -> LRUCache[str, int]:
    """A private width cache so tests never share state."""
    return LRUCache(256)


@pytest.fixture
def people_table() -> Table:
    table = Table()
    table.header(["Name", "Age", "City"])
    table.append_bulk([["Alice", "25", "New York"], ["Bob", "30", "Boston"]])
    return table
