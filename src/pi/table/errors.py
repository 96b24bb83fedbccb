"""Exceptions raised by the table engine."""

from __future__ import annotations


class TableError(Exception):
    """Base class for every error raised by ``pi.table``."""


class ConfigError(TableError, ValueError):
    """The configuration cannot be applied to the table being rendered.

    Raised from the call that first sees the problem.  The table is left
    untouched, so the caller can fix the configuration and retry on a fresh
    table.
    """


class StreamStateError(TableError, RuntimeError):
    """A streaming call was made in a state that does not allow it."""

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(f"cannot {operation}: stream is {state}")
        self.operation = operation
        self.state = state
