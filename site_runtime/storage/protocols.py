"""
Session storage protocol.

Pattern: Protocol typing so a browser-tab session store, a durable store, or
the in-memory implementation can be substituted freely.
"""

from __future__ import annotations

from typing import Protocol


class SessionStorage(Protocol):
    """String key/value store scoped to one page session."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        ...
