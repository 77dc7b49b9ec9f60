"""Persisted raw config blobs, keyed by (environment, locale)."""

from __future__ import annotations

from typing import Final

from site_runtime.resolvers.environment import Environment
from site_runtime.storage.protocols import SessionStorage

CONFIG_KEY: Final[str] = "config"


def config_storage_key(locale: str | None = None) -> str:
    """Session key for a config blob: ``config`` or ``config:<locale>``."""
    return f"{CONFIG_KEY}:{locale}" if locale else CONFIG_KEY


class ConfigBlobStore:
    """Read/write discipline for raw config blobs in session storage.

    A session belongs to one site origin, so the environment does not appear
    in the storage key; it is accepted for symmetry with the fetch side.
    """

    def __init__(self, session: SessionStorage) -> None:
        self._session = session

    def get(self, environment: Environment, locale: str | None = None) -> str | None:  # noqa: ARG002
        return self._session.get_item(config_storage_key(locale))

    def set(self, environment: Environment, locale: str | None, blob: str) -> None:  # noqa: ARG002
        self._session.set_item(config_storage_key(locale), blob)
