"""Session-scoped key/value persistence."""

from site_runtime.storage.memory import InMemorySessionStorage
from site_runtime.storage.protocols import SessionStorage

__all__ = ["InMemorySessionStorage", "SessionStorage"]
