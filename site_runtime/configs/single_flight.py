"""
Single-flight resolution cache.

Maps a key (the environment) to the one task resolving it. The task is
registered synchronously, before the caller awaits anything, so every
coroutine arriving while the resolution is in flight shares the same task.
The event loop is cooperative: no lock is needed between the lookup and the
registration.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Hashable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class SingleFlightCache(Generic[T]):
    """Per-key cache of in-flight or resolved tasks. Entries are never evicted."""

    def __init__(self) -> None:
        self._tasks: dict[Hashable, asyncio.Task[T]] = {}

    def get_or_create(
        self,
        key: Hashable,
        factory: Callable[[], Coroutine[Any, Any, T]],
    ) -> asyncio.Task[T]:
        """Return the task for key, starting factory() only if none exists.

        Must be called from within a running event loop.
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.get_running_loop().create_task(factory())
            self._tasks[key] = task
        return task

    def __contains__(self, key: object) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)
