"""
Bootstrap phase state.

Phases run Eager -> Lazy -> Delayed. Each phase is entered exactly once and
only after the previous phase has completed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum

from site_runtime.core.exceptions import PhaseTransitionError


class Phase(str, Enum):
    EAGER = "eager"
    LAZY = "lazy"
    DELAYED = "delayed"


PHASE_ORDER: tuple[Phase, ...] = (Phase.EAGER, Phase.LAZY, Phase.DELAYED)


class PhaseTracker:
    """Enforces the strictly ordered, non-reentrant phase progression."""

    def __init__(self) -> None:
        self.current: Phase | None = None
        self.completed: list[Phase] = []

    @property
    def expected(self) -> Phase | None:
        """Next phase that may be entered, or None when all are done."""
        if len(self.completed) == len(PHASE_ORDER):
            return None
        return PHASE_ORDER[len(self.completed)]

    def enter(self, phase: Phase) -> None:
        """Enter phase.

        Raises:
            PhaseTransitionError: If another phase is running, or phase is
                not the next one in order.
        """
        if self.current is not None or phase is not self.expected:
            previous = self.current or (self.completed[-1] if self.completed else None)
            raise PhaseTransitionError(
                previous.value if previous else None, phase.value
            )
        self.current = phase

    def complete(self, phase: Phase) -> None:
        if self.current is not phase:
            raise PhaseTransitionError(
                self.current.value if self.current else None, phase.value
            )
        self.completed.append(phase)
        self.current = None


@dataclass
class BootstrapResult:
    """Outcome of PageBootstrapper.load_page().

    ``delayed_task`` is still pending when the result is returned. Failures of
    the delayed loader stay inside the task, but awaiting it raises
    ``asyncio.CancelledError`` once the task is cancelled, e.g. by
    PageBootstrapper.aclose() when the runtime shuts down.
    """

    phases_completed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    delayed_task: asyncio.Task[None] | None = None
    processing_time_ms: float = 0.0
