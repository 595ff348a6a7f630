from __future__ import annotations

import time
from enum import StrEnum
from typing import Callable

from pydantic import BaseModel


class Phase(StrEnum):
    INTERVIEWS = "interviews"
    CONSOLIDATION = "consolidation"
    COMPLETED = "completed"


class ProgressState(BaseModel):
    phase: Phase
    step: int
    total: int
    action: str
    persona: str | None = None
    elapsed_seconds: float = 0.0
    remaining_seconds: float | None = None


ProgressCallback = Callable[[ProgressState], None]


class ProgressReporter:
    """Broadcasts progress updates to every registered observer."""

    def __init__(self, *callbacks: ProgressCallback) -> None:
        self._callbacks: list[ProgressCallback] = list(callbacks)

    def subscribe(self, callback: ProgressCallback) -> None:
        self._callbacks.append(callback)

    def on_progress(self, state: ProgressState) -> None:
        for callback in self._callbacks:
            callback(state)


class PhaseClock:
    """Wall-clock timing for a single phase, started on construction."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started_at = clock()

    def elapsed(self) -> float:
        return max(0.0, self._clock() - self._started_at)

    def state(
        self,
        phase: Phase,
        step: int,
        total: int,
        action: str,
        persona: str | None = None,
    ) -> ProgressState:
        elapsed = self.elapsed()
        return ProgressState(
            phase=phase,
            step=step,
            total=total,
            action=action,
            persona=persona,
            elapsed_seconds=round(elapsed, 3),
            remaining_seconds=estimate_remaining(elapsed, step, total),
        )


def estimate_remaining(elapsed: float, step: int, total: int) -> float | None:
    if step <= 0 or total <= 0:
        return None
    remaining = elapsed / (step / total) - elapsed
    return round(max(0.0, remaining), 3)
