"""Caller-supplied cancellation and deadlines for gateway calls."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from claimstack.domain.errors import ResolutionCancelledError

type Clock = Callable[[], float]


@dataclass(slots=True, kw_only=True)
class CancelScope:
    """Deadline and/or explicit cancellation propagated from the invoking request.

    ``deadline`` is expressed in the units of ``clock`` (monotonic seconds by default).
    """

    deadline: float | None = None
    clock: Clock = time.monotonic
    _event: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def with_timeout(cls, seconds: float, *, clock: Clock = time.monotonic) -> CancelScope:
        if seconds < 0:
            raise ValueError("Timeout must be non-negative")
        return cls(deadline=clock() + seconds, clock=clock)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.expired

    @property
    def expired(self) -> bool:
        return self.deadline is not None and self.clock() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or ``None`` if unbounded."""

        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self.clock())

    def raise_if_cancelled(self, stage: str) -> None:
        if self._event.is_set():
            raise ResolutionCancelledError(f"Resolution cancelled before {stage}")
        if self.expired:
            raise ResolutionCancelledError(f"Resolution deadline exceeded before {stage}")


def check_scope(scope: CancelScope | None, stage: str) -> None:
    if scope is not None:
        scope.raise_if_cancelled(stage)
