"""Monotonic-clock deadline checked between detector iterations."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Deadline:
    """Point in time (on ``clock``) after which a scan should stop.

    Attributes:
        expires_at: Clock reading at which the deadline expires.
        clock: Zero-argument callable returning the current reading.
            Defaults to ``time.monotonic``; tests inject a fake clock.
    """

    expires_at: float
    clock: Callable[[], float] = field(default=time.monotonic, compare=False)

    @classmethod
    def after(
        cls, seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> Deadline:
        """Create a deadline ``seconds`` from now."""
        return cls(expires_at=clock() + seconds, clock=clock)

    def expired(self) -> bool:
        return self.clock() >= self.expires_at

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self.clock())
