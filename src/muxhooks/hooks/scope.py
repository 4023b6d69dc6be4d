"""InvocationScope: outer cancellation scope for one run of hooks."""

from __future__ import annotations

import time


class InvocationScope:
    """Cancellation flag plus optional deadline shared by one invocation.

    The executor checks it only between hooks: ``cancel()`` never interrupts
    a hook that is already running, while the deadline caps the timeout of
    every hook that starts after it was set.
    """

    def __init__(self, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._cancelled = False

    @classmethod
    def with_timeout(cls, seconds: float) -> InvocationScope:
        """Create a scope whose deadline is *seconds* from now."""
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        """True once cancelled or past the deadline."""
        return self._cancelled or self.expired

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def bound(self, timeout: float) -> float:
        """Clamp a per-hook *timeout* to the time left in this scope."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        return min(timeout, remaining)

    def reason(self) -> str:
        if self._cancelled:
            return "invocation cancelled"
        if self.expired:
            return "invocation deadline exceeded"
        return ""
