"""
Request deadline with cooperative cancellation.

Long loops (PPR iterations, graph expansion, the linear embedding scan) call
check() at safe points; expiry or a set cancel event raises
DeadlineExceededError.
"""

import threading
import time
from typing import Optional

from ..models.errors import DeadlineExceededError


class Deadline:
    """Absolute monotonic deadline plus an optional cancel event."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self._expires_at = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )
        self._cancel_event = cancel_event

    @classmethod
    def none(cls) -> "Deadline":
        """A deadline that never expires."""
        return cls()

    @property
    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def expired(self) -> bool:
        if self.cancelled:
            return True
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def check(self, stage: str) -> None:
        if self.cancelled:
            raise DeadlineExceededError(f"{stage}: request cancelled")
        if self._expires_at is not None and time.monotonic() >= self._expires_at:
            raise DeadlineExceededError(f"{stage}: deadline exceeded")


def resolve_deadline(deadline: Optional[Deadline]) -> Deadline:
    return deadline if deadline is not None else Deadline.none()
