"""Cooperative cancellation for long simulation runs."""

import threading
import time


class WorkerStop:
    """Stop flag polled inside worker processes.

    Combines a process-shared event, set by the parent when its token is
    cancelled, with the token's wall-clock deadline.
    """

    def __init__(self, event, expires_at: float | None = None):
        self.event = event
        self.expires_at = expires_at

    def __call__(self) -> bool:
        if self.event.is_set():
            return True
        return self.expires_at is not None and time.time() >= self.expires_at


class CancellationToken:
    """Stop flag polled once per simulated election.

    Fires when ``cancel()`` is called or when the optional timeout elapses.
    """

    def __init__(self, timeout: float | None = None):
        self._event = threading.Event()
        self.deadline = time.time() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self.deadline is not None and time.time() >= self.deadline

    def __call__(self) -> bool:
        return self.cancelled
