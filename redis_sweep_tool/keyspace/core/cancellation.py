"""
Cooperative cancellation shared by every concurrent keyspace operation.

A token is cancelled explicitly or when its parent is. Workers check it at
each blocking point (scan call, queue handoff, sleep) and unwind by raising
OperationCancelledError.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading

from ..exceptions import OperationCancelledError


class CancellationToken:
    """Broadcastable cancellation signal with parent/child propagation."""

    def __init__(self, parent: "CancellationToken | None" = None):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list[CancellationToken] = []
        if parent is not None:
            parent._adopt(self)

    def _adopt(self, child: "CancellationToken") -> None:
        with self._lock:
            self._children.append(child)
            cancelled = self._event.is_set()
        if cancelled:
            child.cancel()

    def child(self) -> "CancellationToken":
        """Create a token that is cancelled together with this one."""
        return CancellationToken(parent=self)

    def cancel(self) -> None:
        """Cancel this token and all of its descendants."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            children = list(self._children)
        for child in children:
            child.cancel()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or timeout elapses. Returns True if cancelled."""
        return self._event.wait(timeout)

    def sleep(self, seconds: float) -> None:
        """
        Sleep for `seconds` unless cancelled first.

        Raises:
            OperationCancelledError: If the token is cancelled before or during the sleep
        """
        self.raise_if_cancelled()
        if seconds > 0 and self._event.wait(seconds):
            raise OperationCancelledError()
