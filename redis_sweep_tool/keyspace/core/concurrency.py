"""
Thread-based worker groups with fail-fast error handling.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from ..logging_config import get_logger
from .cancellation import CancellationToken

logger = get_logger(__name__)


class AtomicCounter:
    """Integer counter safe to update from several threads."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def add(self, amount: int) -> int:
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class ErrorGroup:
    """
    Run callables on a thread pool; the first failure cancels the rest.

    Every callable receives the group's token as its last argument. wait()
    blocks until all callables return and raises the first recorded error.

    Args:
        cancel: Parent token; cancelling it cancels the group
        max_workers: Thread pool size
        name: Thread name prefix
    """

    def __init__(self, cancel: CancellationToken, max_workers: int, name: str = "worker"):
        self.token = cancel.child()
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix=name
        )
        self._futures: list[Future] = []
        self._lock = threading.Lock()
        self._error: BaseException | None = None

    def go(self, fn: Callable[..., Any], *args: Any) -> None:
        """Schedule fn(*args, token)."""
        self._futures.append(self._executor.submit(self._run, fn, *args))

    def _run(self, fn: Callable[..., Any], *args: Any) -> None:
        try:
            fn(*args, self.token)
        except Exception as e:
            with self._lock:
                if self._error is None:
                    self._error = e
                    logger.debug(f"Group failed, cancelling remaining workers: {e!r}")
            self.token.cancel()

    def wait(self) -> None:
        """
        Wait for every scheduled callable.

        Raises:
            Exception: The first error raised by any callable
        """
        try:
            wait(self._futures)
        except KeyboardInterrupt:
            self.token.cancel()
            raise
        finally:
            self._executor.shutdown(wait=True)
            self.token.cancel()

        if self._error is not None:
            raise self._error
