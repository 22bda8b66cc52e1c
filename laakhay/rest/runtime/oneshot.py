"""Single-use blocking handoff between two threads."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class OneShot(Generic[T]):
    """Carries exactly one value from a producer thread to a waiting thread.

    ``set`` may be called once; ``wait`` blocks until it has been.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._value: T | None = None
        self._is_set = False

    @property
    def is_set(self) -> bool:
        return self._is_set

    def set(self, value: T) -> None:
        with self._lock:
            if self._is_set:
                raise RuntimeError("OneShot value already set")
            self._value = value
            self._is_set = True
        self._event.set()

    def wait(self, timeout: float | None = None) -> T:
        """Block until the value is set and return it.

        Raises:
            TimeoutError: If ``timeout`` elapses first
        """
        if not self._event.wait(timeout):
            raise TimeoutError("Timed out waiting for value")
        return self._value  # type: ignore[return-value]
