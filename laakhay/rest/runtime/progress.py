"""Conversion of transport byte counts into fractional progress."""

from __future__ import annotations

from collections.abc import Callable

ProgressCallback = Callable[[float | None], None]
Dispatch = Callable[..., None]


def _call_inline(callback: Callable[..., None], *args: object) -> None:
    callback(*args)


class ProgressReporter:
    """Turns ``(received, total)`` byte events into fractions in ``[0.0, 1.0]``.

    ``None`` is delivered when the total size is unknown. Fractions never
    decrease, and nothing is delivered once ``close`` has been called, which
    the pipeline does before it delivers the completion.
    """

    def __init__(self, callback: ProgressCallback, dispatch: Dispatch = _call_inline) -> None:
        self._callback = callback
        self._dispatch = dispatch
        self._last = 0.0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self, received: int, total: int | None) -> None:
        if self._closed:
            return
        if total is None or total <= 0:
            fraction: float | None = None
        else:
            fraction = min(1.0, max(0.0, received / total))
            if fraction < self._last:
                return
            self._last = fraction
        self._dispatch(self._callback, fraction)

    def close(self) -> None:
        self._closed = True
