"""Unit tests for OneShot."""

import threading

import pytest

from laakhay.rest.runtime.oneshot import OneShot


def test_handoff_between_threads():
    shot: OneShot[int] = OneShot()
    threading.Timer(0.01, shot.set, args=(42,)).start()
    assert shot.wait(5) == 42
    assert shot.is_set


def test_second_set_rejected():
    shot: OneShot[str] = OneShot()
    shot.set("first")
    with pytest.raises(RuntimeError):
        shot.set("second")
    assert shot.wait() == "first"


def test_wait_timeout():
    with pytest.raises(TimeoutError):
        OneShot().wait(0.01)
