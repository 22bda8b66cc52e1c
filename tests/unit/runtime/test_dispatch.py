"""Unit tests for CallbackDispatcher."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from laakhay.rest.runtime.dispatch import CallbackDispatcher
from laakhay.rest.runtime.oneshot import OneShot


def test_inline_without_context():
    seen = []
    CallbackDispatcher().dispatch(seen.append, 1)
    assert seen == [1]


def test_rejects_unknown_context():
    with pytest.raises(TypeError, match="event loop or an Executor"):
        CallbackDispatcher(object())


@pytest.mark.asyncio
async def test_event_loop_context():
    loop = asyncio.get_running_loop()
    delivered = loop.create_future()
    dispatcher = CallbackDispatcher(loop)

    def deliver():
        dispatcher.dispatch(lambda value: delivered.set_result((value, threading.get_ident())), "x")

    thread = threading.Thread(target=deliver)
    thread.start()
    thread.join()
    value, ident = await asyncio.wait_for(delivered, 5)
    assert value == "x"
    assert ident == threading.get_ident()


def test_executor_context_preserves_order():
    seen = []
    done: OneShot = OneShot()
    with ThreadPoolExecutor(max_workers=8) as pool:
        dispatcher = CallbackDispatcher(pool)
        for i in range(200):
            dispatcher.dispatch(seen.append, i)
        dispatcher.dispatch(done.set, True)
        assert done.wait(5)
    assert seen == list(range(200))


def test_callback_errors_are_logged(caplog):
    seen = []

    def broken():
        raise ValueError("boom")

    dispatcher = CallbackDispatcher()
    with caplog.at_level(logging.ERROR, logger="laakhay.rest.runtime.dispatch"):
        dispatcher.dispatch(broken)
        dispatcher.dispatch(seen.append, "after")
    assert seen == ["after"]
    assert caplog.records[0].callback == "broken"
