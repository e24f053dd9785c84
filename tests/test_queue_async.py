from __future__ import annotations

import logging
import threading
from typing import Any, List, Tuple

import pytest

from gelflog.handlers.queue_async import BackgroundDispatcher, DispatchConfig


def test_tasks_run_off_the_caller_thread() -> None:
    seen: List[Tuple[Any, Any, str]] = []

    def target(value: Any, level: Any) -> None:
        seen.append((value, level, threading.current_thread().name))

    with BackgroundDispatcher(target) as dispatcher:
        for idx in range(20):
            assert dispatcher.submit(idx, "info")
        assert dispatcher.flush(timeout=5.0)

    assert [value for value, _, _ in seen] == list(range(20))
    assert {name for _, _, name in seen} == {"gelflog-dispatch"}


def test_stop_drains_pending_work() -> None:
    seen: List[Any] = []
    dispatcher = BackgroundDispatcher(lambda value, level: seen.append(value))
    for idx in range(50):
        dispatcher.submit(idx, None)
    dispatcher.stop()

    assert seen == list(range(50))
    assert not dispatcher.running


def test_full_queue_drops_instead_of_blocking(caplog: pytest.LogCaptureFixture) -> None:
    started = threading.Event()
    release = threading.Event()

    def target(value: Any, level: Any) -> None:
        started.set()
        release.wait(5.0)

    dispatcher = BackgroundDispatcher(target, config=DispatchConfig(queue_maxsize=1))
    assert dispatcher.submit("first", None)
    assert started.wait(5.0)
    assert dispatcher.submit("second", None)

    with caplog.at_level(logging.WARNING, logger="gelflog.handlers.queue_async"):
        assert not dispatcher.submit("third", None)
    assert "dropping log call" in caplog.text

    release.set()
    dispatcher.stop()


def test_failing_task_does_not_kill_worker(caplog: pytest.LogCaptureFixture) -> None:
    seen: List[Any] = []

    def target(value: Any, level: Any) -> None:
        if value == "bad":
            raise RuntimeError("exploded")
        seen.append(value)

    dispatcher = BackgroundDispatcher(target)
    with caplog.at_level(logging.ERROR, logger="gelflog.handlers.queue_async"):
        dispatcher.submit("bad", None)
        dispatcher.submit("good", None)
        assert dispatcher.flush(timeout=5.0)
    dispatcher.stop()

    assert seen == ["good"]
    assert "exploded" in caplog.text


def test_flush_without_work_returns_immediately() -> None:
    dispatcher = BackgroundDispatcher(lambda value, level: None)
    assert dispatcher.flush(timeout=0.1)


def test_timed_out_flush_leaves_no_threads_behind() -> None:
    started = threading.Event()
    release = threading.Event()

    def target(value: Any, level: Any) -> None:
        started.set()
        release.wait(5.0)

    dispatcher = BackgroundDispatcher(target)
    dispatcher.submit("slow", None)
    assert started.wait(5.0)
    threads_before = threading.active_count()

    for _ in range(5):
        assert not dispatcher.flush(timeout=0.05)

    assert threading.active_count() == threads_before
    release.set()
    assert dispatcher.flush(timeout=5.0)
    dispatcher.stop()
