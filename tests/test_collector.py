import asyncio
import logging

import pytest

from fakes import FakeConsoleMessage, FakeEngine, FakeJsError
from sketch_evaluator.evaluator.collector import ObservationCollector
from sketch_evaluator.evaluator.models import ConsoleError, PageError
from sketch_evaluator.evaluator.session import BrowserSession


@pytest.fixture
def attached(fast_settings):
    engine = FakeEngine()
    session = BrowserSession(fast_settings, playwright_factory=engine.factory)
    asyncio.run(session.open())
    collector = ObservationCollector(["Failed to load resource"])
    collector.attach(session)
    return engine.page, collector


def test_page_errors_keep_message_and_stack(attached):
    page, collector = attached

    page.emit("pageerror", FakeJsError("x is not defined", "ReferenceError: x is not defined\n    at setup"))

    page_errors, console_errors = collector.drain()
    assert page_errors == [PageError("x is not defined", "ReferenceError: x is not defined\n    at setup")]
    assert console_errors == []


def test_only_error_severity_is_buffered(attached, caplog):
    page, collector = attached
    caplog.set_level(logging.DEBUG, logger="sketch_evaluator.diagnostics")

    page.emit("console", FakeConsoleMessage("log", "frame 1"))
    page.emit("console", FakeConsoleMessage("warning", "deprecated call"))
    page.emit("console", FakeConsoleMessage("error", "p5 had problems"))
    page.emit("console", FakeConsoleMessage("info", "hello"))

    _, console_errors = collector.drain()
    assert console_errors == [ConsoleError("p5 had problems")]

    lines = [record.getMessage() for record in caplog.records if record.name == "sketch_evaluator.diagnostics"]
    assert "Console log: frame 1" in lines
    assert "Console warning: deprecated call" in lines
    assert "Console error: p5 had problems" in lines


def test_benign_console_errors_are_never_buffered(attached, caplog):
    page, collector = attached
    caplog.set_level(logging.INFO, logger="sketch_evaluator.diagnostics")

    page.emit(
        "console",
        FakeConsoleMessage("error", "Failed to load resource: net::ERR_FILE_NOT_FOUND"),
    )

    assert collector.drain() == ([], [])
    assert not [r for r in caplog.records if "ERR_FILE_NOT_FOUND" in r.getMessage()]


def test_buffers_keep_arrival_order_without_dedup(attached):
    page, collector = attached

    page.emit("console", FakeConsoleMessage("error", "same"))
    page.emit("console", FakeConsoleMessage("error", "other"))
    page.emit("console", FakeConsoleMessage("error", "same"))

    _, console_errors = collector.drain()
    assert [error.message for error in console_errors] == ["same", "other", "same"]


def test_events_after_detach_are_dropped(attached):
    page, collector = attached

    collector.detach()
    page.emit("pageerror", FakeJsError("late"))
    collector.handle_console_message(FakeConsoleMessage("error", "late"))

    assert collector.drain() == ([], [])
    assert page.listeners["pageerror"] == []


def test_blank_patterns_are_ignored():
    collector = ObservationCollector(["", "Failed to load resource"])

    assert collector.is_benign("Failed to load resource: 404")
    assert not collector.is_benign("TypeError: undefined")
