"""Collects uncaught exceptions and console errors from a live page."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

from sketch_evaluator.evaluator.models import ConsoleError, PageError
from sketch_evaluator.evaluator.session import BrowserSession, Subscription

logger = logging.getLogger(__name__)

# Operator-facing stream for everything the sketch emits.
diagnostics = logging.getLogger("sketch_evaluator.diagnostics")


class ObservationCollector:
    """Buffer page errors and console errors for the lifetime of one evaluation.

    Buffers are append-only and kept in arrival order. Benign console errors
    (any text containing one of ``benign_patterns``) are dropped before they
    are buffered. Events delivered after ``detach`` are ignored.
    """

    def __init__(self, benign_patterns: Iterable[str] = ()) -> None:
        self._benign_patterns: Tuple[str, ...] = tuple(p for p in benign_patterns if p)
        self._page_errors: List[PageError] = []
        self._console_errors: List[ConsoleError] = []
        self._subscriptions: List[Subscription] = []
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self, session: BrowserSession) -> None:
        if self._attached:
            raise RuntimeError("Collector already attached to a session")
        self._subscriptions = [
            session.subscribe("pageerror", self.handle_page_error),
            session.subscribe("console", self.handle_console_message),
        ]
        self._attached = True

    def detach(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
        self._attached = False

    def drain(self) -> Tuple[List[PageError], List[ConsoleError]]:
        return list(self._page_errors), list(self._console_errors)

    def is_benign(self, text: str) -> bool:
        return any(pattern in text for pattern in self._benign_patterns)

    def handle_page_error(self, error: Any) -> None:
        if not self._attached:
            return
        message = getattr(error, "message", None) or str(error)
        stack: Optional[str] = getattr(error, "stack", None)
        diagnostics.error("Page error (uncaught exception): %s", message)
        self._page_errors.append(PageError(message=message, stack=stack))

    def handle_console_message(self, message: Any) -> None:
        if not self._attached:
            return
        severity = message.type
        text = message.text

        if severity == "error":
            if self.is_benign(text):
                logger.debug("Ignoring benign console error: %s", text)
                return
            diagnostics.error("Console error: %s", text)
            self._console_errors.append(ConsoleError(message=text))
        elif severity == "warning":
            diagnostics.warning("Console warning: %s", text)
        elif severity == "log":
            diagnostics.info("Console log: %s", text)
        else:
            diagnostics.debug("Console %s: %s", severity, text)
