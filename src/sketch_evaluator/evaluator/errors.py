"""Failure kinds raised while driving the browser."""

from __future__ import annotations

from typing import Optional


class InputError(FileNotFoundError):
    """Raised when the document to evaluate does not exist or cannot be read."""


class SessionError(RuntimeError):
    """Base class for browser session failures.

    Keeps the underlying engine stack (when there is one) so it can be
    reported alongside the message.
    """

    def __init__(self, message: str, *, stack: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stack = stack


class LaunchError(SessionError):
    """Raised when the browser engine cannot be started."""


class NavigationError(SessionError):
    """Raised when the page fails to load the target document."""


class NavigationTimeoutError(NavigationError):
    """Raised when the document does not finish parsing within the timeout."""
