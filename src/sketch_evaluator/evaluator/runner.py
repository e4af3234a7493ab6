"""Evaluation runner: verify input, open a session, observe, report, close."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from sketch_evaluator.config import Settings, settings as default_settings
from sketch_evaluator.evaluator.collector import ObservationCollector
from sketch_evaluator.evaluator.errors import InputError, LaunchError, SessionError
from sketch_evaluator.evaluator.models import (
    EvaluationRequest,
    EvaluationResult,
    ObservedError,
    SessionFailure,
)
from sketch_evaluator.evaluator.session import BrowserSession

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "No runtime errors detected."
RUNTIME_ERRORS_MESSAGE = "Runtime errors detected."


class RunnerState(str, Enum):
    IDLE = "idle"
    FILE_CHECKED = "file_checked"
    SESSION_OPEN = "session_open"
    NAVIGATED = "navigated"
    OBSERVING = "observing"
    REPORTED = "reported"
    FAILED = "failed"
    CLOSED = "closed"


SessionFactory = Callable[[Settings], BrowserSession]
ProgressCallback = Callable[[str], None]


def _log_progress(line: str) -> None:
    logger.info(line)


class EvaluationRunner:
    """Drive one sketch evaluation from file check to session teardown."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        *,
        session_factory: SessionFactory = BrowserSession,
        progress: ProgressCallback = _log_progress,
    ) -> None:
        self._config = config or default_settings
        self._session_factory = session_factory
        self._progress = progress
        self.state = RunnerState.IDLE
        self.history: List[RunnerState] = [RunnerState.IDLE]

    async def evaluate(self, request: EvaluationRequest) -> EvaluationResult:
        try:
            self._check_input(request)
        except InputError as exc:
            logger.error("Error: HTML file not found at %s", request.path)
            self._transition(RunnerState.FAILED)
            return EvaluationResult(success=False, message=str(exc))
        self._transition(RunnerState.FILE_CHECKED)

        url = request.file_url
        self._progress(f"Evaluating sketch from: {url}")

        session = self._session_factory(self._config)
        collector = ObservationCollector(self._config.benign_console_patterns)
        try:
            try:
                await session.open()
                self._transition(RunnerState.SESSION_OPEN)

                collector.attach(session)
                await session.navigate(url, self._config.navigation_timeout_ms)
                self._transition(RunnerState.NAVIGATED)
            except SessionError as exc:
                self._transition(RunnerState.FAILED)
                return self._session_failure(exc)

            self._transition(RunnerState.OBSERVING)
            await asyncio.sleep(self._config.observation_window_seconds)

            page_errors, console_errors = collector.drain()
            result = self._build_result([*page_errors, *console_errors])
            self._transition(RunnerState.REPORTED)
            return result
        finally:
            collector.detach()
            await session.close()
            self._transition(RunnerState.CLOSED)

    def _check_input(self, request: EvaluationRequest) -> None:
        if not request.is_readable_file:
            raise InputError(f"HTML file not found: {request.path}")

    def _build_result(self, errors: List[ObservedError]) -> EvaluationResult:
        if errors:
            self._progress(f"Evaluation complete: Found {len(errors)} runtime errors.")
            return EvaluationResult(success=False, message=RUNTIME_ERRORS_MESSAGE, errors=errors)
        self._progress(f"Evaluation complete: {SUCCESS_MESSAGE}")
        return EvaluationResult(success=True, message=SUCCESS_MESSAGE)

    def _session_failure(self, exc: SessionError) -> EvaluationResult:
        stage = "launch" if isinstance(exc, LaunchError) else "navigation"
        logger.error("Browser %s failed: %s", stage, exc.message)
        return EvaluationResult(
            success=False,
            message=f"Puppeteer or navigation error: {exc.message}",
            errors=[SessionFailure(message=exc.message, stack=exc.stack)],
        )

    def _transition(self, state: RunnerState) -> None:
        logger.debug("Runner state %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)


async def evaluate_sketch_async(
    path: Union[str, Path],
    config: Optional[Settings] = None,
    *,
    progress: ProgressCallback = _log_progress,
) -> EvaluationResult:
    runner = EvaluationRunner(config, progress=progress)
    return await runner.evaluate(EvaluationRequest.from_argument(path))


def evaluate_sketch(
    path: Union[str, Path],
    config: Optional[Settings] = None,
    *,
    progress: ProgressCallback = _log_progress,
) -> EvaluationResult:
    """Evaluate one sketch in a fresh event loop and return its result."""
    return asyncio.run(evaluate_sketch_async(path, config, progress=progress))
