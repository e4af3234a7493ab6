"""Sketch evaluation: browser session, observation collector and runner."""

from .errors import InputError, LaunchError, NavigationError, NavigationTimeoutError, SessionError
from .models import ConsoleError, EvaluationRequest, EvaluationResult, PageError, SessionFailure
from .runner import EvaluationRunner, RunnerState, evaluate_sketch, evaluate_sketch_async

__all__ = [
    "ConsoleError",
    "EvaluationRequest",
    "EvaluationResult",
    "EvaluationRunner",
    "InputError",
    "LaunchError",
    "NavigationError",
    "NavigationTimeoutError",
    "PageError",
    "RunnerState",
    "SessionError",
    "SessionFailure",
    "evaluate_sketch",
    "evaluate_sketch_async",
]
