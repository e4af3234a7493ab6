"""Common data models for sketch evaluation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Union


@dataclass(frozen=True)
class EvaluationRequest:
    path: Path

    @classmethod
    def from_argument(cls, raw: Union[str, os.PathLike]) -> "EvaluationRequest":
        return cls(path=Path(raw))

    @property
    def is_readable_file(self) -> bool:
        return self.path.is_file() and os.access(self.path, os.R_OK)

    @property
    def file_url(self) -> str:
        return self.path.resolve().as_uri()


@dataclass
class PageError:
    """Uncaught exception raised while the page was executing."""

    kind: ClassVar[str] = "pageerror"

    message: str
    stack: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.kind, "message": self.message}
        if self.stack is not None:
            payload["stack"] = self.stack
        return payload


@dataclass
class ConsoleError:
    """Message the page logged at error severity."""

    kind: ClassVar[str] = "console.error"

    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "message": self.message}


@dataclass
class SessionFailure:
    """Browser launch or navigation failure reported in place of observations."""

    kind: ClassVar[str] = "puppeteer_error"

    message: str
    stack: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.kind, "message": self.message}
        if self.stack is not None:
            payload["stack"] = self.stack
        return payload


ObservedError = Union[PageError, ConsoleError, SessionFailure]


@dataclass
class EvaluationResult:
    success: bool
    message: str
    errors: List[ObservedError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success, "message": self.message}
        if not self.success and self.errors:
            payload["errors"] = [error.to_dict() for error in self.errors]
        return payload
