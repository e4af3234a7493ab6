from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from sketch_evaluator.config import Settings  # noqa: E402


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(observation_window_ms=0, navigation_timeout_ms=1000)


@pytest.fixture
def sketch_file(tmp_path: Path) -> Path:
    path = tmp_path / "sketch.html"
    path.write_text("<html><body><script>function setup() {}</script></body></html>", encoding="utf-8")
    return path
