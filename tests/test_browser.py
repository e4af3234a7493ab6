"""End-to-end checks against a real headless Chromium."""

from pathlib import Path

import pytest

from sketch_evaluator.evaluator.runner import evaluate_sketch

pytestmark = pytest.mark.browser


def _chromium_installed() -> bool:
    try:
        from playwright.sync_api import sync_playwright

        with sync_playwright() as p:
            return Path(p.chromium.executable_path).exists()
    except Exception:  # noqa: BLE001 - any failure means no usable browser
        return False


@pytest.fixture(scope="module", autouse=True)
def _require_chromium():
    if not _chromium_installed():
        pytest.skip("Chromium for Playwright is not installed")


@pytest.fixture
def browser_settings(fast_settings):
    return fast_settings.model_copy(update={"observation_window_ms": 500, "navigation_timeout_ms": 15000})


def _sketch(tmp_path: Path, script: str) -> Path:
    path = tmp_path / "sketch.html"
    path.write_text(f"<!DOCTYPE html><html><body><script>{script}</script></body></html>", encoding="utf-8")
    return path


def test_quiet_page_passes(tmp_path, browser_settings):
    path = _sketch(tmp_path, "console.log('ready');")

    result = evaluate_sketch(path, browser_settings)

    assert result.to_dict() == {"success": True, "message": "No runtime errors detected."}


def test_thrown_error_is_reported_once(tmp_path, browser_settings):
    path = _sketch(tmp_path, "throw new Error('boom');")

    result = evaluate_sketch(path, browser_settings)

    assert result.success is False
    assert len(result.errors) == 1
    assert result.errors[0].kind == "pageerror"
    assert "boom" in result.errors[0].message


def test_missing_asset_errors_are_ignored(tmp_path, browser_settings):
    path = _sketch(tmp_path, "console.error('Failed to load resource: net::ERR_FILE_NOT_FOUND');")

    result = evaluate_sketch(path, browser_settings)

    assert result.success is True


def test_page_error_listed_before_console_error(tmp_path, browser_settings):
    path = _sketch(
        tmp_path,
        "console.error('drawn too early'); setTimeout(function () { throw new Error('late throw'); }, 50);",
    )

    result = evaluate_sketch(path, browser_settings)

    assert [error.kind for error in result.errors] == ["pageerror", "console.error"]
    assert "late throw" in result.errors[0].message
    assert result.errors[1].message == "drawn too early"
