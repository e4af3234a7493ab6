"""CLI interface for sketch-evaluator."""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from sketch_evaluator.config import Settings, settings
from sketch_evaluator.evaluator.models import EvaluationResult
from sketch_evaluator.evaluator.runner import evaluate_sketch

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="sketch-evaluator",
    help="Load a sketch in a headless browser and report runtime errors",
    add_completion=False,
)

# Results go to stdout, diagnostics to stderr
console = Console()
err_console = Console(stderr=True)

USAGE = "Usage: sketch-evaluator <path/to/your/p5_sketch.html>"


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
    )


def _set_verbose_logging(verbose: bool) -> Optional[int]:
    if not verbose:
        return None
    root_logger = logging.getLogger()
    previous_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)
    return previous_level


def _build_settings(
    window_ms: Optional[int],
    timeout_ms: Optional[int],
    ignore: Optional[List[str]],
    headed: bool,
) -> Settings:
    overrides = {}
    if window_ms is not None:
        overrides["observation_window_ms"] = window_ms
    if timeout_ms is not None:
        overrides["navigation_timeout_ms"] = timeout_ms
    if ignore:
        overrides["benign_console_patterns"] = list(ignore)
    if headed:
        overrides["headless"] = False
    return settings.model_copy(update=overrides)


def _print_progress(line: str) -> None:
    console.print(escape(line), highlight=False, soft_wrap=True)


def exit_code_for(result: EvaluationResult) -> int:
    """Map an evaluation result to the process exit code."""
    return 0 if result.success else 1


def _report(result: EvaluationResult, output: Optional[Path]) -> None:
    payload = json.dumps(result.to_dict(), indent=2)
    console.print("\n--- Final Evaluation Result ---", highlight=False)
    console.print(payload, markup=False, highlight=False, soft_wrap=True)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
        logger.info("Result written to %s", output)


@app.command()
def evaluate(
    path: Optional[Path] = typer.Argument(
        None,
        help="Path to the sketch HTML document",
        show_default=False,
    ),
    window_ms: Optional[int] = typer.Option(
        None,
        "--window-ms",
        min=0,
        help="Observation window after navigation, in milliseconds (default 5000)",
    ),
    timeout_ms: Optional[int] = typer.Option(
        None,
        "--timeout-ms",
        min=1,
        help="Navigation timeout in milliseconds (default 30000)",
    ),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Console error substring to treat as benign; repeat to add more",
    ),
    headed: bool = typer.Option(
        False,
        "--headed",
        help="Show the browser window",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON result to this file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
):
    """
    Evaluate a sketch for runtime errors.

    Loads the document in headless Chromium, waits for the observation window
    and prints the result as JSON. Exits 1 when any error was found.
    """
    if path is None:
        err_console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(1)

    _configure_logging(settings.log_level)
    previous_level = _set_verbose_logging(verbose)
    try:
        config = _build_settings(window_ms, timeout_ms, ignore, headed)
        result = evaluate_sketch(path, config, progress=_print_progress)
        _report(result, output)
    except Exception as exc:  # noqa: BLE001 - last-resort boundary
        err_console.print(f"[red]Unhandled error during evaluation: {escape(str(exc))}[/red]")
        logger.exception("Unhandled error during evaluation")
        raise typer.Exit(1) from exc
    finally:
        if previous_level is not None:
            logging.getLogger().setLevel(previous_level)

    raise typer.Exit(exit_code_for(result))


def main():
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        err_console.print(f"\n[red]Error: {escape(str(e))}[/red]")
        logger.exception("Unhandled exception")
        sys.exit(1)


if __name__ == "__main__":
    main()
