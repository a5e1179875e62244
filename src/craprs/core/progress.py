"""Terminal feedback on stderr: status lines and the coverage-run spinner.

stdout carries only the report (table or JSON), so everything here goes to a
stderr rich console. While the spinner is on screen, console log handlers
are muted so log lines cannot tear the spinner line; file handlers keep
logging.

Usage::

    with spinner("Running cargo tarpaulin"):
        subprocess.run(...)

    status("Failed to parse src/broken.rs:3 (skipped)", style="warning")
"""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Literal

import structlog
from rich.console import Console
from rich.markup import escape

log = structlog.get_logger()

StatusStyle = Literal["success", "warning", "error", "info"]

_console = Console(stderr=True)

_MARKERS: dict[str, str] = {
    "success": "[green]✓[/green]",
    "warning": "[yellow]![/yellow]",
    "error": "[red]✗[/red]",
    "info": " ",
}

_muted = threading.local()


def is_console_suppressed() -> bool:
    """True while console log handlers should drop records."""
    return getattr(_muted, "depth", 0) > 0


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Mute console log handlers for the duration of the block. Nests."""
    _muted.depth = getattr(_muted, "depth", 0) + 1
    try:
        yield
    finally:
        _muted.depth -= 1


def _stderr_is_tty() -> bool:
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def status(message: str, *, style: StatusStyle = "info") -> None:
    """Print one marked line to stderr. ``message`` is shown literally, not as markup."""
    _console.print(f"{_MARKERS[style]} {escape(message)}", highlight=False)
    log.debug("status", message=message, style=style)


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show ``message`` with a spinner until the block exits.

    Without a TTY (CI, pipes) the message is printed once instead.
    """
    start = time.perf_counter()
    if _stderr_is_tty():
        with (
            suppress_console_logs(),
            _console.status(f"[cyan]{escape(message)}[/cyan]", spinner="dots"),
        ):
            yield
    else:
        _console.print(f"{escape(message)}...", highlight=False)
        yield
    log.debug("spinner_done", message=message, elapsed_s=round(time.perf_counter() - start, 3))
