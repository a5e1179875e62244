"""Text helpers shared by the table report and the CLI summary line."""

from __future__ import annotations

UNMEASURED = "unmeasured"


def pluralize(count: int, noun: str, plural: str | None = None) -> str:
    """``1 file``, ``2 files``; pass ``plural`` for irregular nouns."""
    word = noun if count == 1 else (plural or f"{noun}s")
    return f"{count} {word}"


def format_duration(seconds: float) -> str:
    """Compact elapsed time: ``0.3s``, ``1m 30s``, ``1h 1m`` (no seconds past an hour)."""
    if seconds < 0:
        raise ValueError(f"Duration must be non-negative, got {seconds}")
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def format_coverage(percent: float | None) -> str:
    """Coverage cell text; ``unmeasured`` when no line of the function was instrumented."""
    if percent is None:
        return UNMEASURED
    return f"{percent:.1f}%"


def run_summary(files: int, functions: int, elapsed_sec: float, skipped: int = 0) -> str:
    """One line for stderr, e.g. ``Scored 4 functions in 2 files, 1 skipped (0.2s)``."""
    text = f"Scored {pluralize(functions, 'function')} in {pluralize(files, 'file')}"
    if skipped:
        text += f", {skipped} skipped"
    return f"{text} ({format_duration(elapsed_sec)})"
