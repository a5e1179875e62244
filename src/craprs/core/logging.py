"""structlog configuration.

structlog renders through stdlib ``logging`` so that every configured output
gets its own handler, level and renderer (console or JSON). Console handlers
are muted while a spinner owns the terminal line.

Library modules log through a module-level ``structlog.get_logger()``;
nothing reaches a handler until ``configure_logging`` has run with the
resolved config, and the logger picks up each reconfiguration.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from craprs.config.models import LoggingConfig, LogOutputConfig

# Applied to structlog events and to records from plain stdlib loggers alike
_PRE_CHAIN: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
]


class ConsoleSuppressingFilter(logging.Filter):
    """Drops records while a spinner is live. Attached to console handlers only."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        # Deferred: progress logs through structlog itself
        from craprs.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def _build_handler(output: LogOutputConfig) -> logging.Handler:
    """Handler for one output: a stream for stderr/stdout, an append-mode file otherwise."""
    handler: logging.Handler
    colors = False
    if output.destination in ("stderr", "stdout"):
        stream = sys.stderr if output.destination == "stderr" else sys.stdout
        handler = logging.StreamHandler(stream)
        handler.addFilter(ConsoleSuppressingFilter())
        colors = hasattr(stream, "isatty") and stream.isatty()
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    renderer: Any
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_PRE_CHAIN)
    )
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Install handlers for every configured output, replacing any previous setup.

    Args:
        config: Full logging config. When given, ``json_format`` and ``level``
            are ignored.
        json_format: Single stderr output rendered as JSON instead of console text.
        level: Level for the single-output setup.
    """
    from craprs.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfigured per CLI run; cached loggers would keep the old level
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    for output in config.outputs:
        handler = _build_handler(output)
        handler.setLevel(_level(output.level or config.level))
        root.addHandler(handler)

