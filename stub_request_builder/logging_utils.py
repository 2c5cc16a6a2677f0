"""structlog setup for the ``stub-request`` CLI."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from rich.console import Console
from rich.text import Text

LOGGER_NAME = "stub_request_builder"
LOG_FORMAT_ENV_VAR = "STUB_REQUEST_LOG_FORMAT"


class LogFormat(str, Enum):
    """How diagnostic events are rendered on stderr."""

    CONSOLE = "console"
    PLAIN = "plain"
    JSON = "json"


class RequestEventRenderer:
    """Render events as ``time level event key=value`` lines through Rich.

    ``path`` (the location reported by encoding and definition errors) is
    highlighted so it stands out from the section counters.
    """

    level_styles = {
        "debug": "dim cyan",
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "critical": "bold white on red",
    }
    highlighted_keys = frozenset({"path"})

    def __init__(self, width: int = 160) -> None:
        self._console = Console(force_terminal=True, width=width, color_system="standard", legacy_windows=False)

    def __call__(self, logger: Any, name: str, event_dict: dict[str, Any]) -> str:
        level = event_dict.pop("level", "info")
        text = Text.assemble(
            (str(event_dict.pop("timestamp", "")), "dim"),
            " ",
            (f"{level:<7}", self.level_styles.get(level, "white")),
            " ",
            (str(event_dict.pop("event", "")), "bold"),
        )
        for key, value in sorted(event_dict.items()):
            style = "bold red" if key in self.highlighted_keys else "bright_cyan"
            text.append(f" {key}=", style="dim")
            text.append(str(value), style=style)

        with self._console.capture() as capture:
            self._console.print(text, end="", soft_wrap=True)
        return capture.get()


def _renderer_for(log_format: LogFormat) -> Any:
    if log_format is LogFormat.CONSOLE:
        return RequestEventRenderer()
    if log_format is LogFormat.PLAIN:
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging(log_level: str, log_format: LogFormat = LogFormat.CONSOLE) -> structlog.stdlib.BoundLogger:
    """Route structlog events to stderr so rendered JSON on stdout stays pipeable."""

    log_format = LogFormat(log_format)
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s", force=True)

    # short times for people at a terminal, full ISO stamps for machines
    timestamp_format = "iso" if log_format is LogFormat.JSON else "%H:%M:%S"
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt=timestamp_format, key="timestamp"),
            structlog.processors.format_exc_info,
            _renderer_for(log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(LOGGER_NAME)
