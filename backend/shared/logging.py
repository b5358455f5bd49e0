"""Structured logging configuration with structlog.

Environment variables:
- LOG_FORMAT: "json" for machine-readable output, "console" or unset for
  human-readable output.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR", or "CRITICAL".

Log output goes to stderr so stdout stays free for reports.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any, TextIO

_VALID_LOG_FORMATS = {"json", "console", ""}
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _enum_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _enum_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple | frozenset | set):
        return [_enum_value(v) for v in value]
    return value


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Replace Enum instances (also inside dicts and sequences) with their .value."""
    for key, value in event_dict.items():
        event_dict[key] = _enum_value(value)
    return event_dict


def _resolve_json_mode() -> bool:
    value = os.environ.get("LOG_FORMAT", "").lower()
    if value not in _VALID_LOG_FORMATS:
        msg = f"Invalid LOG_FORMAT={value!r}. Must be 'json', 'console', or unset."
        raise ValueError(msg)
    return value == "json"


def _resolve_log_level() -> int:
    """Resolve log level from LOG_LEVEL env var. Defaults to INFO."""
    value = os.environ.get("LOG_LEVEL", "INFO").upper()
    if value not in _VALID_LOG_LEVELS:
        msg = f"Invalid LOG_LEVEL={value!r}. Must be one of {', '.join(sorted(_VALID_LOG_LEVELS))}."
        raise ValueError(msg)
    return getattr(logging, value)


def configure_structlog(*, timestamps: bool = True) -> None:
    """Route structlog events through stdlib logging.

    Rendering is left to the handler's ProcessorFormatter, so anything that
    captures stdlib records (pytest's caplog included) sees every event.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        _serialize_enums,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def bind_session_context(session_id: str) -> None:
    """Attach a session id to every log event emitted from the current context."""
    structlog.contextvars.bind_contextvars(session_id=session_id)


def setup_logging(level: int | None = None, stream: TextIO | None = None) -> logging.Handler:
    """Configure structlog and a single root handler writing to stream (stderr by default).

    Log level is resolved from the LOG_LEVEL env var unless given. Repeated
    calls replace the previous handler. Returns the installed handler.
    """
    json_mode = _resolve_json_mode()
    if level is None:
        level = _resolve_log_level()
    if stream is None:
        stream = sys.stderr

    configure_structlog()

    # format_exc_info runs in the formatter so tracebacks render once
    if json_mode:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    return handler
