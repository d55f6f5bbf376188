"""Structured logging for the mappers.

Two stdlib loggers are wired to structlog: the root logger, which receives
mapping events from every module, and the ``streaming`` logger, which only
receives per-event stream records and never propagates to the root.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List

import structlog

from claude_chat_adapter.config import (
    OBS_LOG_ALL,
    OBS_LOG_ENABLED,
    OBS_LOG_FILE,
    OBS_LOG_PRETTY,
    OBS_STREAM_LOG_ENABLED,
    OBS_STREAM_LOG_FILE,
)

STREAM_LOGGER_NAME = "streaming"

_SHARED_PROCESSORS: List[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]


def logging_enabled() -> bool:
    return OBS_LOG_ENABLED


def streaming_logging_enabled() -> bool:
    return OBS_STREAM_LOG_ENABLED


def _log_level() -> int:
    return logging.DEBUG if OBS_LOG_ALL else logging.INFO


def _formatter() -> structlog.stdlib.ProcessorFormatter:
    if OBS_LOG_PRETTY:
        renderer = structlog.processors.JSONRenderer(indent=2, sort_keys=True)
    else:
        renderer = structlog.processors.JSONRenderer()
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_SHARED_PROCESSORS,
    )


def _handler(
    handler: logging.Handler, level: int, formatter: logging.Formatter
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(
    path: str, level: int, formatter: logging.Formatter
) -> logging.Handler:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    return _handler(logging.FileHandler(file_path), level, formatter)


def _install(
    logger: logging.Logger, handlers: List[logging.Handler], level: int
) -> None:
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in handlers:
        logger.addHandler(handler)


def _configure_mapping_logger(formatter: logging.Formatter, level: int) -> None:
    # Console output stays at INFO even when the file captures DEBUG.
    handlers = [
        _handler(logging.StreamHandler(sys.stdout), logging.INFO, formatter),
        _handler(logging.StreamHandler(sys.stderr), logging.ERROR, formatter),
        _file_handler(OBS_LOG_FILE, level, formatter),
    ]
    _install(logging.getLogger(), handlers, level)


def _configure_stream_logger(formatter: logging.Formatter, level: int) -> None:
    stream_logger = logging.getLogger(STREAM_LOGGER_NAME)
    handlers = [_file_handler(OBS_STREAM_LOG_FILE, level, formatter)]
    _install(stream_logger, handlers, level)
    stream_logger.propagate = False


def configure_logging() -> None:
    """Wire structlog onto stdlib logging according to the OBS_* settings."""

    formatter = _formatter()
    level = _log_level()
    if logging_enabled():
        _configure_mapping_logger(formatter, level)
    if streaming_logging_enabled():
        _configure_stream_logger(formatter, level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_stream_logger() -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(STREAM_LOGGER_NAME)
