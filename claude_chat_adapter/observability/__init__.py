"""Observability helpers."""

from claude_chat_adapter.observability.logging import (
    configure_logging,
    get_stream_logger,
    logging_enabled,
    streaming_logging_enabled,
)
from claude_chat_adapter.observability.redaction import redact_text, summarize_contents

__all__ = [
    "configure_logging",
    "get_stream_logger",
    "logging_enabled",
    "redact_text",
    "streaming_logging_enabled",
    "summarize_contents",
]
