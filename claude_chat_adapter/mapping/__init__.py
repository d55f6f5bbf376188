"""Mapping helpers between Anthropic content and neutral chat content."""

from .anthropic_stream_to_chat import (
    StreamState,
    map_stream_event,
    translate_anthropic_events,
)
from .anthropic_to_chat import map_message_response, map_response_content
from .chat_to_anthropic import map_chat_content_to_anthropic
from .content_blocks import flatten_tool_result, map_content_block

__all__ = [
    "StreamState",
    "flatten_tool_result",
    "map_chat_content_to_anthropic",
    "map_content_block",
    "map_message_response",
    "map_response_content",
    "map_stream_event",
    "translate_anthropic_events",
]
