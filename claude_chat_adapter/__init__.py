"""Anthropic Messages to neutral chat content adapter."""

from claude_chat_adapter.mapping import (
    map_chat_content_to_anthropic,
    map_message_response,
    map_response_content,
    translate_anthropic_events,
)

__all__ = [
    "map_chat_content_to_anthropic",
    "map_message_response",
    "map_response_content",
    "translate_anthropic_events",
]
