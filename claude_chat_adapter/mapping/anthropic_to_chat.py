"""Map complete Anthropic Messages responses to neutral chat responses."""

from __future__ import annotations

from typing import Any, Dict, List, Union

import structlog

from claude_chat_adapter.mapping.content_blocks import (
    create_usage_details,
    map_content_block,
    map_finish_reason,
)
from claude_chat_adapter.schema.anthropic import (
    MessageResponse,
    RateLimits,
    parse_message_response,
)
from claude_chat_adapter.schema.chat import ChatContent, ChatMessage, ChatResponse

logger = structlog.get_logger(__name__)

_RATE_LIMIT_PROPERTIES = (
    ("requests_limit", "RequestsLimit"),
    ("requests_remaining", "RequestsRemaining"),
    ("requests_reset", "RequestsReset"),
    ("retry_after", "RetryAfter"),
    ("tokens_limit", "TokensLimit"),
    ("tokens_remaining", "TokensRemaining"),
    ("tokens_reset", "TokensReset"),
)


def map_response_content(
    response: Union[MessageResponse, Dict[str, Any]],
) -> List[ChatContent]:
    """Convert response content blocks into neutral content, preserving order."""

    response = parse_message_response(response)
    contents: List[ChatContent] = []
    for block in response.content:
        mapped = map_content_block(block)
        if mapped is not None:
            contents.append(mapped)
    return contents


def rate_limit_properties(rate_limits: RateLimits) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    for field_name, property_name in _RATE_LIMIT_PROPERTIES:
        value = getattr(rate_limits, field_name)
        if value is not None:
            properties[property_name] = value
    return properties


def map_message_response(
    response: Union[MessageResponse, Dict[str, Any]],
) -> ChatResponse:
    """Convert an Anthropic message response into a neutral chat response."""

    response = parse_message_response(response)
    message = ChatMessage(role="assistant", contents=map_response_content(response))

    if response.stop_sequence is not None:
        message.additional_properties["StopSequence"] = response.stop_sequence
    if response.rate_limits is not None:
        message.additional_properties["RateLimits"] = rate_limit_properties(
            response.rate_limits
        )

    logger.debug(
        "response_mapped",
        response_id=response.id,
        block_count=len(response.content),
        content_count=len(message.contents),
        stop_reason=response.stop_reason,
    )

    return ChatResponse(
        messages=[message],
        response_id=response.id,
        model_id=response.model,
        finish_reason=map_finish_reason(response.stop_reason) or "stop",
        usage=(
            create_usage_details(response.usage)
            if response.usage is not None
            else None
        ),
        raw_representation=response,
    )
