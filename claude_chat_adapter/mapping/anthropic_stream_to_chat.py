"""Translate Anthropic streaming events into neutral chat response updates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Callable, Dict, List, Optional

import structlog

from claude_chat_adapter.mapping.content_blocks import (
    create_usage_details,
    flatten_tool_result,
    map_finish_reason,
    parse_tool_call_arguments,
)
from claude_chat_adapter.observability.logging import get_stream_logger
from claude_chat_adapter.observability.redaction import summarize_contents
from claude_chat_adapter.schema.anthropic import (
    TOOL_RESULT_BLOCK_TYPES,
    CompletedToolCall,
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    MessageDeltaEvent,
    MessageStartEvent,
    RedactedThinkingBlock,
    SignatureDelta,
    TextDelta,
    ThinkingDelta,
    parse_stream_event,
)
from claude_chat_adapter.schema.chat import (
    ChatResponseUpdate,
    FunctionCallContent,
    FunctionResultContent,
    TextContent,
    TextReasoningContent,
    UsageContent,
)

logger = structlog.get_logger(__name__)


@dataclass
class StreamState:
    """Per-stream state; one instance per translated stream."""

    accumulated_reasoning_text: str = ""
    response_id: Optional[str] = None
    model_id: Optional[str] = None

    def reset(self) -> None:
        self.accumulated_reasoning_text = ""
        self.response_id = None
        self.model_id = None


def _on_message_start(
    event: MessageStartEvent, state: StreamState, update: ChatResponseUpdate
) -> None:
    state.reset()
    state.response_id = event.message.id
    state.model_id = event.message.model
    update.response_id = state.response_id
    update.model_id = state.model_id
    if event.message.usage is not None:
        update.contents.append(
            UsageContent(details=create_usage_details(event.message.usage))
        )


def _on_content_block_start(
    event: ContentBlockStartEvent, state: StreamState, update: ChatResponseUpdate
) -> None:
    block = event.content_block

    if isinstance(block, RedactedThinkingBlock) and block.data:
        update.contents.append(TextReasoningContent(text="", protected_data=block.data))

    # Arguments of server tools are only known once the block completes.
    if block.type == "server_tool_use" and block.id and block.name:
        update.contents.append(
            FunctionCallContent(
                call_id=block.id,
                name=block.name,
                arguments={},
                raw_representation=block,
            )
        )

    if (
        block.type in TOOL_RESULT_BLOCK_TYPES
        and block.tool_use_id
        and block.content is not None
    ):
        update.contents.append(
            FunctionResultContent(
                call_id=block.tool_use_id,
                result=flatten_tool_result(block),
                raw_representation=block,
            )
        )


def _on_content_block_delta(
    event: ContentBlockDeltaEvent, state: StreamState, update: ChatResponseUpdate
) -> None:
    delta = event.delta
    if isinstance(delta, TextDelta) and delta.text:
        update.contents.append(TextContent(text=delta.text))
    if isinstance(delta, ThinkingDelta) and delta.thinking:
        state.accumulated_reasoning_text += delta.thinking
    if isinstance(delta, SignatureDelta) and delta.signature:
        update.contents.append(
            TextReasoningContent(
                text=state.accumulated_reasoning_text,
                protected_data=delta.signature,
            )
        )


def _on_message_delta(
    event: MessageDeltaEvent, state: StreamState, update: ChatResponseUpdate
) -> None:
    if event.delta.stop_reason is not None:
        update.finish_reason = map_finish_reason(event.delta.stop_reason)
    if event.usage is not None:
        update.contents.append(UsageContent(details=create_usage_details(event.usage)))


def _append_completed_tool_calls(
    tool_calls: List[CompletedToolCall], update: ChatResponseUpdate
) -> None:
    for tool_call in tool_calls:
        update.contents.append(
            FunctionCallContent(
                call_id=tool_call.id,
                name=tool_call.name,
                arguments=parse_tool_call_arguments(
                    tool_call.arguments, call_id=tool_call.id
                ),
                raw_representation=tool_call,
            )
        )


_EVENT_HANDLERS: Dict[str, Callable[[Any, StreamState, ChatResponseUpdate], None]] = {
    "message_start": _on_message_start,
    "content_block_start": _on_content_block_start,
    "content_block_delta": _on_content_block_delta,
    "message_delta": _on_message_delta,
}


def map_stream_event(event: Any, state: StreamState) -> ChatResponseUpdate:
    """Map one stream event to exactly one update, advancing ``state``."""

    event = parse_stream_event(event)
    update = ChatResponseUpdate(
        role="assistant",
        response_id=state.response_id,
        model_id=state.model_id,
        raw_representation=event,
    )

    handler = _EVENT_HANDLERS.get(event.type or "")
    if handler is not None:
        handler(event, state, update)
    elif event.type not in {"message_stop", "content_block_stop", "ping"}:
        logger.debug("unknown_stream_event_skipped", event_type=event.type)

    tool_calls = getattr(event, "tool_calls", None)
    if tool_calls:
        _append_completed_tool_calls(tool_calls, update)

    return update


async def translate_anthropic_events(
    events: AsyncIterable[Any],
) -> AsyncIterator[ChatResponseUpdate]:
    """Yield one ChatResponseUpdate per upstream event, in arrival order."""

    state = StreamState()
    stream_logger = get_stream_logger()

    async for event in events:
        update = map_stream_event(event, state)
        stream_logger.debug(
            "stream_event_mapped",
            event_type=getattr(update.raw_representation, "type", None),
            response_id=update.response_id,
            finish_reason=update.finish_reason,
            contents=summarize_contents(update.contents),
        )
        yield update
