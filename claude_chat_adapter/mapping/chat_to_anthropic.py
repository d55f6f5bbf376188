"""Map neutral chat content back to Anthropic content blocks."""

from __future__ import annotations

import json
from typing import Any, Iterable, List

import structlog

from claude_chat_adapter.schema.anthropic import (
    MCPToolUseBlock,
    RedactedThinkingBlock,
    ServerToolUseBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from claude_chat_adapter.schema.chat import (
    FunctionCallContent,
    FunctionResultContent,
    TextContent,
    TextReasoningContent,
)

logger = structlog.get_logger(__name__)


def _result_to_text(result: Any) -> str:
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, ensure_ascii=False)
    except TypeError:
        return str(result)


def _function_call_to_block(content: FunctionCallContent) -> Any:
    raw = content.raw_representation
    if isinstance(raw, (ServerToolUseBlock, MCPToolUseBlock)):
        return raw
    return ToolUseBlock(id=content.call_id, name=content.name, input=content.arguments)


def _function_result_to_block(content: FunctionResultContent) -> Any:
    raw = content.raw_representation
    if raw is not None and getattr(raw, "tool_use_id", None) == content.call_id:
        return raw
    return ToolResultBlock(
        tool_use_id=content.call_id, content=_result_to_text(content.result)
    )


def _reasoning_to_block(content: TextReasoningContent) -> Any:
    if content.text:
        return ThinkingBlock(thinking=content.text, signature=content.protected_data)
    if content.protected_data:
        return RedactedThinkingBlock(data=content.protected_data)
    return None


def map_chat_content_to_anthropic(contents: Iterable[Any]) -> List[Any]:
    """Rebuild Anthropic content blocks for replaying an assistant turn.

    Vendor blocks kept in ``raw_representation`` are reused so server tool
    calls and their results go back with their original types. Usage items
    have no block form and are dropped.
    """

    blocks: List[Any] = []
    for content in contents:
        block = None
        if isinstance(content, TextContent):
            block = TextBlock(text=content.text)
        elif isinstance(content, FunctionCallContent):
            block = _function_call_to_block(content)
        elif isinstance(content, FunctionResultContent):
            block = _function_result_to_block(content)
        elif isinstance(content, TextReasoningContent):
            block = _reasoning_to_block(content)
        else:
            logger.debug(
                "chat_content_skipped", content_type=getattr(content, "type", None)
            )
        if block is not None:
            blocks.append(block)
    return blocks
