"""Per-block translation rules shared by the response and stream mappers."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Union

import structlog

from claude_chat_adapter.config import get_max_flatten_depth
from claude_chat_adapter.errors.mapping_errors import (
    FlattenDepthExceededError,
    MappingError,
    ToolArgumentsDecodeError,
)
from claude_chat_adapter.schema.anthropic import (
    BashCodeExecutionToolResultBlock,
    CodeExecutionToolResultError,
    MCPToolResultBlock,
    RedactedThinkingBlock,
    TextBlock,
    TextEditorCodeExecutionToolResultBlock,
    ThinkingBlock,
    ToolResultBlock,
    Usage,
    WebSearchToolResultBlock,
    WebSearchToolResultError,
    parse_content_block,
)
from claude_chat_adapter.schema.chat import (
    ChatContent,
    ChatFinishReason,
    FunctionCallContent,
    FunctionResultContent,
    TextContent,
    TextReasoningContent,
    UsageDetails,
)

logger = structlog.get_logger(__name__)

_TEXT_EDITOR_FIELDS = (
    "file_type",
    "content",
    "num_lines",
    "start_line",
    "total_lines",
    "is_file_update",
    "old_start",
    "old_lines",
    "new_start",
    "new_lines",
    "lines",
)


def map_finish_reason(stop_reason: Optional[str]) -> Optional[ChatFinishReason]:
    """Map an Anthropic stop_reason onto the neutral finish reason."""

    if stop_reason is None:
        return None
    if stop_reason == "max_tokens":
        return "length"
    return "stop"


def create_usage_details(usage: Union[Usage, Dict[str, Any]]) -> UsageDetails:
    if not isinstance(usage, Usage):
        usage = Usage.model_validate(usage)

    total = None
    if usage.input_tokens is not None or usage.output_tokens is not None:
        total = (usage.input_tokens or 0) + (usage.output_tokens or 0)

    additional: Dict[str, int] = {}
    if usage.cache_creation_input_tokens is not None:
        additional["cache_creation_input_tokens"] = usage.cache_creation_input_tokens
    if usage.cache_read_input_tokens is not None:
        additional["cache_read_input_tokens"] = usage.cache_read_input_tokens
    if usage.server_tool_use is not None:
        if usage.server_tool_use.web_search_requests is not None:
            additional["web_search_requests"] = (
                usage.server_tool_use.web_search_requests
            )
        if usage.server_tool_use.web_fetch_requests is not None:
            additional["web_fetch_requests"] = usage.server_tool_use.web_fetch_requests

    return UsageDetails(
        input_token_count=usage.input_tokens,
        output_token_count=usage.output_tokens,
        total_token_count=total,
        additional_counts=additional,
    )


def parse_tool_call_arguments(
    raw: Optional[str], call_id: Optional[str] = None
) -> Dict[str, Any]:
    """Parse the assembled input JSON of a tool call into a mapping.

    Empty input means the tool takes no arguments. Anything that is not a
    JSON object raises ToolArgumentsDecodeError.
    """

    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("tool_arguments_decode_failed", call_id=call_id, error=exc.msg)
        raise ToolArgumentsDecodeError(
            f"Tool call arguments are not valid JSON: {exc.msg}",
            call_id=call_id,
            raw_arguments=raw,
        ) from exc
    if not isinstance(parsed, dict):
        logger.warning(
            "tool_arguments_decode_failed",
            call_id=call_id,
            error=f"expected object, got {type(parsed).__name__}",
        )
        raise ToolArgumentsDecodeError(
            "Tool call arguments must be a JSON object",
            call_id=call_id,
            raw_arguments=raw,
        )
    return parsed


def _safe_json_dumps(value: object) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError:
        return json.dumps(str(value), ensure_ascii=False)


def _error_text(
    error: Union[CodeExecutionToolResultError, WebSearchToolResultError],
) -> str:
    lines = [f"error_code: {error.error_code}"]
    message = getattr(error, "error_message", None)
    if message:
        lines.append(f"error_message: {message}")
    return "\n".join(lines)


def _web_search_result_text(
    block: WebSearchToolResultBlock, depth: int, max_depth: int
) -> str:
    if isinstance(block.content, WebSearchToolResultError):
        return _error_text(block.content)
    entries: List[str] = []
    for result in block.content:
        lines = [f"Title: {result.title or ''}", f"URL: {result.url}"]
        if result.page_age:
            lines.append(f"Page Age: {result.page_age}")
        entries.append("\n".join(lines))
    return "\n\n".join(entries)


def _bash_result_text(
    block: BashCodeExecutionToolResultBlock, depth: int, max_depth: int
) -> str:
    if isinstance(block.content, CodeExecutionToolResultError):
        return _error_text(block.content)
    return "\n".join(
        [
            f"stdout: {block.content.stdout}",
            f"stderr: {block.content.stderr}",
            f"return_code: {block.content.return_code}",
        ]
    )


def _text_editor_result_text(
    block: TextEditorCodeExecutionToolResultBlock, depth: int, max_depth: int
) -> str:
    if isinstance(block.content, CodeExecutionToolResultError):
        return _error_text(block.content)
    lines: List[str] = []
    for field_name in _TEXT_EDITOR_FIELDS:
        value = getattr(block.content, field_name)
        if value is None:
            continue
        if isinstance(value, list):
            value = "\n".join(str(line) for line in value)
        lines.append(f"{field_name}: {value}")
    return "\n".join(lines)


def _nested_content_text(
    block: Union[MCPToolResultBlock, ToolResultBlock], depth: int, max_depth: int
) -> str:
    if isinstance(block.content, str):
        return block.content
    parts: List[str] = []
    for nested in block.content:
        if isinstance(nested, TextBlock):
            parts.append(nested.text)
            continue
        flattener = _RESULT_FLATTENERS.get(nested.type)
        if flattener is not None:
            parts.append(_flatten(nested, depth + 1, max_depth))
            continue
        parts.append(_safe_json_dumps(nested.model_dump(exclude_none=True)))
    return "\n".join(parts)


_RESULT_FLATTENERS: Dict[str, Callable[[Any, int, int], str]] = {
    "web_search_tool_result": _web_search_result_text,
    "bash_code_execution_tool_result": _bash_result_text,
    "text_editor_code_execution_tool_result": _text_editor_result_text,
    "mcp_tool_result": _nested_content_text,
    "tool_result": _nested_content_text,
}


def _flatten(block: Any, depth: int, max_depth: int) -> str:
    if depth > max_depth:
        raise FlattenDepthExceededError(max_depth, getattr(block, "tool_use_id", None))
    return _RESULT_FLATTENERS[block.type](block, depth, max_depth)


def flatten_tool_result(block: Any) -> str:
    """Render a tool result block, including nested results, as one string."""

    block = parse_content_block(block)
    if block.type not in _RESULT_FLATTENERS:
        raise MappingError(f"Unsupported tool result block type: {block.type}")
    return _flatten(block, 1, get_max_flatten_depth())


def _map_text(block: TextBlock) -> TextContent:
    return TextContent(text=block.text)


def _map_thinking(block: ThinkingBlock) -> TextReasoningContent:
    return TextReasoningContent(
        text=block.thinking, protected_data=block.signature or None
    )


def _map_redacted_thinking(block: RedactedThinkingBlock) -> TextReasoningContent:
    return TextReasoningContent(text="", protected_data=block.data)


def _map_tool_use(block: Any) -> FunctionCallContent:
    return FunctionCallContent(
        call_id=block.id,
        name=block.name,
        arguments=dict(block.input),
        raw_representation=block,
    )


def _map_tool_result(block: Any) -> FunctionResultContent:
    return FunctionResultContent(
        call_id=block.tool_use_id,
        result=flatten_tool_result(block),
        raw_representation=block,
    )


_BLOCK_MAPPERS: Dict[str, Callable[[Any], ChatContent]] = {
    "text": _map_text,
    "thinking": _map_thinking,
    "redacted_thinking": _map_redacted_thinking,
    "tool_use": _map_tool_use,
    "server_tool_use": _map_tool_use,
    "mcp_tool_use": _map_tool_use,
    "web_search_tool_result": _map_tool_result,
    "bash_code_execution_tool_result": _map_tool_result,
    "text_editor_code_execution_tool_result": _map_tool_result,
    "mcp_tool_result": _map_tool_result,
    "tool_result": _map_tool_result,
}


def map_content_block(block: Any) -> Optional[ChatContent]:
    """Translate one Anthropic content block; unknown block types map to None."""

    block = parse_content_block(block)
    mapper = _BLOCK_MAPPERS.get(block.type)
    if mapper is None:
        logger.debug("unknown_content_block_skipped", block_type=block.type)
        return None
    return mapper(block)
