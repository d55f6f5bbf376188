"""Anthropic Messages API response and stream event schemas."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter


class TextBlock(BaseModel):
    """Anthropic text content block."""

    type: Literal["text"] = "text"
    text: str
    citations: Optional[List[Dict[str, Any]]] = None


class ThinkingBlock(BaseModel):
    """Anthropic extended thinking content block."""

    type: Literal["thinking"] = "thinking"
    thinking: str = ""
    signature: Optional[str] = None


class RedactedThinkingBlock(BaseModel):
    """Anthropic thinking block whose reasoning is only available as opaque data."""

    type: Literal["redacted_thinking"] = "redacted_thinking"
    data: str


class ToolUseBlock(BaseModel):
    """Anthropic tool use content block."""

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)
    cache_control: Optional[Dict[str, Any]] = None


class ServerToolUseBlock(BaseModel):
    """Anthropic server tool use content block."""

    type: Literal["server_tool_use"] = "server_tool_use"
    id: str
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class MCPToolUseBlock(BaseModel):
    """Anthropic MCP connector tool use content block."""

    type: Literal["mcp_tool_use"] = "mcp_tool_use"
    id: str
    name: str
    server_name: Optional[str] = None
    input: Dict[str, Any] = Field(default_factory=dict)


class WebSearchResult(BaseModel):
    """Anthropic web search result item."""

    type: Literal["web_search_result"] = "web_search_result"
    url: str
    title: Optional[str] = None
    encrypted_content: Optional[str] = None
    page_age: Optional[str] = None


class WebSearchToolResultError(BaseModel):
    """Error payload of a web search tool result."""

    type: Literal["web_search_tool_result_error"] = "web_search_tool_result_error"
    error_code: str


class WebSearchToolResultBlock(BaseModel):
    """Anthropic web search tool result content block."""

    type: Literal["web_search_tool_result"] = "web_search_tool_result"
    tool_use_id: str
    content: Union[List[WebSearchResult], WebSearchToolResultError]


class CodeExecutionToolResultError(BaseModel):
    """Error payload shared by the code execution tool results."""

    type: str = "code_execution_tool_result_error"
    error_code: str
    error_message: Optional[str] = None


class BashCodeExecutionResult(BaseModel):
    """Output of a bash command run by the code execution tool."""

    type: Literal["bash_code_execution_result"] = "bash_code_execution_result"
    stdout: str = ""
    stderr: str = ""
    return_code: int = 0
    content: List[Dict[str, Any]] = Field(default_factory=list)


class BashCodeExecutionToolResultBlock(BaseModel):
    """Anthropic bash code execution tool result content block."""

    type: Literal["bash_code_execution_tool_result"] = "bash_code_execution_tool_result"
    tool_use_id: str
    content: Union[BashCodeExecutionResult, CodeExecutionToolResultError]


class TextEditorCodeExecutionResult(BaseModel):
    """Output of a text editor command (view, create or str_replace)."""

    type: str = "text_editor_code_execution_view_result"
    file_type: Optional[str] = None
    content: Optional[str] = None
    num_lines: Optional[int] = None
    start_line: Optional[int] = None
    total_lines: Optional[int] = None
    is_file_update: Optional[bool] = None
    old_start: Optional[int] = None
    old_lines: Optional[int] = None
    new_start: Optional[int] = None
    new_lines: Optional[int] = None
    lines: Optional[List[str]] = None


class TextEditorCodeExecutionToolResultBlock(BaseModel):
    """Anthropic text editor code execution tool result content block."""

    type: Literal["text_editor_code_execution_tool_result"] = (
        "text_editor_code_execution_tool_result"
    )
    tool_use_id: str
    content: Union[CodeExecutionToolResultError, TextEditorCodeExecutionResult]


class MCPToolResultBlock(BaseModel):
    """Anthropic MCP connector tool result content block."""

    type: Literal["mcp_tool_result"] = "mcp_tool_result"
    tool_use_id: str
    is_error: Optional[bool] = None
    content: Union[str, List["ContentBlock"]] = Field(default_factory=list)


class ToolResultBlock(BaseModel):
    """Anthropic client tool result content block."""

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    is_error: Optional[bool] = None
    content: Union[str, List["ContentBlock"]] = ""


class UnknownBlock(BaseModel):
    """Content block of a type this adapter does not model."""

    model_config = ConfigDict(extra="allow")

    type: str


KNOWN_BLOCK_TYPES = frozenset(
    {
        "text",
        "thinking",
        "redacted_thinking",
        "tool_use",
        "server_tool_use",
        "mcp_tool_use",
        "web_search_tool_result",
        "bash_code_execution_tool_result",
        "text_editor_code_execution_tool_result",
        "mcp_tool_result",
        "tool_result",
    }
)

TOOL_RESULT_BLOCK_TYPES = frozenset(
    {
        "web_search_tool_result",
        "bash_code_execution_tool_result",
        "text_editor_code_execution_tool_result",
        "mcp_tool_result",
    }
)


def _type_tag(value: Any, known: frozenset) -> str:
    if isinstance(value, dict):
        value_type = value.get("type")
    else:
        value_type = getattr(value, "type", None)
    if isinstance(value_type, str) and value_type in known:
        return value_type
    return "unknown"


def _block_discriminator(value: Any) -> str:
    return _type_tag(value, KNOWN_BLOCK_TYPES)


ContentBlock = Annotated[
    Union[
        Annotated[TextBlock, Tag("text")],
        Annotated[ThinkingBlock, Tag("thinking")],
        Annotated[RedactedThinkingBlock, Tag("redacted_thinking")],
        Annotated[ToolUseBlock, Tag("tool_use")],
        Annotated[ServerToolUseBlock, Tag("server_tool_use")],
        Annotated[MCPToolUseBlock, Tag("mcp_tool_use")],
        Annotated[WebSearchToolResultBlock, Tag("web_search_tool_result")],
        Annotated[
            BashCodeExecutionToolResultBlock, Tag("bash_code_execution_tool_result")
        ],
        Annotated[
            TextEditorCodeExecutionToolResultBlock,
            Tag("text_editor_code_execution_tool_result"),
        ],
        Annotated[MCPToolResultBlock, Tag("mcp_tool_result")],
        Annotated[ToolResultBlock, Tag("tool_result")],
        Annotated[UnknownBlock, Tag("unknown")],
    ],
    Discriminator(_block_discriminator),
]

MCPToolResultBlock.model_rebuild()
ToolResultBlock.model_rebuild()


class ServerToolUsage(BaseModel):
    """Server tool request counters."""

    web_search_requests: Optional[int] = None
    web_fetch_requests: Optional[int] = None


class Usage(BaseModel):
    """Anthropic token usage counters."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None
    server_tool_use: Optional[ServerToolUsage] = None


class RateLimits(BaseModel):
    """Rate limit values decoded from response headers by the transport."""

    requests_limit: Optional[int] = None
    requests_remaining: Optional[int] = None
    requests_reset: Optional[str] = None
    retry_after: Optional[str] = None
    tokens_limit: Optional[int] = None
    tokens_remaining: Optional[int] = None
    tokens_reset: Optional[str] = None


class MessageResponse(BaseModel):
    """Anthropic /v1/messages response model."""

    id: Optional[str] = None
    type: Literal["message"] = "message"
    role: Literal["assistant"] = "assistant"
    model: Optional[str] = None
    content: List[ContentBlock] = Field(default_factory=list)
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Optional[Usage] = None
    rate_limits: Optional[RateLimits] = None


class CompletedToolCall(BaseModel):
    """Client tool call whose streamed input JSON has been fully assembled."""

    id: str
    name: str
    arguments: str = ""


class TextDelta(BaseModel):
    type: Literal["text_delta"] = "text_delta"
    text: str = ""


class ThinkingDelta(BaseModel):
    type: Literal["thinking_delta"] = "thinking_delta"
    thinking: str = ""


class SignatureDelta(BaseModel):
    type: Literal["signature_delta"] = "signature_delta"
    signature: str = ""


class InputJsonDelta(BaseModel):
    type: Literal["input_json_delta"] = "input_json_delta"
    partial_json: str = ""


class UnknownDelta(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None


_KNOWN_DELTA_TYPES = frozenset(
    {"text_delta", "thinking_delta", "signature_delta", "input_json_delta"}
)

BlockDelta = Annotated[
    Union[
        Annotated[TextDelta, Tag("text_delta")],
        Annotated[ThinkingDelta, Tag("thinking_delta")],
        Annotated[SignatureDelta, Tag("signature_delta")],
        Annotated[InputJsonDelta, Tag("input_json_delta")],
        Annotated[UnknownDelta, Tag("unknown")],
    ],
    Discriminator(lambda value: _type_tag(value, _KNOWN_DELTA_TYPES)),
]


class MessageStartEvent(BaseModel):
    type: Literal["message_start"] = "message_start"
    message: MessageResponse = Field(default_factory=MessageResponse)


class ContentBlockStartEvent(BaseModel):
    type: Literal["content_block_start"] = "content_block_start"
    index: int = 0
    content_block: ContentBlock


class ContentBlockDeltaEvent(BaseModel):
    type: Literal["content_block_delta"] = "content_block_delta"
    index: int = 0
    delta: BlockDelta
    tool_calls: Optional[List[CompletedToolCall]] = None


class ContentBlockStopEvent(BaseModel):
    type: Literal["content_block_stop"] = "content_block_stop"
    index: int = 0
    tool_calls: Optional[List[CompletedToolCall]] = None


class MessageDeltaBody(BaseModel):
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None


class MessageDeltaEvent(BaseModel):
    type: Literal["message_delta"] = "message_delta"
    delta: MessageDeltaBody = Field(default_factory=MessageDeltaBody)
    usage: Optional[Usage] = None
    tool_calls: Optional[List[CompletedToolCall]] = None


class MessageStopEvent(BaseModel):
    type: Literal["message_stop"] = "message_stop"


class PingEvent(BaseModel):
    type: Literal["ping"] = "ping"


class UnknownStreamEvent(BaseModel):
    """Stream event of a type this adapter does not model."""

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None


_KNOWN_EVENT_TYPES = frozenset(
    {
        "message_start",
        "content_block_start",
        "content_block_delta",
        "content_block_stop",
        "message_delta",
        "message_stop",
        "ping",
    }
)

StreamEvent = Annotated[
    Union[
        Annotated[MessageStartEvent, Tag("message_start")],
        Annotated[ContentBlockStartEvent, Tag("content_block_start")],
        Annotated[ContentBlockDeltaEvent, Tag("content_block_delta")],
        Annotated[ContentBlockStopEvent, Tag("content_block_stop")],
        Annotated[MessageDeltaEvent, Tag("message_delta")],
        Annotated[MessageStopEvent, Tag("message_stop")],
        Annotated[PingEvent, Tag("ping")],
        Annotated[UnknownStreamEvent, Tag("unknown")],
    ],
    Discriminator(lambda value: _type_tag(value, _KNOWN_EVENT_TYPES)),
]

_content_block_adapter: TypeAdapter[Any] = TypeAdapter(ContentBlock)
_stream_event_adapter: TypeAdapter[Any] = TypeAdapter(StreamEvent)


def parse_content_block(block: Any) -> Any:
    """Validate a decoded content block dict; models pass through unchanged."""

    if isinstance(block, BaseModel):
        return block
    return _content_block_adapter.validate_python(block)


def parse_message_response(response: Any) -> MessageResponse:
    if isinstance(response, MessageResponse):
        return response
    return MessageResponse.model_validate(response)


def parse_stream_event(event: Any) -> Any:
    """Validate a decoded stream event dict; models pass through unchanged."""

    if isinstance(event, BaseModel):
        return event
    return _stream_event_adapter.validate_python(event)
