"""Vendor-neutral chat content produced by the mappers."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

ChatFinishReason = Literal["stop", "length"]
ChatRole = Literal["assistant", "user", "system", "tool"]


class UsageDetails(BaseModel):
    """Token counters for one response or stream snapshot."""

    input_token_count: Optional[int] = None
    output_token_count: Optional[int] = None
    total_token_count: Optional[int] = None
    additional_counts: Dict[str, int] = Field(default_factory=dict)


class _VendorBackedModel(BaseModel):
    """Base for models carrying a vendor payload that plays no part in equality."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseModel):
            return NotImplemented
        return type(self) is type(other) and self.model_dump() == other.model_dump()


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class FunctionCallContent(_VendorBackedModel):
    """A tool invocation, whether the caller or the vendor executes it."""

    type: Literal["function-call"] = "function-call"
    call_id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    raw_representation: Optional[Any] = Field(default=None, exclude=True, repr=False)


class FunctionResultContent(_VendorBackedModel):
    """The outcome of a tool invocation, flattened to text for vendor tools."""

    type: Literal["function-result"] = "function-result"
    call_id: str
    result: Any = None
    raw_representation: Optional[Any] = Field(default=None, exclude=True, repr=False)


class TextReasoningContent(BaseModel):
    """Reasoning text plus the opaque token that lets the vendor verify it."""

    type: Literal["reasoning"] = "reasoning"
    text: str = ""
    protected_data: Optional[str] = None


class UsageContent(BaseModel):
    type: Literal["usage"] = "usage"
    details: UsageDetails


ChatContent = Annotated[
    Union[
        TextContent,
        FunctionCallContent,
        FunctionResultContent,
        TextReasoningContent,
        UsageContent,
    ],
    Field(discriminator="type"),
]


class ChatMessage(BaseModel):
    role: ChatRole = "assistant"
    contents: List[ChatContent] = Field(default_factory=list)
    additional_properties: Dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return "".join(
            content.text
            for content in self.contents
            if isinstance(content, TextContent)
        )


class ChatResponse(_VendorBackedModel):
    """A complete assistant turn with response-level metadata."""

    messages: List[ChatMessage] = Field(default_factory=list)
    response_id: Optional[str] = None
    model_id: Optional[str] = None
    finish_reason: Optional[ChatFinishReason] = None
    usage: Optional[UsageDetails] = None
    raw_representation: Optional[Any] = Field(default=None, exclude=True, repr=False)


class ChatResponseUpdate(_VendorBackedModel):
    """One streamed update; produced for every upstream stream event."""

    role: ChatRole = "assistant"
    contents: List[ChatContent] = Field(default_factory=list)
    finish_reason: Optional[ChatFinishReason] = None
    response_id: Optional[str] = None
    model_id: Optional[str] = None
    raw_representation: Optional[Any] = Field(default=None, exclude=True, repr=False)
