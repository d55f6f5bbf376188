"""Errors raised while mapping Anthropic content onto chat content."""

from __future__ import annotations

from typing import Optional


class MappingError(ValueError):
    """Base class for content mapping failures."""


class ToolArgumentsDecodeError(MappingError):
    """Raised when completed tool call arguments are not a JSON object."""

    def __init__(
        self,
        message: str,
        call_id: Optional[str] = None,
        raw_arguments: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.call_id = call_id
        self.raw_arguments = raw_arguments


class FlattenDepthExceededError(MappingError):
    """Raised when nested tool results go deeper than the configured limit."""

    def __init__(self, max_depth: int, tool_use_id: Optional[str] = None) -> None:
        super().__init__(
            f"Nested tool result exceeds maximum depth of {max_depth}"
            + (f" (tool_use_id={tool_use_id})" if tool_use_id else "")
        )
        self.max_depth = max_depth
        self.tool_use_id = tool_use_id
