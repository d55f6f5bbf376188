from claude_chat_adapter.mapping.anthropic_to_chat import (
    map_message_response,
    map_response_content,
)
from claude_chat_adapter.schema.anthropic import (
    BashCodeExecutionResult,
    BashCodeExecutionToolResultBlock,
    MCPToolResultBlock,
    MCPToolUseBlock,
    MessageResponse,
    ServerToolUseBlock,
    TextBlock,
    WebSearchResult,
    WebSearchToolResultBlock,
)
from claude_chat_adapter.schema.chat import (
    FunctionCallContent,
    FunctionResultContent,
    TextContent,
    TextReasoningContent,
)


def _response(*blocks) -> MessageResponse:
    return MessageResponse(id="msg_123", model="claude-3-sonnet", content=list(blocks))


def test_server_tool_use_maps_to_function_call() -> None:
    response = _response(
        ServerToolUseBlock(
            id="toolu_123",
            name="web_search",
            input={"query": "weather in San Francisco"},
        )
    )

    contents = map_response_content(response)

    assert len(contents) == 1
    call = contents[0]
    assert isinstance(call, FunctionCallContent)
    assert call.call_id == "toolu_123"
    assert call.name == "web_search"
    assert call.arguments == {"query": "weather in San Francisco"}


def test_web_search_tool_result_maps_to_function_result() -> None:
    response = _response(
        WebSearchToolResultBlock(
            tool_use_id="toolu_123",
            content=[
                WebSearchResult(
                    title="San Francisco Weather",
                    url="https://weather.com/sf",
                    page_age="1 day ago",
                )
            ],
        )
    )

    contents = map_response_content(response)

    assert len(contents) == 1
    result = contents[0]
    assert isinstance(result, FunctionResultContent)
    assert result.call_id == "toolu_123"
    text = result.result
    title_at = text.index("San Francisco Weather")
    url_at = text.index("https://weather.com/sf")
    age_at = text.index("1 day ago")
    assert title_at < url_at < age_at


def test_server_tool_use_and_result_keep_order_and_ids() -> None:
    response = _response(
        ServerToolUseBlock(
            id="toolu_123",
            name="web_search",
            input={"query": "weather in San Francisco"},
        ),
        WebSearchToolResultBlock(
            tool_use_id="toolu_123",
            content=[
                WebSearchResult(
                    title="San Francisco Weather", url="https://weather.com/sf"
                )
            ],
        ),
        TextBlock(
            text="Based on the search results, the weather in San Francisco is..."
        ),
    )

    contents = map_response_content(response)

    assert [type(item) for item in contents] == [
        FunctionCallContent,
        FunctionResultContent,
        TextContent,
    ]
    assert contents[0].call_id == "toolu_123"
    assert contents[1].call_id == contents[0].call_id
    assert "Based on the search results" in contents[2].text
    assert "Page Age" not in contents[1].result


def test_bash_code_execution_result_is_flattened() -> None:
    response = _response(
        BashCodeExecutionToolResultBlock(
            tool_use_id="toolu_456",
            content=BashCodeExecutionResult(
                stdout="Hello World", stderr="", return_code=0
            ),
        )
    )

    contents = map_response_content(response)

    assert len(contents) == 1
    assert contents[0].call_id == "toolu_456"
    assert "stdout: Hello World" in contents[0].result
    assert "return_code: 0" in contents[0].result


def test_mcp_tool_use_maps_to_function_call() -> None:
    response = _response(
        MCPToolUseBlock(
            id="toolu_789",
            name="get_repo_info",
            server_name="DeepWiki",
            input={"repo": "anthropic/sdk"},
        )
    )

    contents = map_response_content(response)

    assert len(contents) == 1
    assert isinstance(contents[0], FunctionCallContent)
    assert contents[0].call_id == "toolu_789"
    assert contents[0].name == "get_repo_info"
    assert contents[0].arguments == {"repo": "anthropic/sdk"}


def test_mcp_tool_result_flattens_nested_text() -> None:
    response = _response(
        MCPToolResultBlock(
            tool_use_id="toolu_789",
            content=[TextBlock(text="Repository information: Anthropic SDK")],
        )
    )

    contents = map_response_content(response)

    assert len(contents) == 1
    assert isinstance(contents[0], FunctionResultContent)
    assert contents[0].call_id == "toolu_789"
    assert "Repository information: Anthropic SDK" in contents[0].result


def test_unknown_block_types_are_skipped() -> None:
    response = {
        "id": "msg_1",
        "content": [
            {"type": "text", "text": "before"},
            {"type": "container_upload", "file_id": "file_1"},
            {"type": "text", "text": "after"},
        ],
    }

    contents = map_response_content(response)

    assert [item.text for item in contents] == ["before", "after"]


def test_empty_content_maps_to_empty_list() -> None:
    assert map_response_content({"content": []}) == []


def test_thinking_blocks_map_to_reasoning() -> None:
    response = {
        "content": [
            {"type": "thinking", "thinking": "Let me check.", "signature": "sig"},
            {"type": "redacted_thinking", "data": "opaque"},
        ]
    }

    contents = map_response_content(response)

    assert contents == [
        TextReasoningContent(text="Let me check.", protected_data="sig"),
        TextReasoningContent(text="", protected_data="opaque"),
    ]


def test_mapping_is_repeatable() -> None:
    response = _response(
        ServerToolUseBlock(id="toolu_1", name="web_search", input={"query": "q"}),
        WebSearchToolResultBlock(
            tool_use_id="toolu_1",
            content=[WebSearchResult(title="T", url="https://example.com")],
        ),
        TextBlock(text="done"),
    )

    first = map_response_content(response)
    second = map_response_content(response)

    assert first == second
    assert [item.model_dump() for item in first] == [
        item.model_dump() for item in second
    ]


def test_message_response_maps_metadata() -> None:
    response = {
        "id": "msg_9",
        "model": "claude-sonnet-4-5",
        "content": [{"type": "text", "text": "Hi"}],
        "stop_reason": "max_tokens",
        "stop_sequence": "\n\nHuman:",
        "usage": {
            "input_tokens": 12,
            "output_tokens": 5,
            "cache_read_input_tokens": 3,
        },
        "rate_limits": {"requests_limit": 50, "tokens_remaining": 1000},
    }

    mapped = map_message_response(response)

    assert mapped.response_id == "msg_9"
    assert mapped.model_id == "claude-sonnet-4-5"
    assert mapped.finish_reason == "length"
    assert mapped.usage is not None
    assert mapped.usage.input_token_count == 12
    assert mapped.usage.output_token_count == 5
    assert mapped.usage.total_token_count == 17
    assert mapped.usage.additional_counts == {"cache_read_input_tokens": 3}

    message = mapped.messages[0]
    assert message.role == "assistant"
    assert message.text == "Hi"
    assert message.additional_properties["StopSequence"] == "\n\nHuman:"
    assert message.additional_properties["RateLimits"] == {
        "RequestsLimit": 50,
        "TokensRemaining": 1000,
    }


def test_message_response_other_stop_reasons_map_to_stop() -> None:
    for stop_reason in ("end_turn", "tool_use", "stop_sequence", "pause_turn", None):
        mapped = map_message_response({"content": [], "stop_reason": stop_reason})
        assert mapped.finish_reason == "stop"


def test_message_response_without_optional_metadata() -> None:
    mapped = map_message_response({"content": [{"type": "text", "text": "Hi"}]})

    assert mapped.usage is None
    assert mapped.messages[0].additional_properties == {}
