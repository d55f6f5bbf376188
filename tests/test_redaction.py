import pytest

from claude_chat_adapter.observability import redaction
from claude_chat_adapter.observability.redaction import (
    LOG_ARRAY_LIMIT,
    REDACTION_TOKEN,
    redact_text,
    summarize_contents,
)
from claude_chat_adapter.schema.chat import (
    FunctionCallContent,
    FunctionResultContent,
    TextReasoningContent,
)

SENSITIVE = "alice@example.com asked about her SSN 123-45-6789"


class _StubAnalyzer:
    def __init__(self, results):
        self.results = results
        self.calls = []

    def analyze(self, text, language):
        self.calls.append((text, language))
        return self.results


class _FailingAnonymizer:
    def anonymize(self, **kwargs):
        raise RuntimeError("anonymizer exploded")


def test_redact_text_full_and_none_modes() -> None:
    assert redact_text(SENSITIVE, "full") == REDACTION_TOKEN
    assert redact_text(SENSITIVE, "none") == SENSITIVE


def test_partial_without_presidio_redacts_everything(monkeypatch) -> None:
    monkeypatch.setattr(redaction, "get_presidio_engines", lambda: (None, None))

    assert redact_text(SENSITIVE, "partial") == REDACTION_TOKEN


def test_partial_keeps_text_without_detected_entities(monkeypatch) -> None:
    analyzer = _StubAnalyzer([])
    monkeypatch.setattr(
        redaction, "get_presidio_engines", lambda: (analyzer, _FailingAnonymizer())
    )

    assert redact_text("nothing personal here", "partial") == "nothing personal here"
    assert analyzer.calls == [("nothing personal here", "en")]


def test_partial_replaces_detected_entities(monkeypatch) -> None:
    anonymizer_module = pytest.importorskip("presidio_anonymizer")
    from presidio_anonymizer.entities import RecognizerResult

    analyzer = _StubAnalyzer(
        [
            RecognizerResult("EMAIL_ADDRESS", 0, 17, 1.0),
            RecognizerResult("US_SSN", 38, 49, 0.9),
        ]
    )
    monkeypatch.setattr(
        redaction,
        "get_presidio_engines",
        lambda: (analyzer, anonymizer_module.AnonymizerEngine()),
    )

    redacted = redact_text(SENSITIVE, "partial")

    assert redacted == f"{REDACTION_TOKEN} asked about her SSN {REDACTION_TOKEN}"
    assert "alice" not in redacted
    assert "6789" not in redacted


def test_partial_anonymizer_failure_redacts_everything(monkeypatch) -> None:
    analyzer = _StubAnalyzer([object()])
    monkeypatch.setattr(
        redaction, "get_presidio_engines", lambda: (analyzer, _FailingAnonymizer())
    )

    assert redact_text(SENSITIVE, "partial") == REDACTION_TOKEN


def test_unknown_mode_falls_back_to_full() -> None:
    assert redact_text("hello", "bogus") == REDACTION_TOKEN


def test_non_strings_pass_through() -> None:
    assert redact_text(42, "full") == 42


def test_summaries_hide_text_and_signatures() -> None:
    summaries = summarize_contents(
        [
            TextReasoningContent(text="private thoughts", protected_data="sig"),
            FunctionCallContent(call_id="toolu_1", name="lookup", arguments={"q": 1}),
            FunctionResultContent(call_id="toolu_1", result="stdout: secret"),
        ],
        mode="full",
    )

    assert summaries == [
        {
            "type": "reasoning",
            "text": REDACTION_TOKEN,
            "protected_data": REDACTION_TOKEN,
        },
        {"type": "function-call", "call_id": "toolu_1", "name": "lookup"},
        {"type": "function-result", "call_id": "toolu_1", "result": REDACTION_TOKEN},
    ]


def test_summaries_are_truncated() -> None:
    contents = [
        FunctionCallContent(call_id=f"toolu_{i}", name="lookup")
        for i in range(LOG_ARRAY_LIMIT + 5)
    ]

    summaries = summarize_contents(contents)

    assert len(summaries) == LOG_ARRAY_LIMIT + 1
    assert summaries[-1] == {"truncated": True}
