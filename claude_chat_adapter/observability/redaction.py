"""Redaction helpers for content that ends up in log records."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Tuple

import structlog

from claude_chat_adapter.config import OBS_REDACTION_MODE

REDACTION_TOKEN = "[REDACTED]"
LOG_ARRAY_LIMIT = 50

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=1)
def get_presidio_engines() -> Tuple[Optional[Any], Optional[Any]]:
    """Load the presidio analyzer and anonymizer, or ``(None, None)``."""

    try:
        from presidio_analyzer import AnalyzerEngine
        from presidio_anonymizer import AnonymizerEngine
    except ImportError as exc:
        logger.warning("presidio_import_failed", error=str(exc))
        return None, None
    try:
        return AnalyzerEngine(), AnonymizerEngine()
    except Exception as exc:
        logger.warning("presidio_init_failed", error=str(exc))
        return None, None


def redaction_mode(override: Optional[str] = None) -> str:
    mode = (override or OBS_REDACTION_MODE or "full").strip().lower()
    if mode not in {"full", "partial", "none"}:
        return "full"
    return mode


def redact_text(text: Any, mode: Optional[str] = None) -> Any:
    """Redact a string value.

    ``partial`` replaces only the entities presidio detects; without the
    presidio engines it degrades to the full redaction token.
    """

    if not isinstance(text, str):
        return text

    mode = redaction_mode(mode)
    if mode == "none":
        return text
    if mode == "full":
        return REDACTION_TOKEN

    analyzer, anonymizer = get_presidio_engines()
    if analyzer is None or anonymizer is None:
        return REDACTION_TOKEN
    try:
        results = analyzer.analyze(text=text, language="en")
        if not results:
            return text
        from presidio_anonymizer.entities import OperatorConfig

        anonymized = anonymizer.anonymize(
            text=text,
            analyzer_results=results,
            operators={
                "DEFAULT": OperatorConfig("replace", {"new_value": REDACTION_TOKEN})
            },
        )
        return anonymized.text
    except Exception as exc:
        logger.warning("presidio_redaction_failed", error=str(exc))
        return REDACTION_TOKEN


def summarize_content(content: Any, mode: Optional[str] = None) -> Dict[str, Any]:
    summary: Dict[str, Any] = {"type": getattr(content, "type", None)}
    call_id = getattr(content, "call_id", None)
    if call_id is not None:
        summary["call_id"] = call_id
    name = getattr(content, "name", None)
    if isinstance(name, str):
        summary["name"] = name
    text = getattr(content, "text", None)
    if isinstance(text, str):
        summary["text"] = redact_text(text, mode)
    result = getattr(content, "result", None)
    if isinstance(result, str):
        summary["result"] = redact_text(result, mode)
    protected = getattr(content, "protected_data", None)
    if isinstance(protected, str):
        # Only presence is logged for signatures.
        summary["protected_data"] = REDACTION_TOKEN
    return summary


def summarize_contents(
    contents: Iterable[Any], mode: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Return log-safe summaries for neutral content items."""

    summaries = [summarize_content(content, mode) for content in contents]
    if len(summaries) > LOG_ARRAY_LIMIT:
        summaries = summaries[:LOG_ARRAY_LIMIT]
        summaries.append({"truncated": True})
    return summaries
