"""Configuration helpers for content mapping and observability."""

from __future__ import annotations

import os

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_MAX_FLATTEN_DEPTH = 10


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


OBS_LOG_ENABLED = _env_bool("OBS_LOG_ENABLED", False)
OBS_LOG_FILE = os.getenv("OBS_LOG_FILE", "./logs/mapping.log")
OBS_LOG_ALL = _env_bool("OBS_LOG_ALL", False)
OBS_LOG_PRETTY = _env_bool("OBS_LOG_PRETTY", True)
OBS_STREAM_LOG_ENABLED = _env_bool("OBS_STREAM_LOG_ENABLED", False)
OBS_STREAM_LOG_FILE = os.getenv("OBS_STREAM_LOG_FILE", "./logs/streaming.log")
OBS_REDACTION_MODE = os.getenv("OBS_REDACTION_MODE", "full")


def get_max_flatten_depth() -> int:
    """Return the nesting limit for flattening nested tool results."""
    raw = os.getenv("MAPPING_MAX_FLATTEN_DEPTH")
    if raw is None or not raw.strip():
        return DEFAULT_MAX_FLATTEN_DEPTH
    try:
        depth = int(raw.strip())
    except ValueError as exc:
        raise ValueError("MAPPING_MAX_FLATTEN_DEPTH must be an integer") from exc
    if depth < 1:
        raise ValueError("MAPPING_MAX_FLATTEN_DEPTH must be at least 1")
    if OBS_LOG_ENABLED and depth != DEFAULT_MAX_FLATTEN_DEPTH:
        logger.info("flatten_depth_overridden", max_depth=depth)
    return depth
