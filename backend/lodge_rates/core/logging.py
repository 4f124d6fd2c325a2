"""Loguru setup and the append-only log of upstream rates calls."""

from __future__ import annotations

import json
import sys
from datetime import datetime
from typing import Any

from loguru import logger

from lodge_rates.core.config import Settings, get_settings

CALL_LOG_CHANNEL = "rates_calls"


def _is_call_record(record: dict[str, Any]) -> bool:
    return record["extra"].get("channel") == CALL_LOG_CHANNEL


def _is_app_record(record: dict[str, Any]) -> bool:
    return not _is_call_record(record)


def setup_logging(settings: Settings | None = None) -> None:
    """Replaces loguru sinks: stderr for app messages, a file for the call log."""

    settings = settings or get_settings()
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper(), filter=_is_app_record)

    if settings.call_log_path:
        # loguru creates missing directories; delay keeps the file absent until the first call.
        logger.add(
            settings.call_log_path,
            format="{message}",
            level="INFO",
            filter=_is_call_record,
            delay=True,
            encoding="utf-8",
        )


def log_call(kind: str, data: Any) -> None:
    """Appends one JSON line describing an upstream request, response or error."""

    entry = {
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "type": kind,
        "data": data,
    }
    logger.bind(channel=CALL_LOG_CHANNEL).info(
        json.dumps(entry, ensure_ascii=False, default=str)
    )


__all__ = ["CALL_LOG_CHANNEL", "log_call", "setup_logging"]
