"""
linux_stats.logging
AUTHOR: carter-vin

Structured JSON event logging for ops ingestion

Contract:
- One JSON object per line, stderr by default (stdout carries the decoded report)
- Stable event vocabulary (allowlist)
- UTC timestamps only
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

# Event types
VALID_EVENT_TYPES = {
    "decode_start",
    "report_decoded",
    "source_read_failed",
    "decode_failed",
}

MAX_FIELD_CHARS = 200


def _truncate(value: str, *, limit: int = MAX_FIELD_CHARS) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(
    event_type: str,
    *,
    tool_version: str,
    stream: Optional[TextIO] = None,
    **fields: Any,
) -> None:
    """
    Emit structured event line

    Rules:
    - event_type in VALID_EVENT_TYPES
    - event_type, tool_version, utc_now always present
    - string fields capped (bad rows and command stderr can be long)
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    payload: dict[str, Any] = {
        key: _truncate(value) if isinstance(value, str) else value
        for key, value in fields.items()
    }
    payload.update(
        event_type=event_type,
        utc_now=utc_now_iso(),
        tool_version=tool_version,
    )

    print(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False),
        file=stream if stream is not None else sys.stderr,
    )
