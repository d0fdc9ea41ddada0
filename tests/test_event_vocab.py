"""
Contract test for event vocabulary enforcement.

The logging surface must reject unknown event types to keep aggregation stable.
"""

import json

import pytest

from linux_stats.logging import emit_event


def test_emit_event_rejects_invalid_event_type() -> None:
    """
    Unknown event types must raise ValueError.
    """
    with pytest.raises(ValueError, match="invalid event_type"):
        emit_event("not_a_real_event", tool_version="0.1.0")


def test_decode_failed_contract_fields(capsys) -> None:
    """
    decode_failed goes to stderr with stable required fields
    """
    emit_event(
        "decode_failed",
        tool_version="0.1.0",
        source="tcp",
        error_type="DecodeError",
        message="socket_table (line 4): expected at least 10 columns, got 5",
    )

    captured = capsys.readouterr()
    assert captured.out == ""

    payload = json.loads(captured.err.strip())
    assert payload["event_type"] == "decode_failed"
    assert "utc_now" in payload
    assert payload["tool_version"] == "0.1.0"
    assert payload["source"] == "tcp"
    assert payload["error_type"] == "DecodeError"


def test_long_messages_are_truncated(capsys) -> None:
    emit_event("source_read_failed", tool_version="0.1.0", message="x" * 250)

    payload = json.loads(capsys.readouterr().err.strip())
    assert payload["message"] == "x" * 200 + "...[truncated 50 chars]"
