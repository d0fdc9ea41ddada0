"""
Contract tests for output envelope stability.

If these fail, downstream consumers of the JSON output may break.
"""

import json
from pathlib import Path

import pytest

from linux_stats.decoders.meminfo import decode_memory_report
from linux_stats.decoders.net import decode_socket_table
from linux_stats.decoders.stat import CounterReport
from linux_stats.model import (
    SCHEMA_VERSION,
    DecodedReport,
    Meta,
    build_decoded_report,
    report_to_json,
    validate_report,
)
from linux_stats.sources import ReportSource

FIXTURES = Path(__file__).parent / "fixtures"


def test_envelope_keys_exist() -> None:
    """
    Top-level and meta keys are contract-critical
    """
    report = build_decoded_report(
        ReportSource.STAT,
        CounterReport.zero(),
        decoded_at="2026-01-01T00:00:00+00:00",
        tool_version="0.1.0",
    )

    payload = report.to_dict()

    assert set(payload.keys()) == {"source", "decoded_at", "data", "meta"}
    assert set(payload["meta"].keys()) == {"schema_version", "tool_version"}
    assert payload["meta"]["schema_version"] == SCHEMA_VERSION
    assert payload["source"] == "stat"
    assert payload["data"]["per_core_cpu_ticks"] == []


def test_memory_report_serializes_native_units() -> None:
    memory = decode_memory_report((FIXTURES / "meminfo-1").read_text(encoding="utf-8"))

    report = build_decoded_report(
        ReportSource.MEMINFO,
        memory,
        decoded_at="2026-01-01T00:00:00+00:00",
        tool_version="0.1.0",
    )

    data = json.loads(report_to_json(report))["data"]
    assert data["mem_total"] == 3521920
    assert data["vmalloc_total"] == 34359738367
    assert len(data) == 45


def test_socket_rows_serialize_to_plain_json() -> None:
    rows = decode_socket_table((FIXTURES / "tcp-1").read_text(encoding="utf-8"))

    report = build_decoded_report(
        ReportSource.TCP,
        rows,
        decoded_at="2026-01-01T00:00:00+00:00",
        tool_version="0.1.0",
    )

    payload = json.loads(report_to_json(report))
    assert payload["source"] == "tcp"
    first = payload["data"][2]
    assert first["local_address"] == "127.0.0.1"
    assert first["remote_address"] == "46.238.65.91"
    assert first["connection_state"] == "ESTABLISHED"
    assert first["timer"] == {"active": True, "expiry_ticks": 11}
    assert payload["data"][0]["timer"] == {"active": False}


def test_json_is_compact_and_sorted() -> None:
    report = build_decoded_report(
        ReportSource.STAT,
        CounterReport.zero(),
        decoded_at="2026-01-01T00:00:00+00:00",
        tool_version="0.1.0",
    )

    text = report_to_json(report)
    assert " " not in text
    assert text.startswith('{"data":')


def test_validate_rejects_unknown_source() -> None:
    report = DecodedReport(
        source="vmstat",
        decoded_at="2026-01-01T00:00:00+00:00",
        data={},
        meta=Meta(schema_version=SCHEMA_VERSION, tool_version="0.1.0"),
    )

    with pytest.raises(ValueError, match="source must be one of"):
        validate_report(report)


def test_validate_rejects_schema_mismatch() -> None:
    report = DecodedReport(
        source="stat",
        decoded_at="2026-01-01T00:00:00+00:00",
        data={},
        meta=Meta(schema_version="0", tool_version="0.1.0"),
    )

    with pytest.raises(ValueError, match="schema_version"):
        validate_report(report)
