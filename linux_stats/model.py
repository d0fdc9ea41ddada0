"""
linux_stats.model
AUTHOR: carter-vin

Output envelope + deterministic serialization primitives.

Design goals:
- Versioned, stable envelope ("schema_version" = "1")
- Explicit structure (records serialize through their own to_dict)
- Deterministic key ordering
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union

from linux_stats.decoders.meminfo import MemoryReport
from linux_stats.decoders.net import SocketRecord
from linux_stats.decoders.stat import CounterReport
from linux_stats.sources import ReportSource

# Schema constants
SCHEMA_VERSION = "1"

VALID_SOURCES = {source.label for source in ReportSource}

DecodedRecord = Union[CounterReport, MemoryReport, list[SocketRecord]]


@dataclass(frozen=True)
class Meta:
    """
    Metadata for versioning & traceability
    - schema_version: envelope schema version
    - tool_version: linux-stats version that produced the output
    """

    schema_version: str
    tool_version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "tool_version": self.tool_version,
        }


@dataclass(frozen=True)
class DecodedReport:
    """
    Top-level output object
    - source: report label ("stat", "meminfo", "tcp", "udp")
    - decoded_at: timestamp (UTC, ISO 8601)
    - data: dict for counter/memory reports, list of rows for socket tables
    """

    source: str
    decoded_at: str
    data: Union[dict[str, Any], list[dict[str, Any]]]
    meta: Meta

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "decoded_at": self.decoded_at,
            "data": self.data,
            "meta": self.meta.to_dict(),
        }


def utc_now_iso() -> str:
    """
    Current time in ISO 8601 (UTC)
    """
    return datetime.now(timezone.utc).isoformat()


def record_to_data(record: DecodedRecord) -> Union[dict[str, Any], list[dict[str, Any]]]:
    if isinstance(record, (CounterReport, MemoryReport)):
        return record.to_dict()
    return [row.to_dict() for row in record]


def report_to_json(report: DecodedReport, *, indent: int | None = None) -> str:
    """
    Serialize a DecodedReport

    Rules:
    - sort_keys=True ensures stable key order
    - compact separators unless indent is requested
    - ensure_ascii=False keeps UTF-8 readable
    """
    return json.dumps(
        report.to_dict(),
        sort_keys=True,
        indent=indent,
        separators=(",", ":") if indent is None else None,
        ensure_ascii=False,
    )


def validate_report(report: DecodedReport) -> None:
    """
    Validate envelope structure

    Raises ValueError on invalid
    """
    if report.source not in VALID_SOURCES:
        raise ValueError(f"source must be one of: {sorted(VALID_SOURCES)}")
    if not report.decoded_at:
        raise ValueError("decoded_at is empty")
    if report.meta.schema_version != SCHEMA_VERSION:
        raise ValueError(f"meta.schema_version must be: '{SCHEMA_VERSION}'")
    if not report.meta.tool_version:
        raise ValueError("meta.tool_version must be non-empty")
    if not isinstance(report.data, (dict, list)):
        raise ValueError("data must be a dict or a list")


def build_decoded_report(
    source: ReportSource,
    record: DecodedRecord,
    *,
    decoded_at: str,
    tool_version: str,
) -> DecodedReport:
    """
    Wrap a decoded record in the versioned envelope
    """
    report = DecodedReport(
        source=source.label,
        decoded_at=decoded_at,
        data=record_to_data(record),
        meta=Meta(schema_version=SCHEMA_VERSION, tool_version=tool_version),
    )

    # validate before returning
    validate_report(report)
    return report
