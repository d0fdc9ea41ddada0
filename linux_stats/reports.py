"""
linux_stats.reports
AUTHOR: carter-vin

Acquire + decode in one call
- acquisition errors propagate unchanged (OSError / SourceError)
- decode errors propagate as DecodeError
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from linux_stats.decoders.meminfo import MemoryReport, decode_memory_report
from linux_stats.decoders.net import SocketRecord, decode_socket_table
from linux_stats.decoders.stat import CounterReport, decode_counter_report
from linux_stats.sources import ReportSource, read_report_text

DECODERS: dict[ReportSource, Callable] = {
    ReportSource.STAT: decode_counter_report,
    ReportSource.MEMINFO: decode_memory_report,
    ReportSource.TCP: decode_socket_table,
    ReportSource.UDP: decode_socket_table,
}


def read_report(source: ReportSource, *, proc_root: Optional[Path] = None, use_command: bool = False):
    text = read_report_text(source, proc_root=proc_root, use_command=use_command)
    return DECODERS[source](text)


def read_counter_report(*, proc_root: Optional[Path] = None, use_command: bool = False) -> CounterReport:
    return read_report(ReportSource.STAT, proc_root=proc_root, use_command=use_command)


def read_memory_report(*, proc_root: Optional[Path] = None, use_command: bool = False) -> MemoryReport:
    return read_report(ReportSource.MEMINFO, proc_root=proc_root, use_command=use_command)


def read_tcp_table(*, proc_root: Optional[Path] = None, use_command: bool = False) -> list[SocketRecord]:
    return read_report(ReportSource.TCP, proc_root=proc_root, use_command=use_command)


def read_udp_table(*, proc_root: Optional[Path] = None, use_command: bool = False) -> list[SocketRecord]:
    return read_report(ReportSource.UDP, proc_root=proc_root, use_command=use_command)
