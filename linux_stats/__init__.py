"""
linux_stats
AUTHOR: carter-vin

Typed decoders for Linux /proc reports: /proc/stat, /proc/meminfo,
/proc/net/tcp and /proc/net/udp.
"""

from linux_stats.decoders import (
    ActiveTimer,
    CounterReport,
    DecodeError,
    InactiveTimer,
    MemoryReport,
    SocketRecord,
    SocketState,
    decode_counter_report,
    decode_memory_report,
    decode_socket_table,
)
from linux_stats.reports import (
    read_counter_report,
    read_memory_report,
    read_tcp_table,
    read_udp_table,
)
from linux_stats.sources import ReportSource, SourceError

__all__ = [
    "ActiveTimer",
    "CounterReport",
    "DecodeError",
    "InactiveTimer",
    "MemoryReport",
    "ReportSource",
    "SocketRecord",
    "SocketState",
    "SourceError",
    "decode_counter_report",
    "decode_memory_report",
    "decode_socket_table",
    "read_counter_report",
    "read_memory_report",
    "read_tcp_table",
    "read_udp_table",
]
