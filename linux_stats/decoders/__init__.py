"""linux_stats.decoders package exports."""

from linux_stats.decoders.base import DecodeError, DecodeOutcome, run_decoder
from linux_stats.decoders.meminfo import MemoryReport, decode_memory_report
from linux_stats.decoders.net import (
    ActiveTimer,
    InactiveTimer,
    SocketRecord,
    SocketState,
    decode_socket_row,
    decode_socket_table,
)
from linux_stats.decoders.stat import CounterReport, decode_counter_report

__all__ = [
    "ActiveTimer",
    "CounterReport",
    "DecodeError",
    "DecodeOutcome",
    "InactiveTimer",
    "MemoryReport",
    "SocketRecord",
    "SocketState",
    "decode_counter_report",
    "decode_memory_report",
    "decode_socket_row",
    "decode_socket_table",
    "run_decoder",
]
