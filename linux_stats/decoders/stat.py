"""
linux_stats.decoders.stat
AUTHOR: carter-vin

Counter report decoder (/proc/stat)

> cat /proc/stat
    cpu  2255 34 2290 22625563 6290 127 456 0 0 0
    cpu0 1132 34 1441 11311718 3675 127 438 0 0 0
    cpu1 1123 0 849 11313845 2614 0 18 0 0 0
    intr 114930548 113199788 3 0 5 263 0 4 [... lots more numbers ...]
    ctxt 1990473
    btime 1062191376
    processes 2915
    procs_running 1
    procs_blocked 0
    softirq 183433 0 21755 12 39 1137 231 21459 2263

- line 0 is always the aggregate cpu line
- labels are compared as whole tokens, never by substring
- unknown lines are skipped (kernels differ in what they expose)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any

from linux_stats.decoders.base import DecodeError, parse_decimal, parse_decimal_list

OPERATION = "counter_report"

_PER_CORE_LABEL_RE = re.compile(r"cpu[0-9]+")

# label -> field; multi-valued labels take every remaining token
MULTI_VALUE_LABELS = (
    ("intr", "interrupt_counts"),
    ("softirq", "softirq_counts"),
)

SINGLE_VALUE_LABELS = (
    ("ctxt", "context_switches"),
    ("btime", "boot_time_epoch_seconds"),
    ("processes", "process_count"),
    ("procs_running", "running_process_count"),
    ("procs_blocked", "blocked_process_count"),
)


@dataclass(frozen=True)
class CounterReport:
    aggregate_cpu_ticks: tuple[int, ...]
    per_core_cpu_ticks: tuple[tuple[int, ...], ...]
    interrupt_counts: tuple[int, ...]
    context_switches: int
    boot_time_epoch_seconds: int
    process_count: int
    running_process_count: int
    blocked_process_count: int
    softirq_counts: tuple[int, ...]

    @classmethod
    def zero(cls) -> "CounterReport":
        """
        Default record: every sequence empty, every scalar zero
        """
        return cls(
            aggregate_cpu_ticks=(),
            per_core_cpu_ticks=(),
            interrupt_counts=(),
            context_switches=0,
            boot_time_epoch_seconds=0,
            process_count=0,
            running_process_count=0,
            blocked_process_count=0,
            softirq_counts=(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "aggregate_cpu_ticks": list(self.aggregate_cpu_ticks),
            "per_core_cpu_ticks": [list(core) for core in self.per_core_cpu_ticks],
            "interrupt_counts": list(self.interrupt_counts),
            "context_switches": self.context_switches,
            "boot_time_epoch_seconds": self.boot_time_epoch_seconds,
            "process_count": self.process_count,
            "running_process_count": self.running_process_count,
            "blocked_process_count": self.blocked_process_count,
            "softirq_counts": list(self.softirq_counts),
        }

    def to_text(self) -> str:
        """
        Render in the kernel's own layout
        """
        lines = [_join("cpu ", self.aggregate_cpu_ticks)]
        for index, core in enumerate(self.per_core_cpu_ticks):
            lines.append(_join(f"cpu{index}", core))
        lines.append(_join("intr", self.interrupt_counts))
        for label, field in SINGLE_VALUE_LABELS:
            lines.append(f"{label} {getattr(self, field)}")
        lines.append(_join("softirq", self.softirq_counts))
        return "\n".join(lines) + "\n"


def _join(label: str, values: tuple[int, ...]) -> str:
    return " ".join([label, *(str(v) for v in values)])


def decode_counter_report(text: str) -> CounterReport:
    """
    Decode the full text of /proc/stat into a CounterReport

    Raises DecodeError when a recognized line carries a malformed number
    """
    fields: dict[str, Any] = {}
    per_core: list[tuple[int, ...]] = []
    multi = dict(MULTI_VALUE_LABELS)
    single = dict(SINGLE_VALUE_LABELS)

    for index, line in enumerate(text.splitlines()):
        tokens = line.split()
        # line 0 is the aggregate even when blank (then it stays empty)
        if index > 0 and not tokens:
            continue
        label, values = (tokens[0], tokens[1:]) if tokens else ("", [])

        try:
            if index == 0:
                fields["aggregate_cpu_ticks"] = parse_decimal_list(values, operation=OPERATION)
            elif _PER_CORE_LABEL_RE.fullmatch(label):
                per_core.append(parse_decimal_list(values, operation=OPERATION))
            elif label in multi:
                fields[multi[label]] = parse_decimal_list(values, operation=OPERATION)
            elif label in single:
                if not values:
                    raise DecodeError(OPERATION, f"missing value for {label!r}")
                fields[single[label]] = parse_decimal(values[0], operation=OPERATION)
        except DecodeError as e:
            raise e.at_line(index + 1) from None

    return replace(CounterReport.zero(), per_core_cpu_ticks=tuple(per_core), **fields)
