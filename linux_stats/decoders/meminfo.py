"""
linux_stats.decoders.meminfo
AUTHOR: carter-vin

Memory report decoder (/proc/meminfo)
- one scalar counter per line: "<Label>:  <value> [kB]"
- values stay in the kernel's native unit (kB, pages for HugePages_*)
- labels match left-anchored up to the ':' terminator, longest label first,
  so "Active:" never claims "Active(anon):" and "Cached:" never claims "SwapCached:"
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from linux_stats.decoders.base import DecodeError, parse_decimal

OPERATION = "memory_report"

# (kernel label, field) in the kernel's print order
MEMINFO_LABELS = (
    ("MemTotal", "mem_total"),
    ("MemFree", "mem_free"),
    ("MemAvailable", "mem_available"),
    ("Buffers", "buffers"),
    ("Cached", "cached"),
    ("SwapCached", "swap_cached"),
    ("Active", "active"),
    ("Inactive", "inactive"),
    ("Active(anon)", "active_anon"),
    ("Inactive(anon)", "inactive_anon"),
    ("Active(file)", "active_file"),
    ("Inactive(file)", "inactive_file"),
    ("Unevictable", "unevictable"),
    ("Mlocked", "mlocked"),
    ("SwapTotal", "swap_total"),
    ("SwapFree", "swap_free"),
    ("Dirty", "dirty"),
    ("Writeback", "writeback"),
    ("AnonPages", "anon_pages"),
    ("Mapped", "mapped"),
    ("Shmem", "shmem"),
    ("Slab", "slab"),
    ("SReclaimable", "s_reclaimable"),
    ("SUnreclaim", "s_unreclaim"),
    ("KernelStack", "kernel_stack"),
    ("PageTables", "page_tables"),
    ("NFS_Unstable", "nfs_unstable"),
    ("Bounce", "bounce"),
    ("WritebackTmp", "writeback_tmp"),
    ("CommitLimit", "commit_limit"),
    ("Committed_AS", "committed_as"),
    ("VmallocTotal", "vmalloc_total"),
    ("VmallocUsed", "vmalloc_used"),
    ("VmallocChunk", "vmalloc_chunk"),
    ("HardwareCorrupted", "hardware_corrupted"),
    ("AnonHugePages", "anon_huge_pages"),
    ("CmaTotal", "cma_total"),
    ("CmaFree", "cma_free"),
    ("HugePages_Total", "huge_pages_total"),
    ("HugePages_Free", "huge_pages_free"),
    ("HugePages_Rsvd", "huge_pages_rsvd"),
    ("HugePages_Surp", "huge_pages_surp"),
    ("Hugepagesize", "hugepagesize"),
    ("DirectMap4k", "direct_map_4k"),
    ("DirectMap2M", "direct_map_2m"),
)

# Printed without a unit
UNITLESS_LABELS = frozenset({"HugePages_Total", "HugePages_Free", "HugePages_Rsvd", "HugePages_Surp"})

_MATCH_ORDER = tuple(
    (label + ":", field)
    for label, field in sorted(MEMINFO_LABELS, key=lambda pair: len(pair[0]), reverse=True)
)


@dataclass(frozen=True)
class MemoryReport:
    mem_total: int
    mem_free: int
    mem_available: int
    buffers: int
    cached: int
    swap_cached: int
    active: int
    inactive: int
    active_anon: int
    inactive_anon: int
    active_file: int
    inactive_file: int
    unevictable: int
    mlocked: int
    swap_total: int
    swap_free: int
    dirty: int
    writeback: int
    anon_pages: int
    mapped: int
    shmem: int
    slab: int
    s_reclaimable: int
    s_unreclaim: int
    kernel_stack: int
    page_tables: int
    nfs_unstable: int
    bounce: int
    writeback_tmp: int
    commit_limit: int
    committed_as: int
    vmalloc_total: int
    vmalloc_used: int
    vmalloc_chunk: int
    hardware_corrupted: int
    anon_huge_pages: int
    cma_total: int
    cma_free: int
    huge_pages_total: int
    huge_pages_free: int
    huge_pages_rsvd: int
    huge_pages_surp: int
    hugepagesize: int
    direct_map_4k: int
    direct_map_2m: int

    @classmethod
    def zero(cls) -> "MemoryReport":
        """
        Default record: every counter zero
        """
        return cls(**{f.name: 0 for f in fields(cls)})

    def to_dict(self) -> dict[str, Any]:
        # Key order follows the kernel label table
        return {field: getattr(self, field) for _, field in MEMINFO_LABELS}

    def to_text(self) -> str:
        """
        Render in the kernel's own layout
        """
        lines = []
        for label, field in MEMINFO_LABELS:
            unit = "" if label in UNITLESS_LABELS else " kB"
            lines.append(f"{label + ':':<16}{getattr(self, field):>8}{unit}")
        return "\n".join(lines) + "\n"


def _match_label(line: str) -> tuple[str, str] | None:
    for prefix, field in _MATCH_ORDER:
        if line.startswith(prefix):
            return prefix, field
    return None


def decode_memory_report(text: str) -> MemoryReport:
    """
    Decode the full text of /proc/meminfo into a MemoryReport

    Missing labels stay zero; a recognized label with a bad value raises DecodeError
    """
    values: dict[str, int] = {}

    for index, line in enumerate(text.splitlines()):
        line = line.lstrip()
        matched = _match_label(line)
        if matched is None:
            continue
        prefix, field = matched

        tokens = line[len(prefix):].split()
        if not tokens:
            raise DecodeError(OPERATION, f"missing value for {prefix[:-1]!r}", line_number=index + 1)
        try:
            values[field] = parse_decimal(tokens[0], operation=OPERATION)
        except DecodeError as e:
            raise e.at_line(index + 1) from None

    return replace(MemoryReport.zero(), **values)
