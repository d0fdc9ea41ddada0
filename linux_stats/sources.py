"""
linux_stats.sources
AUTHOR: carter-vin

Report text acquisition
- given a named report, produce its raw text or fail
- file reads by default; optional `cat` subprocess route
- failures surface unchanged (OSError) or as SourceError for non-zero exits
- no retries here

Env var override (LINUX_STATS_PROC_ROOT) is useful for:
- decoding captured snapshots from another host
- pointing tests at a fake /proc tree
"""

from __future__ import annotations

import os
import subprocess
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

PROC_ROOT_ENV = "LINUX_STATS_PROC_ROOT"
DEFAULT_PROC_ROOT = Path("/proc")


class ReportSource(str, Enum):
    """
    Named kernel reports, valued by their path under the proc root
    """

    STAT = "stat"
    MEMINFO = "meminfo"
    TCP = "net/tcp"
    UDP = "net/udp"

    @property
    def label(self) -> str:
        return self.name.lower()


class SourceError(OSError):
    """
    Acquisition command exited non-zero

    - exit_status: exit code, or None when killed by a signal
    - signal: terminating signal number, or None
    - stderr: captured diagnostic text
    """

    def __init__(self, exit_status: Optional[int], signal: Optional[int], stderr: str) -> None:
        self.exit_status = exit_status
        self.signal = signal
        self.stderr = stderr

        code = exit_status if exit_status is not None else signal
        super().__init__(f"ExitStatus: {code}    Stderr: {stderr}")


def resolve_proc_root(proc_root: Optional[Path] = None) -> Path:
    """
    Precedence:
    1) explicit argument
    2) LINUX_STATS_PROC_ROOT
    3) /proc
    """
    if proc_root is not None:
        return Path(proc_root)

    override = os.getenv(PROC_ROOT_ENV)
    if override:
        return Path(override)

    return DEFAULT_PROC_ROOT


def report_path(source: ReportSource, proc_root: Optional[Path] = None) -> Path:
    return resolve_proc_root(proc_root) / source.value


def capture_command_text(argv: Sequence[str]) -> str:
    """
    Run a command and return its stdout

    Raises:
    - OSError if the command cannot be launched
    - SourceError on non-zero exit, carrying status + stderr
    """
    result = subprocess.run(list(argv), capture_output=True, text=True, check=False)

    if result.returncode != 0:
        if result.returncode < 0:
            raise SourceError(None, -result.returncode, result.stderr)
        raise SourceError(result.returncode, None, result.stderr)

    return result.stdout


def read_report_text(
    source: ReportSource,
    *,
    proc_root: Optional[Path] = None,
    use_command: bool = False,
) -> str:
    """
    Fetch the complete text of one report
    """
    path = report_path(source, proc_root)

    if use_command:
        return capture_command_text(["cat", str(path)])

    return path.read_text(encoding="utf-8")

