"""
Contract tests for report acquisition + the read_* convenience functions
"""

import shutil
import sys
from pathlib import Path

import pytest

from linux_stats import read_counter_report, read_memory_report, read_tcp_table, read_udp_table
from linux_stats.decoders.base import DecodeError
from linux_stats.sources import (
    DEFAULT_PROC_ROOT,
    PROC_ROOT_ENV,
    ReportSource,
    SourceError,
    capture_command_text,
    read_report_text,
    resolve_proc_root,
)

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    """
    Fake /proc tree built from the captured fixtures
    """
    (tmp_path / "net").mkdir()
    shutil.copy(FIXTURES / "stat-1", tmp_path / "stat")
    shutil.copy(FIXTURES / "meminfo-1", tmp_path / "meminfo")
    shutil.copy(FIXTURES / "tcp-1", tmp_path / "net" / "tcp")
    shutil.copy(FIXTURES / "udp-1", tmp_path / "net" / "udp")
    return tmp_path


def test_proc_root_precedence(monkeypatch, tmp_path: Path) -> None:
    """
    explicit argument > env var > /proc
    """
    monkeypatch.delenv(PROC_ROOT_ENV, raising=False)
    assert resolve_proc_root() == DEFAULT_PROC_ROOT

    monkeypatch.setenv(PROC_ROOT_ENV, str(tmp_path))
    assert resolve_proc_root() == tmp_path

    assert resolve_proc_root(Path("/elsewhere")) == Path("/elsewhere")


def test_read_report_text_uses_source_path(proc_root: Path) -> None:
    text = read_report_text(ReportSource.TCP, proc_root=proc_root)

    assert text == (FIXTURES / "tcp-1").read_text(encoding="utf-8")


def test_missing_source_surfaces_unchanged(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_report_text(ReportSource.MEMINFO, proc_root=tmp_path)


def test_read_functions_decode_live_tree(monkeypatch, proc_root: Path) -> None:
    monkeypatch.setenv(PROC_ROOT_ENV, str(proc_root))

    assert read_counter_report().context_switches == 1990473
    assert read_memory_report().mem_total == 3521920
    assert len(read_tcp_table()) == 4
    assert [row.local_port for row in read_udp_table()] == [53, 68]


def test_read_through_command(proc_root: Path) -> None:
    """
    The `cat` route yields the same record as a direct read
    """
    via_cat = read_memory_report(proc_root=proc_root, use_command=True)

    assert via_cat == read_memory_report(proc_root=proc_root)


def test_decode_errors_are_not_swallowed(tmp_path: Path) -> None:
    (tmp_path / "net").mkdir()
    (tmp_path / "net" / "tcp").write_text("header\n   0: garbage\n", encoding="utf-8")

    with pytest.raises(DecodeError):
        read_tcp_table(proc_root=tmp_path)


def test_command_failure_carries_status_and_stderr() -> None:
    argv = [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]

    with pytest.raises(SourceError) as excinfo:
        capture_command_text(argv)

    err = excinfo.value
    assert err.exit_status == 3
    assert err.signal is None
    assert err.stderr == "boom"
    assert str(err) == "ExitStatus: 3    Stderr: boom"


def test_command_that_cannot_launch_raises_os_error() -> None:
    with pytest.raises(OSError):
        capture_command_text(["/nonexistent/linux-stats-reader"])


def test_cat_of_missing_file_is_a_source_error(tmp_path: Path) -> None:
    with pytest.raises(SourceError) as excinfo:
        read_report_text(ReportSource.STAT, proc_root=tmp_path, use_command=True)

    assert excinfo.value.exit_status != 0
    assert "stat" in excinfo.value.stderr
