"""
linux_stats.main
------------
AUTHOR: carter-vin

CLI entrypoint: acquire one kernel report, decode it, print it as JSON.

Key contract:
- `linux-stats --help` shows a Commands section.
- `linux-stats {stat,meminfo,tcp,udp}` prints one JSON envelope on stdout.
- Exit codes: 0 ok, 3 acquisition failed, 4 decode failed.
- Events (JSON lines) go to stderr.
"""

from __future__ import annotations

import os
import platform
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from linux_stats.decoders.base import run_decoder
from linux_stats.logging import emit_event
from linux_stats.model import build_decoded_report, report_to_json, utc_now_iso
from linux_stats.reports import DECODERS
from linux_stats.sources import ReportSource, read_report_text, report_path, resolve_proc_root

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="linux-stats: decode /proc counter, memory and socket reports",
)

TOOL_VERSION = "0.1.0"

EXIT_SOURCE_FAILED = 3
EXIT_DECODE_FAILED = 4


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class RuntimeInfo:
    """
    What this host can decode
    - kernel_release: running kernel (report layouts vary by release)
    - proc_root: where reports are read from
    - readable: report label -> whether its file can be opened
    """

    kernel_release: str
    proc_root: Path
    readable: dict[str, bool]


def collect_runtime_info(proc_root: Optional[Path] = None) -> RuntimeInfo:
    root = resolve_proc_root(proc_root)
    return RuntimeInfo(
        kernel_release=platform.release(),
        proc_root=root,
        readable={
            source.label: os.access(report_path(source, root), os.R_OK)
            for source in ReportSource
        },
    )


@dataclass(frozen=True)
class DecodeRequest:
    """
    Where to get the text from

    - file: explicit file ("-" = stdin); wins over proc_root
    - proc_root: root of the /proc tree (None = env/default)
    - use_command: read through `cat` instead of opening the file
    """

    source: ReportSource
    file: Optional[str] = None
    proc_root: Optional[Path] = None
    use_command: bool = False


def acquire_text(request: DecodeRequest) -> str:
    if request.file == "-":
        return sys.stdin.read()
    if request.file is not None:
        return Path(request.file).read_text(encoding="utf-8")
    return read_report_text(
        request.source,
        proc_root=request.proc_root,
        use_command=request.use_command,
    )


def decode_and_print(request: DecodeRequest, *, pretty: bool = False) -> None:
    """
    Shared body of the report commands

    Failure semantics:
    - acquisition failure -> source_read_failed event, exit 3
    - structural decode failure -> decode_failed event, exit 4
    """
    label = request.source.label
    emit_event(
        "decode_start",
        tool_version=TOOL_VERSION,
        source=label,
        file=request.file,
        use_command=request.use_command,
    )

    acquired = run_decoder("acquire", acquire_text, request)
    if not acquired.ok:
        emit_event(
            "source_read_failed",
            tool_version=TOOL_VERSION,
            source=label,
            error_type=acquired.error_type,
            message=acquired.error_message,
        )
        raise typer.Exit(code=EXIT_SOURCE_FAILED)

    decoded = run_decoder(label, DECODERS[request.source], acquired.value)
    if not decoded.ok:
        emit_event(
            "decode_failed",
            tool_version=TOOL_VERSION,
            source=label,
            error_type=decoded.error_type,
            message=decoded.error_message,
        )
        raise typer.Exit(code=EXIT_DECODE_FAILED)

    report = build_decoded_report(
        request.source,
        decoded.value,
        decoded_at=utc_now_iso(),
        tool_version=TOOL_VERSION,
    )
    report_json = report_to_json(report, indent=2 if pretty else None)
    typer.echo(report_json)

    fields = {"rows": len(decoded.value)} if isinstance(decoded.value, list) else {}
    emit_event(
        "report_decoded",
        tool_version=TOOL_VERSION,
        source=label,
        bytes=len(report_json),
        **fields,
    )


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Print a hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: linux-stats --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version(
    proc_root: Optional[Path] = typer.Option(
        None,
        "--proc-root",
        help="Root of the /proc tree to check (default: $LINUX_STATS_PROC_ROOT or /proc).",
    ),
) -> None:
    """
    Print tool version, kernel release and which reports are readable
    """
    info = collect_runtime_info(proc_root)

    typer.echo(f"linux-stats v{TOOL_VERSION}")
    typer.echo(f"python={sys.version.split()[0]}")
    typer.echo(f"kernel={info.kernel_release}")
    typer.echo(f"proc_root={info.proc_root}")
    for label, ok in info.readable.items():
        typer.echo(f"{label}={'readable' if ok else 'missing'}")


FILE_OPTION = typer.Option(
    None,
    "--file",
    help="Decode this file instead of the live report ('-' reads stdin).",
)
PROC_ROOT_OPTION = typer.Option(
    None,
    "--proc-root",
    help="Root of the /proc tree (default: $LINUX_STATS_PROC_ROOT or /proc).",
)
USE_COMMAND_OPTION = typer.Option(
    False,
    "--use-command",
    help="Read the report through `cat` instead of opening it directly.",
)
PRETTY_OPTION = typer.Option(
    False,
    "--pretty",
    help="Indent the JSON output.",
)


@app.command("stat")
def stat(
    file: Optional[str] = FILE_OPTION,
    proc_root: Optional[Path] = PROC_ROOT_OPTION,
    use_command: bool = USE_COMMAND_OPTION,
    pretty: bool = PRETTY_OPTION,
) -> None:
    """
    Decode the CPU/interrupt counter report (/proc/stat)
    """
    decode_and_print(DecodeRequest(ReportSource.STAT, file, proc_root, use_command), pretty=pretty)


@app.command("meminfo")
def meminfo(
    file: Optional[str] = FILE_OPTION,
    proc_root: Optional[Path] = PROC_ROOT_OPTION,
    use_command: bool = USE_COMMAND_OPTION,
    pretty: bool = PRETTY_OPTION,
) -> None:
    """
    Decode the memory report (/proc/meminfo)
    """
    decode_and_print(DecodeRequest(ReportSource.MEMINFO, file, proc_root, use_command), pretty=pretty)


@app.command("tcp")
def tcp(
    file: Optional[str] = FILE_OPTION,
    proc_root: Optional[Path] = PROC_ROOT_OPTION,
    use_command: bool = USE_COMMAND_OPTION,
    pretty: bool = PRETTY_OPTION,
) -> None:
    """
    Decode the TCP socket table (/proc/net/tcp)
    """
    decode_and_print(DecodeRequest(ReportSource.TCP, file, proc_root, use_command), pretty=pretty)


@app.command("udp")
def udp(
    file: Optional[str] = FILE_OPTION,
    proc_root: Optional[Path] = PROC_ROOT_OPTION,
    use_command: bool = USE_COMMAND_OPTION,
    pretty: bool = PRETTY_OPTION,
) -> None:
    """
    Decode the UDP socket table (/proc/net/udp)
    """
    decode_and_print(DecodeRequest(ReportSource.UDP, file, proc_root, use_command), pretty=pretty)


# run command if invoked directly
if __name__ == "__main__":
    app()
