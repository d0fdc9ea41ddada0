"""
linux_stats.decoders.base
AUTHOR: carter-vin

Shared numeric/hex helpers + typed decode failure
- decimal and hex tokens are validated before int() sees them
- every value is range-checked against its kernel bit width
- failures are raised as DecodeError, never absorbed into a zero
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

_DECIMAL_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"[0-9A-Fa-f]+")

U16_MAX = (1 << 16) - 1
U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1


class DecodeError(ValueError):
    """
    Structural parse failure

    - operation: which decoder failed ("counter_report", "memory_report", "socket_table")
    - line_number: 1-based line in the source text, when known
    - reason: what was wrong with the token or row
    """

    def __init__(self, operation: str, reason: str, *, line_number: Optional[int] = None) -> None:
        self.operation = operation
        self.reason = reason
        self.line_number = line_number

        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"{operation}{where}: {reason}")

    def at_line(self, line_number: int) -> "DecodeError":
        """
        Copy of this error pinned to a source line
        """
        return DecodeError(self.operation, self.reason, line_number=line_number)


def _clip(token: str, limit: int = 40) -> str:
    if len(token) <= limit:
        return repr(token)
    return repr(token[:limit]) + f"...({len(token)} chars)"


def parse_decimal(token: str, *, operation: str, max_value: int = U64_MAX) -> int:
    """
    Parse an unsigned decimal token

    Signs, whitespace and non-ASCII digits are rejected
    """
    if not _DECIMAL_RE.fullmatch(token):
        raise DecodeError(operation, f"invalid decimal token: {_clip(token)}")
    digits = token.lstrip("0") or "0"
    if len(digits) > len(str(max_value)):
        raise DecodeError(operation, f"value out of range: {_clip(token)}")
    value = int(digits, 10)
    if value > max_value:
        raise DecodeError(operation, f"value out of range: {token!r}")
    return value


def parse_hex(token: str, *, operation: str, max_value: int = U64_MAX) -> int:
    """
    Parse an unsigned hexadecimal token (no 0x prefix, either case)
    """
    if not _HEX_RE.fullmatch(token):
        raise DecodeError(operation, f"invalid hex token: {_clip(token)}")
    digits = token.lstrip("0") or "0"
    if len(digits) > len(f"{max_value:x}"):
        raise DecodeError(operation, f"value out of range: {_clip(token)}")
    value = int(digits, 16)
    if value > max_value:
        raise DecodeError(operation, f"value out of range: {token!r}")
    return value


def parse_decimal_list(tokens: list[str], *, operation: str) -> tuple[int, ...]:
    return tuple(parse_decimal(token, operation=operation) for token in tokens)


def split_pair(token: str, *, operation: str, what: str) -> tuple[str, str]:
    """
    Split a colon-joined pair like "0100007F:0050" into its two halves
    """
    parts = token.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise DecodeError(operation, f"malformed {what}: {token!r}")
    return parts[0], parts[1]


@dataclass(frozen=True)
class DecodeOutcome:
    """
    Normalized decoder result
    - ok: false=failure, error details in error fields
    - value: decoded record if ok=true
    """

    name: str
    ok: bool
    value: Optional[Any] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None


def run_decoder(name: str, fn, *args, **kwargs) -> DecodeOutcome:
    """
    Run acquisition/decoding & capture failure as data
    """
    try:
        v = fn(*args, **kwargs)
        return DecodeOutcome(name=name, ok=True, value=v)
    except (DecodeError, OSError, UnicodeDecodeError) as e:
        return DecodeOutcome(
            name=name,
            ok=False,
            value=None,
            error_type=type(e).__name__,
            error_message=str(e),
        )
