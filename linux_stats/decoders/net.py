"""
linux_stats.decoders.net
AUTHOR: carter-vin

Socket table decoder (/proc/net/tcp, /proc/net/udp)

> cat /proc/net/tcp
  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode
   0: 0100007F:0CEA 00000000:0000 0A 00000000:00000000 00:00000000 00000000  1000        0 26735 1 ...

Wire conventions:
- addresses are 4 bytes of hex in host (little-endian) order -> reversed to get octets
- ports, state, queues and the timer countdown are hex
- slot, timer kind, uid and inode are decimal

Strict by contract: one bad row aborts the whole table (no partial results).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from ipaddress import IPv4Address
from typing import Any, Union

from linux_stats.decoders.base import (
    U16_MAX,
    U32_MAX,
    U64_MAX,
    DecodeError,
    parse_decimal,
    parse_hex,
    split_pair,
)

OPERATION = "socket_table"

# Columns read per row; anything after the inode is ignored
REQUIRED_COLUMNS = 10

TABLE_HEADER = (
    "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt"
    "   uid  timeout inode"
)


class SocketState(IntEnum):
    """
    TCP connection state codes (include/net/tcp_states.h)
    """

    ESTABLISHED = 1
    SYN_SENT = 2
    SYN_RECV = 3
    FIN_WAIT1 = 4
    FIN_WAIT2 = 5
    TIME_WAIT = 6
    CLOSE = 7
    CLOSE_WAIT = 8
    LAST_ACK = 9
    LISTEN = 10
    CLOSING = 11

    @classmethod
    def from_code(cls, code: int) -> "SocketState":
        try:
            return cls(code)
        except ValueError:
            raise DecodeError(OPERATION, f"unknown connection state: {code:#04x}") from None


@dataclass(frozen=True)
class InactiveTimer:
    active = False

    def to_dict(self) -> dict[str, Any]:
        return {"active": False}


@dataclass(frozen=True)
class ActiveTimer:
    expiry_ticks: int
    active = True

    def to_dict(self) -> dict[str, Any]:
        return {"active": True, "expiry_ticks": self.expiry_ticks}


SocketTimer = Union[InactiveTimer, ActiveTimer]


@dataclass(frozen=True)
class SocketRecord:
    slot: int
    local_address: IPv4Address
    local_port: int
    remote_address: IPv4Address
    remote_port: int
    connection_state: SocketState
    transmit_queue_bytes: int
    receive_queue_bytes: int
    timer: SocketTimer
    owner_uid: int
    inode: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "slot": self.slot,
            "local_address": str(self.local_address),
            "local_port": self.local_port,
            "remote_address": str(self.remote_address),
            "remote_port": self.remote_port,
            "connection_state": self.connection_state.name,
            "transmit_queue_bytes": self.transmit_queue_bytes,
            "receive_queue_bytes": self.receive_queue_bytes,
            "timer": self.timer.to_dict(),
            "owner_uid": self.owner_uid,
            "inode": self.inode,
        }

    def to_row(self) -> str:
        """
        Render in the kernel's own row layout (retransmits and timeout print as zero)
        """
        if isinstance(self.timer, ActiveTimer):
            timer = f"01:{self.timer.expiry_ticks:08X}"
        else:
            timer = "00:00000000"
        return (
            f"{self.slot:4d}: "
            f"{encode_address(self.local_address)}:{self.local_port:04X} "
            f"{encode_address(self.remote_address)}:{self.remote_port:04X} "
            f"{int(self.connection_state):02X} "
            f"{self.transmit_queue_bytes:08X}:{self.receive_queue_bytes:08X} "
            f"{timer} 00000000 {self.owner_uid:5d} {0:8d} {self.inode}"
        )


def reverse_address_bytes(raw: bytes) -> bytes:
    """
    Swap a kernel-native 32-bit word into network byte order
    """
    return bytes(reversed(raw))


def decode_address(token: str) -> IPv4Address:
    """
    "0100007F" -> 127.0.0.1
    """
    if len(token) != 8:
        raise DecodeError(OPERATION, f"address must be 8 hex digits: {token!r}")
    parse_hex(token, operation=OPERATION)
    return IPv4Address(reverse_address_bytes(bytes.fromhex(token)))


def encode_address(address: IPv4Address) -> str:
    return reverse_address_bytes(address.packed).hex().upper()


def decode_endpoint(token: str) -> tuple[IPv4Address, int]:
    """
    "<hex-addr>:<hex-port>"; the port is a plain hex number, not byte-swapped
    """
    address, port = split_pair(token, operation=OPERATION, what="endpoint")
    return decode_address(address), parse_hex(port, operation=OPERATION, max_value=U16_MAX)


def decode_state(token: str) -> SocketState:
    if len(token) != 2:
        raise DecodeError(OPERATION, f"state must be one hex byte: {token!r}")
    return SocketState.from_code(parse_hex(token, operation=OPERATION))


def decode_timer(token: str) -> SocketTimer:
    """
    "<decimal-kind>:<hex-value>"; kind 0 means no timer pending
    """
    kind, value = split_pair(token, operation=OPERATION, what="timer")
    expiry = parse_hex(value, operation=OPERATION)
    if parse_decimal(kind, operation=OPERATION) == 0:
        return InactiveTimer()
    return ActiveTimer(expiry_ticks=expiry)


def decode_socket_row(line: str) -> SocketRecord:
    """
    Decode one data row of a socket table

    Raises DecodeError if a column is missing or malformed
    """
    columns = line.split()
    if len(columns) < REQUIRED_COLUMNS:
        raise DecodeError(
            OPERATION,
            f"expected at least {REQUIRED_COLUMNS} columns, got {len(columns)}",
        )

    slot_token = columns[0]
    if not slot_token.endswith(":"):
        raise DecodeError(OPERATION, f"malformed slot: {slot_token!r}")
    slot = parse_decimal(slot_token[:-1], operation=OPERATION)

    local_address, local_port = decode_endpoint(columns[1])
    remote_address, remote_port = decode_endpoint(columns[2])
    state = decode_state(columns[3])

    tx, rx = split_pair(columns[4], operation=OPERATION, what="queues")
    timer = decode_timer(columns[5])
    # columns[6]: retransmits, columns[8]: timeout (not modeled)
    uid = parse_decimal(columns[7], operation=OPERATION, max_value=U32_MAX)
    inode = parse_decimal(columns[9], operation=OPERATION, max_value=U64_MAX)

    return SocketRecord(
        slot=slot,
        local_address=local_address,
        local_port=local_port,
        remote_address=remote_address,
        remote_port=remote_port,
        connection_state=state,
        transmit_queue_bytes=parse_hex(tx, operation=OPERATION),
        receive_queue_bytes=parse_hex(rx, operation=OPERATION),
        timer=timer,
        owner_uid=uid,
        inode=inode,
    )


def decode_socket_table(text: str) -> list[SocketRecord]:
    """
    Decode a whole socket table; the first line is the header and is skipped

    The first bad row raises DecodeError carrying its 1-based line number
    """
    records: list[SocketRecord] = []
    lines = text.splitlines()

    for index, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        try:
            records.append(decode_socket_row(line))
        except DecodeError as e:
            raise e.at_line(index) from None

    return records


def render_socket_table(records: list[SocketRecord]) -> str:
    """
    Header + one row per record, as the kernel prints it
    """
    return "\n".join([TABLE_HEADER, *(record.to_row() for record in records)]) + "\n"
