"""Decoded LIN frame records, their states, flags and text helpers."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class FrameState(enum.IntEnum):
    """What a decoded byte was taken to be."""

    NO_FRAME = 0
    HEADER_BREAK = 1
    HEADER_SYNC = 2
    HEADER_PID = 3
    RESPONSE_DATA_ZERO = 4
    RESPONSE_DATA = 5
    RESPONSE_CHECKSUM = 6
    RESPONSE_POTENTIAL_CHECKSUM = 7


class FrameFlags(enum.IntFlag):
    """Error flags attached to a decoded byte."""

    OKAY = 0x00
    BYTE_FRAMING_ERROR = 0x01
    HEADER_BREAK_EXPECTED = 0x02
    HEADER_SYNC_EXPECTED = 0x04
    CHECKSUM_MISMATCH = 0x08


class DisplayBase(enum.Enum):
    """Number formatting styles."""

    BINARY = "binary"
    DECIMAL = "decimal"
    HEXADECIMAL = "hexadecimal"
    ASCII = "ascii"
    ASCII_HEX = "ascii_hex"


@dataclass
class Frame:
    """One decoded span of samples."""

    starting_sample: int
    ending_sample: int
    data1: int = 0
    data2: int = 0
    flags: FrameFlags = FrameFlags.OKAY
    frame_type: FrameState = FrameState.NO_FRAME


_TYPE_NAMES = {
    FrameState.NO_FRAME: "no_frame",
    FrameState.HEADER_BREAK: "header_break",
    FrameState.HEADER_SYNC: "header_sync",
    FrameState.HEADER_PID: "header_pid",
    FrameState.RESPONSE_DATA_ZERO: "data",
    FrameState.RESPONSE_DATA: "data",
    FrameState.RESPONSE_CHECKSUM: "checksum",
    FrameState.RESPONSE_POTENTIAL_CHECKSUM: "data_or_checksum",
}

_FLAG_NAMES = (
    (FrameFlags.BYTE_FRAMING_ERROR, "byte_framing_error", "!FRAME"),
    (FrameFlags.HEADER_BREAK_EXPECTED, "header_break_expected", "!BREAK"),
    (FrameFlags.HEADER_SYNC_EXPECTED, "header_sync_expected", "!SYNC"),
    (FrameFlags.CHECKSUM_MISMATCH, "checksum_mismatch", "!CHK"),
)


def frame_type_name(state: FrameState) -> str:
    """Return the machine-readable name of a frame type."""
    return _TYPE_NAMES[FrameState(state)]


def flag_names(flags: int) -> list[str]:
    """Return the names of the flags that are set, in a fixed order."""
    return [name for flag, name, _ in _FLAG_NAMES if flags & flag]


def fault_string(flags: int) -> str:
    """Return the short fault text for the flags, or '' when there are none."""
    text = "".join(short for flag, _, short in _FLAG_NAMES if flags & flag)
    return text + "!" if text else ""


def format_number(value: int, display_base: DisplayBase, bits: int) -> str:
    """Render the low ``bits`` bits of ``value`` in the given display base."""
    if bits <= 0:
        raise ValueError(f"bit width must be positive: {bits}")
    value &= (1 << bits) - 1
    hex_text = f"0x{value:0{(bits + 3) // 4}X}"
    if display_base is DisplayBase.DECIMAL:
        return str(value)
    if display_base is DisplayBase.HEXADECIMAL:
        return hex_text
    if display_base is DisplayBase.BINARY:
        return f"0b{value:0{bits}b}"
    ascii_text = chr(value) if 32 <= value < 127 else f"'{value}'"
    if display_base is DisplayBase.ASCII:
        return ascii_text
    return f"{ascii_text} ({hex_text})"