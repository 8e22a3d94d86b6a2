"""LIN checksum: an 8-bit sum with end-around carry, inverted."""

from __future__ import annotations


class LINChecksum:
    """Running LIN checksum accumulator.

    Bytes are summed with the carry folded back in (subtract 255 on
    overflow). The checksum is the inverted low byte of the sum.
    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value = 0

    def clear(self) -> None:
        """Reset the accumulator to zero."""
        self._value = 0

    def add(self, byte: int) -> int:
        """Add one byte and return the low byte of the running sum."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte out of range: {byte}")
        self._value += byte
        if self._value >= 256:
            self._value -= 255
        return self._value & 0xFF

    def result(self) -> int:
        """Return the checksum byte for everything added so far."""
        return ~self._value & 0xFF

    def __repr__(self) -> str:
        return f"LINChecksum(sum=0x{self._value:02X})"