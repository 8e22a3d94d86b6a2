"""Synthetic LIN bus traffic for exercising the analyzer."""

from __future__ import annotations

import random

from .channel import BitState, DigitalChannel, SimulationChannel
from .checksum import LINChecksum
from .settings import LINSettings

_SYNC_BYTE = 0x55
_CLASSIC_IDENTIFIERS = (0x3C, 0x3D)
_BREAK_LOW_BITS = 13
_MAX_DATA_BYTES = 8


def swap_ends(byte: int) -> int:
    """Return ``byte`` with its bit order reversed."""
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"byte out of range: {byte}")
    return int(f"{byte:08b}"[::-1], 2)


def protected_identifier(identifier: int) -> int:
    """Return the protected identifier byte: the 6-bit id plus parity P0, P1."""
    if not 0 <= identifier <= 0x3F:
        raise ValueError(f"identifier out of range: {identifier}")
    bit = [(identifier >> n) & 1 for n in range(6)]
    p0 = bit[0] ^ bit[1] ^ bit[2] ^ bit[4]
    p1 = 1 ^ (bit[1] ^ bit[3] ^ bit[4] ^ bit[5]) ^ 1
    p1 = bit[1] ^ bit[3] ^ bit[4] ^ bit[5]
    return identifier | (p0 << 6) | (p1 << 7)


class SimulationDataGenerator:
    """Writes random LIN frames onto a simulated serial line."""

    def __init__(
        self,
        settings: LINSettings,
        sample_rate: int,
        rng: random.Random | None = None,
    ) -> None:
        settings.validate()
        if sample_rate < settings.bit_rate:
            raise ValueError(
                f"sample rate {sample_rate} is below the bit rate {settings.bit_rate}"
            )
        self.settings = settings
        self.sample_rate = sample_rate
        self._rng = rng if rng is not None else random.Random()
        self._channel = SimulationChannel(BitState.HIGH)
        self._checksum = LINChecksum()

    @property
    def channel(self) -> SimulationChannel:
        return self._channel

    @property
    def _samples_per_bit(self) -> int:
        return self.sample_rate // self.settings.bit_rate

    def _random(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)

    def generate(self, largest_sample_requested: int, sample_rate: int) -> DigitalChannel:
        """Write frames until the requested sample is covered; return the signal.

        ``largest_sample_requested`` is counted at ``sample_rate`` and is
        scaled to this generator's own sample rate.
        """
        if sample_rate <= 0:
            raise ValueError(f"sample rate must be positive: {sample_rate}")
        target = largest_sample_requested * self.sample_rate // sample_rate
        while self._channel.current_sample < target:
            self.create_frame()
        return self._channel.to_channel()

    def create_frame(self) -> None:
        """Write a header and a response with a correct checksum."""
        self._channel.advance(self._samples_per_bit * self._random(1, 4))
        self.create_header()
        if self.settings.lin_version < 2:
            self._checksum.clear()
        self.create_response(self._random(1, 8))

    def create_bad_frame(self) -> None:
        """Write a frame of five data bytes followed by a wrong checksum."""
        self._channel.advance(self._samples_per_bit * self._random(1, 4))
        identifier = self.create_header()
        if self.settings.lin_version < 2 or identifier in _CLASSIC_IDENTIFIERS:
            self._checksum.clear()
        self._random(1, 8)
        for _ in range(5):
            self.create_serial_byte(self._random(0, 255) & 0xFF)
        self.create_serial_byte((self._checksum.result() + 3) & 0xFF)

    def create_header(self) -> int:
        """Write break, sync and protected identifier; return the identifier."""
        self.create_break_field()
        self.create_serial_byte(_SYNC_BYTE)
        self._checksum.clear()
        identifier = self._random(0, 59)
        if self._random(1, 6) == 6:
            identifier = 0x3C
        if self._random(1, 6) == 5:
            identifier = 0x3D
        self.create_serial_byte(protected_identifier(identifier))
        return identifier

    def create_response(self, length: int) -> None:
        """Write up to eight data bytes followed by their checksum."""
        for index in range(min(length, _MAX_DATA_BYTES)):
            data_byte = self._random(0, 255) & 0xFF
            if index >= 1 and self._random(1, 5) == 5:
                data_byte = self._checksum.result()
            self.create_serial_byte(data_byte)
        self.create_serial_byte(self._checksum.result())

    def create_break_field(self) -> None:
        """Write a break: idle, thirteen low bits, then a long high delimiter."""
        samples_per_bit = self._samples_per_bit + 1
        low_byte, high_byte = 0x00, 0xE0
        self._checksum.add(low_byte)
        self._checksum.add(high_byte)
        pattern = swap_ends(low_byte) | (swap_ends(high_byte) << 8)

        self._channel.transition_if_needed(BitState.HIGH)
        self._channel.advance(samples_per_bit * 2)
        for index in range(_BREAK_LOW_BITS):
            mask = (0x80 >> index) if index < 8 else 0
            level = BitState.HIGH if pattern & mask else BitState.LOW
            self._channel.transition_if_needed(level)
            self._channel.advance(samples_per_bit)
        self._channel.transition_if_needed(BitState.HIGH)
        self._channel.advance(samples_per_bit * 2)

    def create_serial_byte(self, byte: int) -> None:
        """Write one UART byte: idle, start bit, eight data bits LSB first, stop."""
        samples_per_bit = self._samples_per_bit
        self._checksum.add(byte)
        reversed_byte = swap_ends(byte)

        self._channel.transition_if_needed(BitState.HIGH)
        self._channel.advance(samples_per_bit * 2)
        self._channel.transition()
        self._channel.advance(samples_per_bit)
        for index in range(8):
            level = BitState.HIGH if reversed_byte & (0x80 >> index) else BitState.LOW
            self._channel.transition_if_needed(level)
            self._channel.advance(samples_per_bit)
        self._channel.transition_if_needed(BitState.HIGH)
        self._channel.advance(samples_per_bit * 2)