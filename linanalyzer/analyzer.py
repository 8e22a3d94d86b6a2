"""Decoding of LIN bus traffic from a recorded digital channel."""

from __future__ import annotations

import enum
import math
from bisect import bisect_right
from dataclasses import dataclass, field

from .channel import BitState, ChannelCursor, DigitalChannel, EndOfChannel
from .checksum import LINChecksum
from .frames import Frame, FrameFlags, FrameState, flag_names, frame_type_name
from .settings import LINSettings

_SYNC_BYTE = 0x55
_CLASSIC_IDENTIFIERS = (0x3C, 0x3D)
_MIN_BREAK_LOW_BITS = 13
_MAX_DATA_BYTES = 8


class MarkerType(enum.Enum):
    """Kinds of marks placed on the waveform where bits are sampled."""

    START = "start"
    STOP = "stop"
    ONE = "one"
    ZERO = "zero"
    ERROR_DOT = "error_dot"
    ERROR_SQUARE = "error_square"


@dataclass(frozen=True)
class Marker:
    """A mark at one sample of the input channel."""

    sample: int
    kind: MarkerType


@dataclass
class FrameV2:
    """A named decoded span with keyed values."""

    frame_type: str
    starting_sample: int
    ending_sample: int
    data: dict[str, int | bool] = field(default_factory=dict)


@dataclass
class AnalysisResult:
    """Everything decoded from one channel."""

    frames: list[Frame] = field(default_factory=list)
    frames_v2: list[FrameV2] = field(default_factory=list)
    markers: list[Marker] = field(default_factory=list)
    packets: list[tuple[int, int]] = field(default_factory=list)

    def packet_containing_frame(self, frame_index: int) -> int | None:
        """Return the id of the packet holding the frame, or None."""
        if frame_index < 0:
            raise ValueError(f"negative frame index: {frame_index}")
        firsts = [first for first, _ in self.packets]
        position = bisect_right(firsts, frame_index) - 1
        if position >= 0 and self.packets[position][1] >= frame_index:
            return position
        return None

    def frames_in_packet(self, packet_id: int) -> tuple[int, int]:
        """Return the first and last frame index of a packet."""
        if not 0 <= packet_id < len(self.packets):
            raise IndexError(f"no packet with id {packet_id}")
        return self.packets[packet_id]


@dataclass
class _RawByte:
    data: int
    start: int
    end: int
    framing_error: bool = False
    is_break: bool = False


class _Reader:
    """Samples UART bytes and break fields from a cursor."""

    def __init__(self, cursor: ChannelCursor, samples_per_bit: float) -> None:
        self.cursor = cursor
        self.samples_per_bit = samples_per_bit
        self._pending: list[Marker] = []

    def take_markers(self) -> list[Marker]:
        markers, self._pending = self._pending, []
        return markers

    def discard_markers(self) -> None:
        self._pending = []

    def _mark(self, kind: MarkerType) -> None:
        self._pending.append(Marker(self.cursor.sample_number, kind))

    def _mark_level(self) -> None:
        self._mark(MarkerType.ONE if self.cursor.bit_state is BitState.HIGH else MarkerType.ZERO)

    def _advance_bits(self, bits: int) -> None:
        self.cursor.advance(bits * self.samples_per_bit)

    def _advance_half_bit(self) -> None:
        self.cursor.advance(self.samples_per_bit * 0.5)

    def _check_stop_bit(self) -> bool:
        """Sample the stop bit; return True on a framing error."""
        self._advance_bits(1)
        if self.cursor.bit_state is BitState.HIGH:
            self._mark(MarkerType.STOP)
            return False
        self._mark(MarkerType.ERROR_SQUARE)
        return True

    def break_field(self) -> _RawByte:
        """Find a low period of at least thirteen bits and read it as a break."""
        cursor = self.cursor
        while True:
            cursor.advance_to_next_edge()
            if cursor.bit_state is BitState.HIGH:
                cursor.advance_to_next_edge()
            low = (cursor.next_edge_sample() - cursor.sample_number) / self.samples_per_bit
            low_bits = math.floor(low + 0.5)
            if low_bits >= _MIN_BREAK_LOW_BITS:
                start = cursor.sample_number
                break

        for index in range(low_bits):
            if index == 0:
                self._advance_half_bit()
            else:
                self._advance_bits(1)
            self._mark_level()

        framing_error = self._check_stop_bit()
        return _RawByte(0x00, start, cursor.sample_number, framing_error)

    def byte_frame(self) -> _RawByte:
        """Read one byte, LSB first; recognise a break that arrives instead."""
        cursor = self.cursor
        cursor.advance_to_next_edge()
        if cursor.bit_state is BitState.HIGH:
            self._advance_half_bit()
            self._mark(MarkerType.ERROR_DOT)
            cursor.advance_to_next_edge()
        start = cursor.sample_number
        self._advance_half_bit()
        self._mark(MarkerType.START)

        data = 0
        for bit in range(8):
            self._advance_bits(1)
            if cursor.bit_state is BitState.HIGH:
                data |= 1 << bit
            self._mark_level()

        self._advance_bits(1)
        if cursor.bit_state is BitState.HIGH:
            self._mark(MarkerType.STOP)
            return _RawByte(data, start, cursor.sample_number)

        # Low at the stop bit: possibly a break field rather than a byte.
        remaining_low = not cursor.would_advancing_cause_transition(self.samples_per_bit * 3)
        cursor.advance_to_next_edge()
        high_after = not cursor.would_advancing_cause_transition(self.samples_per_bit * 0.5)
        if remaining_low and high_after:
            return _RawByte(0x00, start, cursor.sample_number, is_break=True)

        self._mark(MarkerType.ERROR_SQUARE)
        return _RawByte(data, start, cursor.sample_number, framing_error=True)


class _ResultBuilder:
    def __init__(self) -> None:
        self.result = AnalysisResult()
        self._packet_start = 0

    def add_frame(self, frame: Frame) -> None:
        self.result.frames.append(frame)

    def commit_packet(self) -> None:
        count = len(self.result.frames)
        if count > self._packet_start:
            self.result.packets.append((self._packet_start, count - 1))
        self._packet_start = count


def _frame_v2(frame: Frame) -> FrameV2:
    values: dict[str, int | bool] = {}
    kind = frame.frame_type
    if kind is FrameState.HEADER_PID:
        values["protected_id"] = frame.data1 & 0x3F
    elif kind in (FrameState.RESPONSE_DATA_ZERO, FrameState.RESPONSE_DATA):
        values["data"] = frame.data1
        values["index"] = frame.data2 - 1
    elif kind is FrameState.RESPONSE_CHECKSUM:
        values["checksum"] = frame.data1
    elif kind is FrameState.RESPONSE_POTENTIAL_CHECKSUM:
        values["checksum"] = frame.data1
        values["data"] = frame.data1
        values["index"] = frame.data2 - 1
    for name in flag_names(frame.flags):
        values[name] = True
    return FrameV2(frame_type_name(kind), frame.starting_sample, frame.ending_sample, values)


class LINAnalyzer:
    """Decodes LIN headers and responses from a serial line."""

    name = "LIN"

    def __init__(self, settings: LINSettings | None = None) -> None:
        self.settings = settings if settings is not None else LINSettings()

    def minimum_sample_rate(self) -> int:
        """Return the lowest sample rate, in Hz, that can be decoded."""
        return self.settings.bit_rate * 4

    def analyze(self, channel: DigitalChannel, sample_rate: int) -> AnalysisResult:
        """Decode the whole channel sampled at ``sample_rate`` Hz."""
        self.settings.validate()
        if sample_rate < self.minimum_sample_rate():
            raise ValueError(
                f"sample rate {sample_rate} is below the minimum {self.minimum_sample_rate()}"
            )
        builder = _ResultBuilder()
        reader = _Reader(channel.cursor(), sample_rate / self.settings.bit_rate)
        try:
            if reader.cursor.bit_state is BitState.LOW:
                reader.cursor.advance_to_next_edge()
            self._decode(reader, builder)
        except EndOfChannel:
            reader.discard_markers()
        return builder.result

    def _decode(self, reader: _Reader, builder: _ResultBuilder) -> None:
        enhanced = self.settings.lin_version >= 2
        checksum = LINChecksum()
        state = FrameState.NO_FRAME
        show_ibs = False
        data_bytes = 0

        while True:
            ibs_start = reader.cursor.sample_number
            if state in (FrameState.NO_FRAME, FrameState.HEADER_BREAK):
                raw = reader.break_field()
            else:
                raw = reader.byte_frame()
            builder.result.markers.extend(reader.take_markers())

            ibs = Frame(ibs_start, raw.start)
            flags = FrameFlags.BYTE_FRAMING_ERROR if raw.framing_error else FrameFlags.OKAY
            frame_type = state
            start_of_packet = False
            ready_to_save = False

            if raw.is_break:
                state = FrameState.NO_FRAME
                show_ibs = False
            if show_ibs:
                builder.add_frame(ibs)

            checksum_byte = False
            if state in (FrameState.NO_FRAME, FrameState.HEADER_BREAK):
                show_ibs = True
                if raw.data == 0x00:
                    state = FrameState.HEADER_SYNC
                    frame_type = FrameState.HEADER_BREAK
                    start_of_packet = True
                else:
                    flags |= FrameFlags.HEADER_BREAK_EXPECTED
                    state = FrameState.NO_FRAME
            elif state is FrameState.HEADER_SYNC:
                if raw.data == _SYNC_BYTE:
                    state = FrameState.HEADER_PID
                else:
                    flags |= FrameFlags.HEADER_SYNC_EXPECTED
                    state = FrameState.NO_FRAME
            elif state is FrameState.HEADER_PID:
                state = FrameState.RESPONSE_DATA_ZERO
                checksum.clear()
                if enhanced and raw.data & 0x3F not in _CLASSIC_IDENTIFIERS:
                    checksum.add(raw.data)
            elif state is FrameState.RESPONSE_DATA_ZERO:
                if not enhanced:
                    checksum.clear()
                checksum.add(raw.data)
                data_bytes = 1
                state = FrameState.RESPONSE_DATA
            elif state is FrameState.RESPONSE_DATA:
                if data_bytes >= _MAX_DATA_BYTES or checksum.result() == raw.data:
                    checksum_byte = True
                    if data_bytes >= _MAX_DATA_BYTES:
                        ready_to_save = True
                        frame_type = FrameState.RESPONSE_CHECKSUM
                    else:
                        frame_type = FrameState.RESPONSE_POTENTIAL_CHECKSUM
                else:
                    data_bytes += 1
                    checksum.add(raw.data)
            else:
                checksum_byte = True

            if checksum_byte:
                if checksum.result() != raw.data:
                    flags |= FrameFlags.CHECKSUM_MISMATCH
                if ready_to_save:
                    state = FrameState.NO_FRAME
                    show_ibs = False
                    data_bytes = 0
                else:
                    state = FrameState.RESPONSE_DATA
                    checksum.add(raw.data)
                    data_bytes += 1

            frame = Frame(raw.start, raw.end, raw.data, data_bytes, flags, frame_type)
            if start_of_packet:
                builder.commit_packet()
            builder.add_frame(frame)
            builder.result.frames_v2.append(_frame_v2(frame))
            if ready_to_save:
                builder.commit_packet()