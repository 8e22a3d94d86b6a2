"""Text renderings of decoded LIN frames: bubbles, table rows and CSV export."""

from __future__ import annotations

from typing import TextIO

from .analyzer import AnalysisResult
from .frames import DisplayBase, Frame, FrameFlags, FrameState, fault_string, format_number

EXPORT_HEADER = "T.BREAK,BREAK,T.SYNC,SYNC,T.PID,PID,T.D,Dn..."

_NANOSECONDS = 10**9


def format_time(sample: int, trigger_sample: int, sample_rate: int) -> str:
    """Return the time of ``sample`` relative to the trigger, in seconds."""
    if sample_rate <= 0:
        raise ValueError(f"sample rate must be positive: {sample_rate}")
    delta = sample - trigger_sample
    sign = "-" if delta < 0 else ""
    whole, remainder = divmod(abs(delta), sample_rate)
    fraction = remainder * _NANOSECONDS // sample_rate
    return f"{sign}{whole}.{fraction:09d}"


def _state_of(frame: Frame) -> FrameState:
    try:
        return FrameState(frame.frame_type)
    except ValueError:
        return FrameState.NO_FRAME


class LINResults:
    """Presents the frames of one analysis as human-readable text."""

    def __init__(self, result: AnalysisResult, sample_rate: int) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample rate must be positive: {sample_rate}")
        self.result = result
        self.sample_rate = sample_rate

    def _frame(self, frame_index: int) -> Frame:
        frames = self.result.frames
        if not 0 <= frame_index < len(frames):
            raise IndexError(f"no frame with index {frame_index}")
        return frames[frame_index]

    def is_frame_checksum(self, frame_index: int) -> bool:
        """Tell whether the frame is the last one of its packet."""
        self._frame(frame_index)
        packet_id = self.result.packet_containing_frame(frame_index)
        if packet_id is None:
            return False
        _, last = self.result.frames_in_packet(packet_id)
        return last == frame_index

    def _descriptions(
        self, frame_index: int, frame: Frame, display_base: DisplayBase
    ) -> tuple[str, str, str]:
        number = format_number(frame.data1, display_base, 8)
        state = _state_of(frame)

        def data_text() -> tuple[str, str, str]:
            seq = format_number(frame.data2 - 1, DisplayBase.DECIMAL, 8)
            return number, f"D{seq}: {number}", f"Data {seq}: {number}"

        def checksum_text() -> tuple[str, str, str]:
            return number, f"CHK: {number}", f"Checksum: {number}"

        if state is FrameState.HEADER_BREAK:
            return "BRK", "Break", "Header Break"
        if state is FrameState.HEADER_SYNC:
            return "SYN", "Sync", "Header Sync"
        if state is FrameState.HEADER_PID:
            pid = format_number(frame.data1 & 0x3F, display_base, 8)
            return pid, f"PID: {pid}", f"Protected ID: {pid}"
        if state in (FrameState.RESPONSE_DATA_ZERO, FrameState.RESPONSE_DATA):
            return data_text()
        if state is FrameState.RESPONSE_CHECKSUM:
            return checksum_text()
        if state is FrameState.RESPONSE_POTENTIAL_CHECKSUM:
            return checksum_text() if self.is_frame_checksum(frame_index) else data_text()
        return "IBS", "IB Space", "Inter-Byte Space"

    def bubble_text(self, frame_index: int, display_base: DisplayBase) -> list[str]:
        """Return the bubble strings for a frame, shortest first."""
        frame = self._frame(frame_index)
        faults = fault_string(frame.flags)
        if faults:
            texts = [faults]
            if (
                _state_of(frame) is FrameState.RESPONSE_CHECKSUM
                and frame.flags == FrameFlags.CHECKSUM_MISMATCH
            ):
                number = format_number(frame.data1, display_base, 8)
                texts.append(f"!CHK ERR: {number}")
                texts.append(f"!Checksum mismatch: {number}")
            return texts
        return list(self._descriptions(frame_index, frame, display_base))

    def tabular_text(self, frame_index: int, display_base: DisplayBase) -> str:
        """Return the one-line table text for a frame."""
        frame = self._frame(frame_index)
        faults = fault_string(frame.flags)
        if faults:
            return faults
        return self._descriptions(frame_index, frame, display_base)[2]

    def export(
        self, stream: TextIO, display_base: DisplayBase, trigger_sample: int = 0
    ) -> None:
        """Write one CSV line of times and values per packet to ``stream``."""
        frames = self.result.frames
        stream.write(EXPORT_HEADER + "\n")
        index = 0
        while index < len(frames):
            if _state_of(frames[index]) is FrameState.HEADER_BREAK:
                packet_id = self.result.packet_containing_frame(index)
                if packet_id is not None:
                    first, last = self.result.frames_in_packet(packet_id)
                    pieces = []
                    for position in range(first, last + 1):
                        frame = frames[position]
                        state = _state_of(frame)
                        if state is FrameState.NO_FRAME:
                            continue
                        data = frame.data1
                        if state is FrameState.HEADER_PID:
                            data &= 0x3F
                        time_text = format_time(
                            frame.starting_sample, trigger_sample, self.sample_rate
                        )
                        piece = f"{time_text},{format_number(data, display_base, 8)}"
                        if position < last:
                            piece += ","
                        pieces.append(piece)
                    stream.write("".join(pieces) + "\n")
                    index = last
            index += 1