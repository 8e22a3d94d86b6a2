"""Digital channel data: recorded edges, a reading cursor and a writer."""

from __future__ import annotations

import enum
from bisect import bisect_right
from dataclasses import dataclass


class BitState(enum.IntEnum):
    """Logic level of a digital line."""

    LOW = 0
    HIGH = 1

    @property
    def flipped(self) -> BitState:
        return BitState.LOW if self is BitState.HIGH else BitState.HIGH


class EndOfChannel(Exception):
    """Raised when reading past the recorded data of a channel."""


@dataclass(frozen=True)
class DigitalChannel:
    """A digital signal given by its initial level and its edge samples.

    Each edge is the first sample at which the new level holds. ``end`` is
    the last sample that may be read, or None for an open-ended signal.
    """

    initial_state: BitState = BitState.HIGH
    edges: tuple[int, ...] = ()
    end: int | None = None

    def __post_init__(self) -> None:
        edges = tuple(int(edge) for edge in self.edges)
        object.__setattr__(self, "edges", edges)
        object.__setattr__(self, "initial_state", BitState(self.initial_state))
        if any(edge <= 0 for edge in edges):
            raise ValueError("edges must lie after sample 0")
        if any(later <= earlier for earlier, later in zip(edges, edges[1:])):
            raise ValueError("edges must be strictly increasing")
        if self.end is not None and edges and edges[-1] > self.end:
            raise ValueError("edges must not lie beyond the end sample")

    def state_at(self, sample: int) -> BitState:
        """Return the level at the given sample."""
        if sample < 0:
            raise ValueError(f"negative sample: {sample}")
        if bisect_right(self.edges, sample) % 2:
            return self.initial_state.flipped
        return self.initial_state

    def cursor(self) -> ChannelCursor:
        """Return a cursor positioned at sample 0."""
        return ChannelCursor(self)


class ChannelCursor:
    """A forward-moving read position within a DigitalChannel."""

    def __init__(self, channel: DigitalChannel, sample: int = 0) -> None:
        if sample < 0:
            raise ValueError(f"negative sample: {sample}")
        self._channel = channel
        self._sample = sample

    @property
    def sample_number(self) -> int:
        return self._sample

    @property
    def bit_state(self) -> BitState:
        return self._channel.state_at(self._sample)

    def advance(self, samples: float) -> int:
        """Move forward by ``samples`` (truncated); return edges crossed."""
        count = int(samples)
        if count < 0:
            raise ValueError(f"cannot move backwards: {samples}")
        target = self._sample + count
        end = self._channel.end
        if end is not None and target > end:
            raise EndOfChannel(f"sample {target} is past the end ({end})")
        edges = self._channel.edges
        crossed = bisect_right(edges, target) - bisect_right(edges, self._sample)
        self._sample = target
        return crossed

    def next_edge_sample(self) -> int:
        """Return the sample of the next edge after the current position."""
        edges = self._channel.edges
        index = bisect_right(edges, self._sample)
        if index == len(edges):
            raise EndOfChannel("no further edges")
        return edges[index]

    def advance_to_next_edge(self) -> None:
        """Move to the sample of the next edge."""
        self._sample = self.next_edge_sample()

    def would_advancing_cause_transition(self, samples: float) -> bool:
        """Tell whether an edge lies within the next ``samples`` samples."""
        count = int(samples)
        edges = self._channel.edges
        index = bisect_right(edges, self._sample)
        return index < len(edges) and edges[index] <= self._sample + count


class SimulationChannel:
    """Builds a digital signal by moving forward and toggling the level."""

    def __init__(self, initial_state: BitState = BitState.HIGH) -> None:
        self._initial = BitState(initial_state)
        self._edges: list[int] = []
        self._sample = 0

    @property
    def current_sample(self) -> int:
        return self._sample

    @property
    def bit_state(self) -> BitState:
        return self._initial.flipped if len(self._edges) % 2 else self._initial

    def advance(self, samples: int) -> None:
        """Hold the current level for ``samples`` samples."""
        count = int(samples)
        if count < 0:
            raise ValueError(f"cannot move backwards: {samples}")
        self._sample += count

    def transition(self) -> None:
        """Toggle the level at the current sample."""
        if self._sample == 0:
            self._initial = self._initial.flipped
        elif self._edges and self._edges[-1] == self._sample:
            self._edges.pop()
        else:
            self._edges.append(self._sample)

    def transition_if_needed(self, state: BitState) -> bool:
        """Bring the level to ``state``; return whether it changed."""
        if self.bit_state == state:
            return False
        self.transition()
        return True

    def to_channel(self) -> DigitalChannel:
        """Freeze the signal written so far."""
        return DigitalChannel(self._initial, tuple(self._edges), end=self._sample)