"""Analyzer settings: input channel, LIN version and bit rate."""

from __future__ import annotations

from dataclasses import dataclass

MIN_BIT_RATE = 1000
MAX_BIT_RATE = 1000000
DEFAULT_BIT_RATE = 20000
DEFAULT_LIN_VERSION = 2.0
LIN_VERSIONS = {
    1.0: "Version 1.x",
    2.0: "Version 2.x",
}
EXPORT_EXTENSIONS = ("txt", "csv")

_UNDEFINED_CHANNEL = -1


@dataclass
class LINSettings:
    """User-chosen settings for decoding a LIN bus."""

    input_channel: int | None = None
    lin_version: float = DEFAULT_LIN_VERSION
    bit_rate: int = DEFAULT_BIT_RATE

    def validate(self) -> None:
        """Raise ValueError if any setting is outside its allowed range."""
        if self.input_channel is not None and self.input_channel < 0:
            raise ValueError(f"invalid input channel: {self.input_channel}")
        if float(self.lin_version) not in LIN_VERSIONS:
            raise ValueError(f"unsupported LIN version: {self.lin_version}")
        if not MIN_BIT_RATE <= self.bit_rate <= MAX_BIT_RATE:
            raise ValueError(
                f"bit rate {self.bit_rate} outside {MIN_BIT_RATE}..{MAX_BIT_RATE}"
            )

    def save(self) -> str:
        """Serialise as 'channel bit_rate version'."""
        channel = _UNDEFINED_CHANNEL if self.input_channel is None else self.input_channel
        return f"{channel} {self.bit_rate} {float(self.lin_version)!r}"

    @classmethod
    def load(cls, text: str) -> LINSettings:
        """Parse text produced by save()."""
        fields = text.split()
        if len(fields) != 3:
            raise ValueError(f"expected 3 fields, got {len(fields)}")
        try:
            channel = int(fields[0])
            bit_rate = int(fields[1])
            version = float(fields[2])
        except ValueError as exc:
            raise ValueError(f"malformed settings: {text!r}") from exc
        settings = cls(
            input_channel=None if channel == _UNDEFINED_CHANNEL else channel,
            lin_version=version,
            bit_rate=bit_rate,
        )
        settings.validate()
        return settings