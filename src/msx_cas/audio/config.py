"""
Audio Encoding Configuration
============================

Settings for the cassette signal encoder. Configuration can come from:
- Default values (defined here)
- Constructor arguments (e.g. from CLI options)
- Environment variables (``AudioConfig.from_env()``)

The MSX BIOS reads tapes at 1200 or 2400 baud. At 43200 samples per
second a 2400 Hz pulse spans 18 samples and a 1200 Hz pulse 36 samples
at 1200 baud (half that at 2400 baud).
"""

from dataclasses import dataclass
from typing import Final
import os


# Baud rates understood by the MSX BIOS
VALID_BAUD_RATES: Final[tuple[int, ...]] = (1200, 2400)

DEFAULT_BAUD_RATE: Final[int] = 1200
DEFAULT_SAMPLE_RATE: Final[int] = 43200

# Highest pulse rate the encoder produces (2400 Hz short pulse at 2400 baud)
_MAX_PULSE_RATE: Final[int] = 4800


@dataclass(frozen=True)
class AudioConfig:
    """
    Configuration for the pulse encoder.

    Attributes:
        baud: Tape baud rate (1200 or 2400)
        sample_rate: Output samples per second
    """
    baud: int = DEFAULT_BAUD_RATE
    sample_rate: int = DEFAULT_SAMPLE_RATE

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.baud not in VALID_BAUD_RATES:
            raise ValueError(
                f"Invalid baud rate: {self.baud}. "
                f"Valid rates are: {', '.join(str(b) for b in VALID_BAUD_RATES)}"
            )
        if self.sample_rate <= 0 or self.sample_rate % _MAX_PULSE_RATE:
            raise ValueError(
                f"Invalid sample rate: {self.sample_rate}. "
                f"Must be a positive multiple of {_MAX_PULSE_RATE}"
            )

    @classmethod
    def from_env(cls) -> "AudioConfig":
        """
        Create AudioConfig from environment variables.

        Environment variables (all optional):
            MCP_BAUD: Baud rate (1200 or 2400)
            MCP_SAMPLE_RATE: Samples per second
        """
        return cls(
            baud=int(os.environ.get("MCP_BAUD", DEFAULT_BAUD_RATE)),
            sample_rate=int(os.environ.get("MCP_SAMPLE_RATE", DEFAULT_SAMPLE_RATE)),
        )
