"""
RIFF/WAVE Container Writer
==========================

Wraps a PCM sample buffer into a WAVE file.

File Layout
-----------
    Offset  Size    Description
    ------  ----    -----------
    0       4       "RIFF"
    4       4       File length - 8
    8       4       "WAVE"
    12      4       "fmt "
    16      4       Format chunk length (16)
    20      2       Format tag (1 = PCM)
    22      2       Channels
    24      4       Sample rate
    28      4       Byte rate (sample_rate * channels * bits / 8)
    32      2       Block align (channels * bits / 8)
    34      2       Bits per sample
    36      4       "data"
    40      4       Data length
    44      n       Samples

All integers are little-endian.
"""

from dataclasses import dataclass
from typing import Callable, Final, Optional
import struct

from msx_cas.audio.config import AudioConfig, DEFAULT_SAMPLE_RATE
from msx_cas.audio.pulses import PulseEncoder
from msx_cas.cas.tape import Tape

# Size of the RIFF, fmt and data chunk headers together
WAVE_HEADER_SIZE: Final[int] = 44

WAVE_FORMAT_PCM: Final[int] = 1


@dataclass(frozen=True)
class WaveWriter:
    """
    Writes PCM samples as a WAVE file.

    Attributes:
        sample_rate: Samples per second
        channels: Number of interleaved channels
        bits_per_sample: Sample width in bits

    Example:
        >>> wav = WaveWriter().write(b"")
        >>> len(wav)
        44
    """
    sample_rate: int = DEFAULT_SAMPLE_RATE
    channels: int = 1
    bits_per_sample: int = 8

    @property
    def block_align(self) -> int:
        return self.channels * self.bits_per_sample // 8

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align

    def header(self, data_length: int) -> bytes:
        """Build the 44-byte header for ``data_length`` bytes of samples."""
        return struct.pack(
            "<4sI4s4sIHHIIHH4sI",
            b"RIFF",
            WAVE_HEADER_SIZE - 8 + data_length,
            b"WAVE",
            b"fmt ",
            16,
            WAVE_FORMAT_PCM,
            self.channels,
            self.sample_rate,
            self.byte_rate,
            self.block_align,
            self.bits_per_sample,
            b"data",
            data_length,
        )

    def write(self, samples: bytes) -> bytes:
        """Get the complete WAVE file for ``samples``."""
        return self.header(len(samples)) + bytes(samples)


def tape_to_wav(
    tape: Tape,
    config: Optional[AudioConfig] = None,
    progress: Optional[Callable[[int, int], None]] = None,
) -> bytes:
    """
    Encode every block of a tape as a WAVE file.

    Args:
        tape: The Tape to export
        config: Encoder settings (defaults: 1200 baud, 43200 Hz)
        progress: Per-block callback, see ``PulseEncoder.encode``

    Returns:
        Complete WAVE file as bytes
    """
    encoder = PulseEncoder(config)
    samples = encoder.encode(tape.blocks, progress)
    return WaveWriter(sample_rate=encoder.sample_rate).write(samples)
