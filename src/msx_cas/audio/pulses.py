"""
MSX Cassette Pulse Encoder
==========================

This module turns CAS blocks into the 8-bit PCM signal an MSX computer
reads from its cassette port.

Signal Format
-------------
The MSX uses frequency-shift keying with two pulse frequencies:

    Short pulse: 2400 Hz (x baud/1200)
    Long pulse:  1200 Hz (x baud/1200)

Each byte is framed as:

    start bit   1 long pulse
    data bits   8 bits, least significant first
                  1 -> 2 short pulses
                  0 -> 1 long pulse
    stop bits   4 short pulses

Every block is preceded by silence and a run of short pulses the BIOS
synchronizes on:

    File header blocks:  2 s silence, 16000 pulses
    Other blocks:        1 s silence,  4000 pulses

Samples are unsigned 8-bit PCM; 0x80 is the zero level.

Usage
-----
    >>> encoder = PulseEncoder()
    >>> samples = encoder.encode(tape.blocks)
    >>> wav = WaveWriter().write(samples)
"""

from functools import lru_cache
from typing import Callable, Final, Iterable, Optional
import logging
import math

from msx_cas.audio.config import AudioConfig
from msx_cas.cas.blocks import Block

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Signal Constants
# =============================================================================

SHORT_PULSE: Final[int] = 2400      # Hz, "1" half-bits, headers, stop bits
LONG_PULSE: Final[int] = 1200       # Hz, "0" bits and start bit

SHORT_HEADER: Final[int] = 4000     # Pulses before data blocks
LONG_HEADER: Final[int] = 16000     # Pulses before file header blocks

SILENCE_LEVEL: Final[int] = 0x80    # Zero amplitude in unsigned 8-bit PCM

STOP_BITS: Final[int] = 4           # Short pulses after each byte


# =============================================================================
# Pulse Synthesis
# =============================================================================

@lru_cache(maxsize=None)
def pulse_samples(freq: int, sample_rate: int, baud: int) -> bytes:
    """
    Synthesize one sine cycle for a pulse.

    The sample count is ``sample_rate / (baud * (freq / 1200))`` using
    integer division. Each sample is ``sin(2*pi*i/len) * 127`` truncated
    to a signed byte, then converted to unsigned by flipping the top bit.

    Args:
        freq: Pulse frequency at 1200 baud (SHORT_PULSE or LONG_PULSE)
        sample_rate: Output samples per second
        baud: Tape baud rate

    Returns:
        The pulse samples

    Example:
        >>> len(pulse_samples(SHORT_PULSE, 43200, 1200))
        18
    """
    length = sample_rate // (baud * (freq // 1200))
    scale = 2.0 * math.pi / length
    return bytes(
        (int(math.sin(scale * i) * 127.0) & 0xFF) ^ 0x80
        for i in range(length)
    )


# =============================================================================
# Pulse Encoder
# =============================================================================

class PulseEncoder:
    """
    Encodes silences, sync headers and data into an internal sample buffer.

    All ``write_*`` methods append to the buffer and return the number of
    samples they added. Use ``samples`` (or ``encode()``) to get the
    result and ``WaveWriter`` to wrap it into a WAVE file.

    Attributes:
        config: Baud and sample rate settings
    """

    def __init__(self, config: Optional[AudioConfig] = None) -> None:
        self.config = config or AudioConfig()
        self._buffer = bytearray()

    @property
    def baud(self) -> int:
        return self.config.baud

    @property
    def sample_rate(self) -> int:
        return self.config.sample_rate

    @property
    def samples(self) -> bytes:
        """The samples encoded so far."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    # =========================================================================
    # Silences
    # =========================================================================

    def write_silence(self, count: int) -> int:
        """Write ``count`` zero-level samples."""
        self._buffer.extend(bytes([SILENCE_LEVEL]) * count)
        return count

    def write_short_silence(self) -> int:
        """Write one second of silence."""
        return self.write_silence(self.sample_rate)

    def write_long_silence(self) -> int:
        """Write two seconds of silence."""
        return self.write_silence(self.sample_rate * 2)

    # =========================================================================
    # Pulses and Headers
    # =========================================================================

    def write_pulse(self, freq: int) -> int:
        """Write a single pulse of the given frequency."""
        pulse = pulse_samples(freq, self.sample_rate, self.baud)
        self._buffer.extend(pulse)
        return len(pulse)

    def write_header(self, pulses: int) -> int:
        """Write a sync header of ``pulses`` short pulses (scaled by baud)."""
        count = pulses * self.baud // 1200
        pulse = pulse_samples(SHORT_PULSE, self.sample_rate, self.baud)
        self._buffer.extend(pulse * count)
        return len(pulse) * count

    def write_short_header(self) -> int:
        return self.write_header(SHORT_HEADER)

    def write_long_header(self) -> int:
        return self.write_header(LONG_HEADER)

    # =========================================================================
    # Data
    # =========================================================================

    def write_byte(self, value: int) -> int:
        """
        Write one byte: start bit, 8 data bits LSB first, 4 stop pulses.
        """
        written = self.write_pulse(LONG_PULSE)
        bits = value & 0xFF
        for _ in range(8):
            if bits & 0x01:
                written += self.write_pulse(SHORT_PULSE)
                written += self.write_pulse(SHORT_PULSE)
            else:
                written += self.write_pulse(LONG_PULSE)
            bits >>= 1
        for _ in range(STOP_BITS):
            written += self.write_pulse(SHORT_PULSE)
        return written

    def write_data(self, data: bytes) -> int:
        """Write every byte of ``data``."""
        return sum(self.write_byte(b) for b in data)

    def write_block(self, block: Block) -> int:
        """
        Write a block with its leading silence and sync header.

        File header blocks get the long silence and header the BIOS
        expects before a new file; other blocks get the short ones.
        The marker is not written, only the block payload.
        """
        if block.is_header:
            written = self.write_long_silence()
            written += self.write_long_header()
        else:
            written = self.write_short_silence()
            written += self.write_short_header()
        written += self.write_data(block.data)
        return written

    def encode(
        self,
        blocks: Iterable[Block],
        progress: Optional[Callable[[int, int], None]] = None,
    ) -> bytes:
        """
        Encode a sequence of blocks.

        Args:
            blocks: Blocks to write, e.g. ``tape.blocks``
            progress: Called with the block index and its sample count
                after each block

        Returns:
            All samples in the buffer after encoding
        """
        for index, block in enumerate(blocks):
            written = self.write_block(block)
            logger.debug(f"Encoded block {index}: {written // 1024} KiB")
            if progress is not None:
                progress(index, written)
        logger.info(f"Encoded {len(self._buffer)} samples at {self.baud} baud")
        return self.samples
