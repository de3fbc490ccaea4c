"""
Cassette Audio Export
=====================

Encodes CAS blocks as the audio signal of a real MSX cassette, so that
a tape image can be played into a computer's cassette port or loaded
by an emulator that reads WAVE files.

This module provides:
- **AudioConfig**: Baud rate and sample rate settings
- **PulseEncoder**: FSK encoding of blocks into 8-bit PCM samples
- **WaveWriter**: RIFF/WAVE container for the samples
- **tape_to_wav**: The whole pipeline for a Tape

Quick Start
-----------
    >>> from msx_cas.audio import tape_to_wav
    >>> wav = tape_to_wav(Tape.from_bytes(cas_data))
    >>> Path("game.wav").write_bytes(wav)
"""

from msx_cas.audio.config import (
    AudioConfig,
    VALID_BAUD_RATES,
    DEFAULT_BAUD_RATE,
    DEFAULT_SAMPLE_RATE,
)

from msx_cas.audio.pulses import (
    PulseEncoder,
    pulse_samples,
    SHORT_PULSE,
    LONG_PULSE,
    SHORT_HEADER,
    LONG_HEADER,
    SILENCE_LEVEL,
)

from msx_cas.audio.riff import (
    WaveWriter,
    tape_to_wav,
    WAVE_HEADER_SIZE,
)

__all__ = [
    # Configuration
    "AudioConfig",
    "VALID_BAUD_RATES",
    "DEFAULT_BAUD_RATE",
    "DEFAULT_SAMPLE_RATE",
    # Pulse encoder
    "PulseEncoder",
    "pulse_samples",
    "SHORT_PULSE",
    "LONG_PULSE",
    "SHORT_HEADER",
    "LONG_HEADER",
    "SILENCE_LEVEL",
    # WAVE container
    "WaveWriter",
    "tape_to_wav",
    "WAVE_HEADER_SIZE",
]
