"""
Audio Export Unit Tests
=======================

Tests for the cassette signal encoder and the WAVE writer.

Test Categories
---------------
1. Config: AudioConfig validation and environment loading
2. Pulses: Single pulse synthesis
3. Encoder: Silences, headers, byte framing and blocks
4. WAVE: Container header layout
"""

import struct

import pytest

from msx_cas.audio import (
    AudioConfig,
    PulseEncoder,
    WaveWriter,
    pulse_samples,
    tape_to_wav,
    LONG_PULSE,
    SHORT_PULSE,
    SILENCE_LEVEL,
)
from msx_cas.cas import Block, FileType, Tape


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def encoder() -> PulseEncoder:
    """Encoder with the default 1200 baud / 43200 Hz settings."""
    return PulseEncoder()


@pytest.fixture
def fast_encoder() -> PulseEncoder:
    """Encoder running at 2400 baud."""
    return PulseEncoder(AudioConfig(baud=2400))


# Samples per byte at 1200 baud: start (36) + 8 long bits (8 * 36) + stop (4 * 18)
BYTE_SAMPLES = 396


# =============================================================================
# Config Tests
# =============================================================================

class TestAudioConfig:
    """Tests for AudioConfig."""

    def test_defaults(self):
        config = AudioConfig()
        assert config.baud == 1200
        assert config.sample_rate == 43200

    def test_invalid_baud(self):
        with pytest.raises(ValueError, match="baud"):
            AudioConfig(baud=300)

    def test_invalid_sample_rate(self):
        with pytest.raises(ValueError, match="sample rate"):
            AudioConfig(sample_rate=44100)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MCP_BAUD", "2400")
        monkeypatch.delenv("MCP_SAMPLE_RATE", raising=False)
        config = AudioConfig.from_env()
        assert config.baud == 2400
        assert config.sample_rate == 43200


# =============================================================================
# Pulse Tests
# =============================================================================

class TestPulseSamples:
    """Tests for pulse_samples()."""

    def test_pulse_lengths(self):
        """A short pulse is half as long as a long pulse."""
        assert len(pulse_samples(SHORT_PULSE, 43200, 1200)) == 18
        assert len(pulse_samples(LONG_PULSE, 43200, 1200)) == 36

    def test_pulse_lengths_2400_baud(self):
        assert len(pulse_samples(SHORT_PULSE, 43200, 2400)) == 9
        assert len(pulse_samples(LONG_PULSE, 43200, 2400)) == 18

    def test_pulse_shape(self):
        """One sine cycle starting at the zero level."""
        pulse = pulse_samples(LONG_PULSE, 43200, 1200)
        assert pulse[0] == 0x80
        assert pulse[9] == 0xFF    # +127 at a quarter cycle
        assert pulse[18] == 0x80
        assert pulse[27] == 0x01   # -127 at three quarters
        assert all(s > 0x80 for s in pulse[1:18])
        assert all(s < 0x80 for s in pulse[19:36])

    def test_pulse_is_pure(self):
        """The same parameters always give the same samples."""
        assert pulse_samples(SHORT_PULSE, 43200, 1200) == pulse_samples(SHORT_PULSE, 43200, 1200)


# =============================================================================
# Encoder Tests
# =============================================================================

class TestPulseEncoder:
    """Tests for PulseEncoder."""

    def test_starts_empty(self, encoder: PulseEncoder):
        assert len(encoder) == 0
        assert encoder.samples == b""

    def test_write_silence(self, encoder: PulseEncoder):
        assert encoder.write_silence(10) == 10
        assert encoder.samples == bytes([SILENCE_LEVEL]) * 10

    def test_silence_lengths(self, encoder: PulseEncoder):
        assert encoder.write_short_silence() == 43200
        assert encoder.write_long_silence() == 86400

    def test_write_pulse(self, encoder: PulseEncoder):
        assert encoder.write_pulse(SHORT_PULSE) == 18
        assert encoder.samples == pulse_samples(SHORT_PULSE, 43200, 1200)

    def test_headers(self, encoder: PulseEncoder):
        assert encoder.write_short_header() == 4000 * 18
        assert encoder.write_long_header() == 16000 * 18

    def test_header_duration_independent_of_baud(self, fast_encoder: PulseEncoder):
        """At 2400 baud twice as many pulses fill the same time."""
        assert fast_encoder.write_long_header() == 32000 * 9

    @pytest.mark.parametrize("value", [0x00, 0xFF, 0x55, 0xA3])
    def test_byte_duration(self, encoder: PulseEncoder, value: int):
        """Every byte takes the same time: 1 and 0 bits are equally long."""
        assert encoder.write_byte(value) == BYTE_SAMPLES
        assert len(encoder) == BYTE_SAMPLES

    def test_byte_bit_order(self, encoder: PulseEncoder):
        """Bits go least significant first, 1 as two short pulses."""
        short = pulse_samples(SHORT_PULSE, 43200, 1200)
        long = pulse_samples(LONG_PULSE, 43200, 1200)
        encoder.write_byte(0x01)
        expected = long + short + short + long * 7 + short * 4
        assert encoder.samples == expected

    def test_write_data(self, encoder: PulseEncoder):
        assert encoder.write_data(b"abc") == 3 * BYTE_SAMPLES

    def test_header_block(self, encoder: PulseEncoder):
        """File headers get 2 s of silence and the long sync header."""
        block = Block.header(FileType.BIN, b"FOOBAR")
        written = encoder.write_block(block)
        assert written == 86400 + 16000 * 18 + 16 * BYTE_SAMPLES
        assert encoder.samples[:86400] == bytes([SILENCE_LEVEL]) * 86400

    def test_data_block(self, encoder: PulseEncoder):
        """Data blocks get 1 s of silence and the short sync header."""
        written = encoder.write_block(Block(b"\x00\x80\x08\x80"))
        assert written == 43200 + 4000 * 18 + 4 * BYTE_SAMPLES

    def test_encode(self, encoder: PulseEncoder):
        blocks = [Block.header(FileType.BIN, b"FOOBAR"), Block(bytes(6))]
        samples = encoder.encode(blocks)
        assert len(samples) == (86400 + 288000 + 16 * BYTE_SAMPLES) + (43200 + 72000 + 6 * BYTE_SAMPLES)

    def test_encode_is_additive(self, encoder: PulseEncoder):
        encoder.write_silence(5)
        encoder.encode([Block(b"")])
        assert len(encoder) == 5 + 43200 + 72000


# =============================================================================
# WAVE Tests
# =============================================================================

class TestWaveWriter:
    """Tests for WaveWriter and tape_to_wav()."""

    def test_empty_wave(self):
        """An empty buffer gives the bare 44-byte header."""
        wav = WaveWriter().write(b"")
        assert len(wav) == 44
        assert wav[0:4] == b"RIFF"
        assert struct.unpack("<I", wav[4:8])[0] == 36
        assert wav[8:12] == b"WAVE"
        assert wav[12:16] == b"fmt "
        assert struct.unpack("<I", wav[16:20])[0] == 16
        assert struct.unpack("<H", wav[20:22])[0] == 1
        assert struct.unpack("<H", wav[22:24])[0] == 1
        assert struct.unpack("<I", wav[24:28])[0] == 43200
        assert struct.unpack("<I", wav[28:32])[0] == 43200
        assert struct.unpack("<H", wav[32:34])[0] == 1
        assert struct.unpack("<H", wav[34:36])[0] == 8
        assert wav[36:40] == b"data"
        assert struct.unpack("<I", wav[40:44])[0] == 0

    def test_lengths(self):
        wav = WaveWriter().write(bytes([0x80]) * 100)
        assert len(wav) == 144
        assert struct.unpack("<I", wav[4:8])[0] == 136
        assert struct.unpack("<I", wav[40:44])[0] == 100
        assert wav[44:] == bytes([0x80]) * 100

    def test_empty_tape(self):
        assert tape_to_wav(Tape()) == WaveWriter().write(b"")

    def test_tape_to_wav(self):
        tape = Tape()
        tape.append_custom(bytes(8))
        wav = tape_to_wav(tape)
        data_length = 43200 + 72000 + 8 * BYTE_SAMPLES
        assert struct.unpack("<I", wav[40:44])[0] == data_length
        assert len(wav) == 44 + data_length

    def test_tape_to_wav_progress(self):
        """The callback sees every block with its sample count."""
        tape = Tape()
        tape.append_basic("prog", bytes(8))
        seen = []
        tape_to_wav(tape, AudioConfig(), lambda index, written: seen.append((index, written)))
        assert seen == [
            (0, 86400 + 16000 * 18 + 16 * BYTE_SAMPLES),
            (1, 43200 + 4000 * 18 + 8 * BYTE_SAMPLES),
        ]
