"""
MSX CAS Packager - Cassette Image Tools for MSX Computers
=========================================================

This package converts between MSX cassette images (CAS files), the
individual files stored in them, and the audio signal an MSX computer
reads from its cassette port.

Main Components
---------------
- **cas**: CAS container handling
    Splits containers into blocks, decodes BIN/BASIC/ASCII/custom files,
    and builds new containers with the alignment the MSX BIOS expects

- **audio**: Cassette audio export
    Encodes blocks as 1200/2400 baud FSK pulses in an 8-bit WAVE file

- **cli**: The ``mcp`` command-line tool (list, add, extract, export)

Quick Start
-----------
List a tape:
    >>> from msx_cas import Tape
    >>> tape = Tape.from_bytes(Path("games.cas").read_bytes())
    >>> for f in tape.files():
    ...     print(f.get_display_name(), f.size)

Add files and export to audio:
    >>> tape.append_bin("loader", Path("loader.bin").read_bytes())
    >>> Path("games.wav").write_bytes(tape_to_wav(tape))

Or use the command-line tool:
    $ mcp add games.cas loader.bin intro.bas
    $ mcp list games.cas
    $ mcp export games.cas games.wav
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from msx_cas.errors import (
    CasError,
    ContainerError,
    MalformedContainerError,
    CodecError,
    InvalidNameError,
)

from msx_cas.cas import (
    Block,
    FileType,
    Tape,
    CasFile,
    BinFile,
    BasicFile,
    AsciiFile,
    CustomFile,
    file_name,
    scan_blocks,
    parse_cas,
    create_cas,
)

from msx_cas.audio import (
    AudioConfig,
    PulseEncoder,
    WaveWriter,
    tape_to_wav,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "CasError",
    "ContainerError",
    "MalformedContainerError",
    "CodecError",
    "InvalidNameError",
    # CAS container
    "Block",
    "FileType",
    "Tape",
    "CasFile",
    "BinFile",
    "BasicFile",
    "AsciiFile",
    "CustomFile",
    "file_name",
    "scan_blocks",
    "parse_cas",
    "create_cas",
    # Audio export
    "AudioConfig",
    "PulseEncoder",
    "WaveWriter",
    "tape_to_wav",
]
