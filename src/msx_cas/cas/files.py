"""
CAS File Types
==============

This module defines the logical files stored in a CAS container. A file
is a view over one or more blocks; it is produced when decoding a tape
and accepted when appending to one.

File Variants
-------------
- **BinFile**: Machine code program loaded with BLOAD
    Data block: load(2) end(2) start(2) program(n), little-endian
- **BasicFile**: Tokenized BASIC program loaded with CLOAD
    Data block: the program bytes
- **AsciiFile**: Text loaded with LOAD or OPEN
    Data blocks: 256-byte chunks, the last one padded with $1A (EOF)
- **CustomFile**: Any block not announced by a header
    Data block: opaque bytes, kept unchanged

Extracted Form
--------------
``to_bytes()`` returns each file in the form MSX disk tools expect:
BIN files get their $FE identifier byte back, ASCII files lose their
EOF filler.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
import struct

from msx_cas.cas.blocks import FileType, NAME_LENGTH
from msx_cas.errors import InvalidNameError


# =============================================================================
# Format Constants
# =============================================================================

# Identifier byte at the start of BIN files on disk (not stored on tape)
BIN_FILE_ID = 0xFE

# Size of the load/end/start address header in BIN data blocks
BIN_ADDRESS_LENGTH = 6

# End-of-file filler byte for ASCII files
ASCII_EOF = 0x1A

# ASCII files are stored in chunks of this size
ASCII_CHUNK_SIZE = 256


# =============================================================================
# Names
# =============================================================================

def file_name(name: Union[str, bytes]) -> tuple[bytes, bool]:
    """
    Normalize a file name to the 6-byte tape format.

    Names shorter than 6 bytes are padded with spaces on the right;
    longer names are truncated to their first 6 bytes.

    Args:
        name: The logical file name

    Returns:
        Tuple of (name_bytes, truncated)

    Raises:
        InvalidNameError: If the name is not ASCII

    Example:
        >>> file_name("foo")
        (b'foo   ', False)
        >>> file_name("guybrush")
        (b'guybru', True)
    """
    if isinstance(name, str):
        try:
            raw = name.encode("ascii")
        except UnicodeEncodeError as e:
            raise InvalidNameError(f"File name {name!r} is not ASCII") from e
    else:
        raw = bytes(name)
        if not raw.isascii():
            raise InvalidNameError(f"File name {raw!r} is not ASCII")

    truncated = len(raw) > NAME_LENGTH
    return raw[:NAME_LENGTH].ljust(NAME_LENGTH, b" "), truncated


# =============================================================================
# File Base Class
# =============================================================================

@dataclass(frozen=True)
class CasFile:
    """
    Base class for files stored on a tape.

    Subclasses set ``file_type`` to the header identifier they are stored
    under (None for custom files).
    """
    file_type: Optional[FileType] = field(default=None, init=False)

    @property
    def size(self) -> int:
        """Payload size in bytes."""
        raise NotImplementedError("Subclasses must implement size")

    def to_bytes(self) -> bytes:
        """Get the file content as it is written when extracting."""
        raise NotImplementedError("Subclasses must implement to_bytes()")

    def get_display_name(self) -> str:
        """Get the name without trailing spaces ("" for unnamed files)."""
        return (getattr(self, "name", None) or "").rstrip()


@dataclass(frozen=True)
class NamedFile(CasFile):
    """
    Base class for files announced by a header block.

    Attributes:
        name: 6-character tape name, padding included
    """
    name: str = ""


# =============================================================================
# File Variants
# =============================================================================

@dataclass(frozen=True)
class BinFile(NamedFile):
    """
    Binary program file (header type $D0).

    Attributes:
        name: 6-character tape name
        load_address: Address the program is loaded at
        end_address: Last address of the program
        start_address: Execution address
        data: Program bytes following the address header
    """
    file_type: Optional[FileType] = field(default=FileType.BIN, init=False)
    load_address: int = 0
    end_address: int = 0
    start_address: int = 0
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)

    def address_header(self) -> bytes:
        """Get the 6-byte little-endian load/end/start header."""
        return struct.pack(
            "<HHH",
            self.load_address & 0xFFFF,
            self.end_address & 0xFFFF,
            self.start_address & 0xFFFF,
        )

    def to_bytes(self) -> bytes:
        return bytes([BIN_FILE_ID]) + self.address_header() + self.data


@dataclass(frozen=True)
class BasicFile(NamedFile):
    """Tokenized BASIC program file (header type $D3)."""
    file_type: Optional[FileType] = field(default=FileType.BASIC, init=False)
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)

    def to_bytes(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class AsciiFile(NamedFile):
    """
    ASCII text file (header type $EA).

    The text is kept as the chunks found on tape, EOF filler included.
    """
    file_type: Optional[FileType] = field(default=FileType.ASCII, init=False)
    chunks: tuple[bytes, ...] = ()

    @property
    def size(self) -> int:
        return sum(len(chunk) for chunk in self.chunks)

    def to_bytes(self) -> bytes:
        result = bytearray()
        for chunk in self.chunks:
            eof = chunk.find(ASCII_EOF)
            result.extend(chunk if eof == -1 else chunk[:eof])
        return bytes(result)


@dataclass(frozen=True)
class CustomFile(CasFile):
    """Opaque data block with no header; preserved byte for byte."""
    data: bytes = b""

    @property
    def name(self) -> None:
        """Custom files carry no name."""
        return None

    @property
    def size(self) -> int:
        return len(self.data)

    def to_bytes(self) -> bytes:
        return self.data
