"""
CAS Block Scanner
=================

This module splits a raw CAS container into blocks.

Block Framing
-------------
A CAS file is a sequence of blocks. Every block starts with the same
8-byte synchronization marker:

    1F A6 DE BA CC 13 7D 74

The block payload runs from the end of its marker up to the start of
the next marker, or up to the end of the file for the last block.
Bytes found before the first marker do not belong to any block.

Real MSX tools write every marker at an offset divisible by 8, which is
why builders pad payloads with zeros (see Tape).

File Header Blocks
------------------
A named file starts with a header block:

    Offset  Size    Description
    ------  ----    -----------
    0       10      Type identifier, repeated 10 times
    10      6       File name (ASCII, space padded)

Type identifiers:
    $D0: Binary program (BLOAD)
    $D3: Tokenized BASIC program (CLOAD)
    $EA: ASCII text (LOAD / OPEN)

Reference
---------
- MSX Technical Handbook, chapter 5 (cassette interface)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final, Optional


# =============================================================================
# Framing Constants
# =============================================================================

# Synchronization marker preceding every block
BLOCK_MARKER: Final[bytes] = bytes([0x1F, 0xA6, 0xDE, 0xBA, 0xCC, 0x13, 0x7D, 0x74])

# Markers must start at offsets divisible by this value
BLOCK_ALIGNMENT: Final[int] = 8

# Number of repeated type identifier bytes in a header block
HEADER_ID_LENGTH: Final[int] = 10

# Size of the name field in a header block
NAME_LENGTH: Final[int] = 6

HEADER_LENGTH: Final[int] = HEADER_ID_LENGTH + NAME_LENGTH


class FileType(IntEnum):
    """Type identifiers found in file header blocks."""
    BIN = 0xD0
    BASIC = 0xD3
    ASCII = 0xEA

    def get_description(self) -> str:
        """Get the short lowercase label used in listings."""
        return self.name.lower()


# =============================================================================
# Block
# =============================================================================

@dataclass(frozen=True)
class Block:
    """
    A single block of a CAS container.

    The payload never includes the synchronization marker. Blocks are
    immutable: tapes grow by appending new blocks, never by editing
    existing ones.

    Attributes:
        data: The block payload (bytes following the marker)
    """
    data: bytes

    @classmethod
    def header(cls, file_type: FileType, name: bytes) -> "Block":
        """
        Build a file header block.

        Args:
            file_type: The type identifier to repeat
            name: The normalized 6-byte name

        Returns:
            A 16-byte header block
        """
        if len(name) != NAME_LENGTH:
            raise ValueError(f"Header name must be {NAME_LENGTH} bytes, got {len(name)}")
        return cls(bytes([file_type]) * HEADER_ID_LENGTH + bytes(name))

    @property
    def file_type(self) -> Optional[FileType]:
        """The file type announced by this block, or None for data blocks."""
        if len(self.data) < HEADER_LENGTH:
            return None
        first = self.data[0]
        if self.data[:HEADER_ID_LENGTH] != bytes([first]) * HEADER_ID_LENGTH:
            return None
        try:
            return FileType(first)
        except ValueError:
            return None

    @property
    def is_header(self) -> bool:
        """True if this block starts a named file."""
        return self.file_type is not None

    @property
    def name(self) -> bytes:
        """The raw 6-byte name field of a header block."""
        if not self.is_header:
            raise ValueError("Only header blocks carry a name")
        return self.data[HEADER_ID_LENGTH:HEADER_LENGTH]

    def to_bytes(self) -> bytes:
        """Serialize the block with its leading marker."""
        return BLOCK_MARKER + self.data

    def __len__(self) -> int:
        return len(self.data)


# =============================================================================
# Scanning
# =============================================================================

def find_markers(data: bytes) -> list[int]:
    """
    Find the start offset of every synchronization marker.

    Args:
        data: Raw container bytes

    Returns:
        Marker offsets in ascending order
    """
    offsets = []
    index = data.find(BLOCK_MARKER)
    while index != -1:
        offsets.append(index)
        index = data.find(BLOCK_MARKER, index + 1)
    return offsets


def scan_blocks(data: bytes) -> list[Block]:
    """
    Split raw container bytes into blocks.

    A buffer without markers yields no blocks; this is an empty tape,
    not an error.

    Args:
        data: Raw container bytes

    Returns:
        Blocks in container order

    Example:
        >>> blocks = scan_blocks(BLOCK_MARKER + b"abc" + BLOCK_MARKER + b"de")
        >>> [b.data for b in blocks]
        [b'abc', b'de']
    """
    data = bytes(data)
    offsets = find_markers(data)
    ends = offsets[1:] + [len(data)]
    return [
        Block(data[start + len(BLOCK_MARKER):end])
        for start, end in zip(offsets, ends)
    ]
