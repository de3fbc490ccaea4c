"""
CAS Container Handling for MSX Computers
========================================

This module reads and writes MSX cassette images (``.cas`` files). A CAS
file stores the blocks an MSX computer would read from tape, each one
preceded by an 8-byte synchronization marker.

This module provides:
- **Block / scan_blocks**: Split a container into marker-framed blocks
- **Tape**: Decode, extend and serialize a container
- **File types**: BinFile, BasicFile, AsciiFile and CustomFile

Quick Start
-----------
Listing a container:

    >>> from msx_cas.cas import Tape
    >>> tape = Tape.from_bytes(Path("games.cas").read_bytes())
    >>> for f in tape.files():
    ...     print(f.file_type, f.get_display_name(), f.size)

Creating a container:

    >>> tape = Tape()
    >>> tape.append_basic("game", Path("game.bas").read_bytes())
    >>> Path("game.cas").write_bytes(tape.to_bytes())
"""

# =============================================================================
# Public API Exports
# =============================================================================

from msx_cas.cas.blocks import (
    Block,
    FileType,
    BLOCK_MARKER,
    BLOCK_ALIGNMENT,
    HEADER_ID_LENGTH,
    NAME_LENGTH,
    find_markers,
    scan_blocks,
)

from msx_cas.cas.files import (
    CasFile,
    NamedFile,
    BinFile,
    BasicFile,
    AsciiFile,
    CustomFile,
    file_name,
    ASCII_CHUNK_SIZE,
    ASCII_EOF,
    BIN_ADDRESS_LENGTH,
    BIN_FILE_ID,
)

from msx_cas.cas.tape import (
    Tape,
    decode_files,
    parse_cas,
    create_cas,
)

__all__ = [
    # Blocks
    "Block",
    "FileType",
    "BLOCK_MARKER",
    "BLOCK_ALIGNMENT",
    "HEADER_ID_LENGTH",
    "NAME_LENGTH",
    "find_markers",
    "scan_blocks",
    # Files
    "CasFile",
    "NamedFile",
    "BinFile",
    "BasicFile",
    "AsciiFile",
    "CustomFile",
    "file_name",
    "ASCII_CHUNK_SIZE",
    "ASCII_EOF",
    "BIN_ADDRESS_LENGTH",
    "BIN_FILE_ID",
    # Tape
    "Tape",
    "decode_files",
    "parse_cas",
    "create_cas",
]
