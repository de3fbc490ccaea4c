"""
CAS Tape
========

This module provides the Tape class, an ordered list of CAS blocks that
can be decoded from a container, extended with new files and serialized
back to container bytes.

Usage
-----
Reading a container:

    >>> from msx_cas.cas import Tape
    >>> tape = Tape.from_bytes(Path("games.cas").read_bytes())
    >>> for f in tape.files():
    ...     print(f.get_display_name(), f.size)

Building a container:

    >>> tape = Tape()
    >>> padding = tape.append_bin("hello", bin_data)
    >>> tape.append_ascii("readme", b"10 PRINT 1")
    246
    >>> Path("out.cas").write_bytes(tape.to_bytes())

Alignment
---------
The MSX BIOS expects every block marker at an offset divisible by 8.
Header blocks (8 + 16 bytes) and ASCII chunks (8 + 256 bytes) keep that
alignment by construction. BIN, BASIC and custom data blocks are padded
with trailing zeros; ASCII data is padded with $1A up to a 256-byte
boundary. Every append method returns the number of padding bytes it
inserted so that callers can warn about them.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union
import logging
import struct

from msx_cas.cas.blocks import (
    Block,
    FileType,
    BLOCK_ALIGNMENT,
    BLOCK_MARKER,
    scan_blocks,
)
from msx_cas.cas.files import (
    AsciiFile,
    BasicFile,
    BinFile,
    CasFile,
    CustomFile,
    file_name,
    ASCII_CHUNK_SIZE,
    ASCII_EOF,
    BIN_ADDRESS_LENGTH,
    BIN_FILE_ID,
)
from msx_cas.errors import CodecError, MalformedContainerError

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Decoding
# =============================================================================

def _decode_name(block: Block, index: int) -> str:
    """Decode the name field of a header block."""
    try:
        return block.name.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedContainerError(
            f"file name {block.name!r} is not text", block_index=index
        ) from e


def _data_block(blocks: list[Block], index: int) -> Block:
    """
    Get the data block following the header at ``index``.

    The next block is taken as data even if it looks like a header: a
    program may well start with ten $D0 bytes.
    """
    if index + 1 >= len(blocks):
        raise MalformedContainerError(
            f"{blocks[index].file_type.get_description()} header "
            f"is not followed by a data block",
            block_index=index,
        )
    return blocks[index + 1]


def _is_open_chunk(chunk: bytes) -> bool:
    """True if an ASCII chunk may be followed by another one."""
    return len(chunk) == ASCII_CHUNK_SIZE and ASCII_EOF not in chunk


def decode_files(blocks: list[Block]) -> Iterator[CasFile]:
    """
    Interpret a block sequence as files.

    The generator advances one block for custom files, two for BIN and
    BASIC files and one plus the chunk count for ASCII files.

    An ASCII file always owns the block after its header. Further blocks
    belong to it while they are full 256-byte chunks, up to and including
    the first chunk holding $1A, as the BIOS stops loading at EOF. Text
    with a $1A byte before its last chunk therefore decodes as a shorter
    ASCII file followed by custom blocks. A tape where a 256-byte custom
    block directly follows an EOF-free ASCII file cannot be told apart
    from a longer ASCII file.

    Args:
        blocks: Blocks in container order

    Yields:
        The files found on the tape

    Raises:
        MalformedContainerError: If a header has no data block, a name is
            not text, or a BIN data block is shorter than its address header
    """
    i = 0
    while i < len(blocks):
        block = blocks[i]
        file_type = block.file_type

        if file_type == FileType.BIN:
            name = _decode_name(block, i)
            content = _data_block(blocks, i).data
            if len(content) < BIN_ADDRESS_LENGTH:
                raise MalformedContainerError(
                    f"binary data block has {len(content)} bytes, "
                    f"expected at least {BIN_ADDRESS_LENGTH}",
                    block_index=i + 1,
                )
            load, end, start = struct.unpack_from("<HHH", content)
            logger.debug(f"Block {i}: binary file '{name}' [0x{load:04X},0x{end:04X}]:0x{start:04X}")
            yield BinFile(
                name=name,
                load_address=load,
                end_address=end,
                start_address=start,
                data=content[BIN_ADDRESS_LENGTH:],
            )
            i += 2

        elif file_type == FileType.BASIC:
            name = _decode_name(block, i)
            content = _data_block(blocks, i).data
            logger.debug(f"Block {i}: basic file '{name}' ({len(content)} bytes)")
            yield BasicFile(name=name, data=content)
            i += 2

        elif file_type == FileType.ASCII:
            name = _decode_name(block, i)
            header_index = i
            chunks = [_data_block(blocks, i).data]
            i += 2
            # Only full chunks continue the file; the one holding EOF ends it
            while (
                i < len(blocks)
                and _is_open_chunk(chunks[-1])
                and not blocks[i].is_header
                and len(blocks[i]) == ASCII_CHUNK_SIZE
            ):
                chunks.append(blocks[i].data)
                i += 1
            logger.debug(f"Block {header_index}: ascii file '{name}' ({len(chunks)} chunks)")
            yield AsciiFile(name=name, chunks=tuple(chunks))

        else:
            logger.debug(f"Block {i}: custom data ({len(block)} bytes)")
            yield CustomFile(data=block.data)
            i += 1


# =============================================================================
# Tape
# =============================================================================

@dataclass
class Tape:
    """
    An ordered list of CAS blocks.

    Tapes only grow: files are added with the ``append_*`` methods, which
    build new blocks and put them at the end. Existing blocks are never
    modified.

    Attributes:
        blocks: The blocks of the tape, in order
    """
    blocks: list[Block] = field(default_factory=list)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_bytes(cls, data: bytes) -> "Tape":
        """
        Decode a CAS container.

        The whole container is decoded once, so that a malformed
        container fails here rather than halfway through ``files()``.

        Args:
            data: Raw container bytes

        Returns:
            A Tape holding the container blocks

        Raises:
            MalformedContainerError: If the block framing is broken
        """
        tape = cls(blocks=scan_blocks(data))
        count = tape.validate()
        logger.info(f"Decoded tape: {len(tape.blocks)} blocks, {count} files")
        return tape

    def validate(self) -> int:
        """
        Decode every file once.

        Returns:
            Number of files on the tape

        Raises:
            MalformedContainerError: If the block framing is broken
        """
        return sum(1 for _ in self.files())

    # =========================================================================
    # Query Methods
    # =========================================================================

    def files(self) -> Iterator[CasFile]:
        """
        Iterate over the files of the tape.

        Every call starts a new pass from the first block.
        """
        return decode_files(self.blocks)

    @property
    def size(self) -> int:
        """Length of the serialized tape in bytes."""
        return sum(len(BLOCK_MARKER) + len(block) for block in self.blocks)

    def is_aligned(self) -> bool:
        """True if every block marker starts at an 8-byte boundary."""
        offset = 0
        for block in self.blocks:
            if offset % BLOCK_ALIGNMENT:
                return False
            offset += len(BLOCK_MARKER) + len(block)
        return True

    def __len__(self) -> int:
        return len(self.blocks)

    # =========================================================================
    # Adding Files
    # =========================================================================

    def append_bin(self, name: Union[str, bytes], data: bytes) -> int:
        """
        Add a binary program.

        ``data`` is a BIN file as found on disk: an optional $FE identifier
        byte, the load/end/start addresses and the program bytes.

        Args:
            name: File name (padded or truncated to 6 bytes)
            data: BIN file contents

        Returns:
            Number of zero bytes added for alignment

        Raises:
            InvalidNameError: If the name is not ASCII
            CodecError: If the data is too short to hold the addresses
        """
        data = bytes(data)
        if data[:1] == bytes([BIN_FILE_ID]):
            data = data[1:]
        return self._append_bin_payload(name, data)

    def append_basic(self, name: Union[str, bytes], data: bytes) -> int:
        """
        Add a tokenized BASIC program.

        Returns:
            Number of zero bytes added for alignment
        """
        self._append_header(FileType.BASIC, name)
        return self._append_aligned(bytes(data))

    def append_ascii(self, name: Union[str, bytes], data: bytes) -> int:
        """
        Add an ASCII text file.

        The text is padded with $1A up to the next 256-byte boundary so
        that the BIOS finds the end of file, then split into 256-byte
        chunk blocks. Text already a multiple of 256 bytes gets no filler,
        except empty text: it gets a whole chunk of filler so that the
        file still has a data block, and 256 is returned.

        Returns:
            Number of $1A filler bytes added (0-255, or 256 for empty text)
        """
        data = bytes(data)
        padding = -len(data) % ASCII_CHUNK_SIZE
        if not data:
            padding = ASCII_CHUNK_SIZE
        padded = data + bytes([ASCII_EOF]) * padding

        self._append_header(FileType.ASCII, name)
        for offset in range(0, len(padded), ASCII_CHUNK_SIZE):
            self.blocks.append(Block(padded[offset:offset + ASCII_CHUNK_SIZE]))

        if padding:
            logger.warning(f"Added {padding} filler bytes to {len(data)}-byte ASCII file")
        else:
            logger.debug(f"Added ASCII file ({len(data)} bytes, no filler)")
        return padding

    def append_custom(self, data: bytes) -> int:
        """
        Add an opaque data block with no header.

        Zero padding keeps the following blocks aligned; how it affects
        the program reading the block is up to the caller.

        Returns:
            Number of zero bytes added for alignment
        """
        return self._append_aligned(bytes(data))

    def append(self, file: CasFile) -> int:
        """
        Add a decoded file.

        Args:
            file: Any file variant, e.g. from another tape's ``files()``

        Returns:
            Number of padding bytes added
        """
        if isinstance(file, BinFile):
            return self._append_bin_payload(file.name, file.address_header() + file.data)
        if isinstance(file, BasicFile):
            return self.append_basic(file.name, file.data)
        if isinstance(file, AsciiFile):
            return self.append_ascii(file.name, file.to_bytes())
        if isinstance(file, CustomFile):
            return self.append_custom(file.data)
        raise CodecError(f"Unsupported file type: {type(file).__name__}")

    def extend(self, files: Iterable[CasFile]) -> int:
        """Add several files; returns the total padding added."""
        return sum(self.append(f) for f in files)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Serialize the tape to CAS container bytes."""
        return b"".join(block.to_bytes() for block in self.blocks)

    serialize = to_bytes

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _append_bin_payload(self, name: Union[str, bytes], payload: bytes) -> int:
        if len(payload) < BIN_ADDRESS_LENGTH:
            raise CodecError(
                f"Binary data has {len(payload)} bytes, "
                f"expected at least {BIN_ADDRESS_LENGTH} (load, end and start addresses)"
            )
        self._append_header(FileType.BIN, name)
        return self._append_aligned(payload)

    def _append_header(self, file_type: FileType, name: Union[str, bytes]) -> None:
        name_bytes, truncated = file_name(name)
        if truncated:
            logger.warning(f"File name {name!r} truncated to {name_bytes!r}")
        if self.size % BLOCK_ALIGNMENT:
            logger.warning(
                f"Tape length {self.size} is not a multiple of {BLOCK_ALIGNMENT}; "
                f"header block will not be aligned"
            )
        self.blocks.append(Block.header(file_type, name_bytes))

    def _append_aligned(self, payload: bytes) -> int:
        """Append a block, zero padded so the tape ends on an aligned offset."""
        end = self.size + len(BLOCK_MARKER) + len(payload)
        padding = -end % BLOCK_ALIGNMENT
        self.blocks.append(Block(payload + bytes(padding)))
        if padding:
            logger.warning(f"Added {padding} padding bytes to {len(payload)}-byte block")
        else:
            logger.debug(f"Added block ({len(payload)} bytes, no padding)")
        return padding


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_cas(data: bytes) -> Tape:
    """Decode CAS container bytes; shorthand for ``Tape.from_bytes``."""
    return Tape.from_bytes(data)


def create_cas(files: Iterable[CasFile]) -> bytes:
    """
    Build CAS container bytes from a list of files.

    Example:
        >>> cas = create_cas([
        ...     BasicFile(name="game", data=program),
        ...     CustomFile(data=level_data),
        ... ])
    """
    tape = Tape()
    tape.extend(files)
    return tape.to_bytes()
