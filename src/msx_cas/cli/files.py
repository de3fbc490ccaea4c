"""
Filesystem Helpers for the mcp Tool
===================================

Reading and writing files on behalf of the command-line tool. The CAS
and audio modules only work on in-memory bytes; everything that touches
the disk lives here.

- Atomic writes through a ``.temp`` file next to the target
- Unique output names when extracting (``name-1.bin``, ``name-2.bin``...)
- File type classification by extension (.bin, .bas, .asc)
- Tape names derived from file names
"""

from pathlib import Path
from typing import Union
import logging
import os

from msx_cas.cas.files import file_name
from msx_cas.errors import InvalidNameError

# Logger for this module
logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# =============================================================================
# Reading and Writing
# =============================================================================

def read_content(path: PathLike) -> bytes:
    """Read a whole file into memory."""
    return Path(path).read_bytes()


def temporary(path: PathLike) -> Path:
    """
    Get the temporary file used while writing ``path``.

    Raises:
        InvalidNameError: If the path has no file name component
    """
    path = Path(path)
    if not path.name or path.name in (".", ".."):
        raise InvalidNameError(f"No temporary file available for path {str(path)!r}")
    return path.with_name(f"{path.name}.temp")


def write_content(path: PathLike, content: bytes) -> int:
    """
    Write ``content`` to ``path`` atomically.

    The data goes to a temporary file first, which then replaces the
    target. A failed write never leaves a half-written target behind.

    Returns:
        Number of bytes written
    """
    path = Path(path)
    temp_path = temporary(path)
    try:
        temp_path.write_bytes(content)
        os.replace(temp_path, path)
    except OSError:
        if temp_path.exists():
            temp_path.unlink()
        raise
    logger.debug(f"Wrote {len(content)} bytes to {path}")
    return len(content)


# =============================================================================
# Names
# =============================================================================

def file_name_of(path: PathLike) -> tuple[bytes, bool]:
    """
    Derive a 6-byte tape name from a file path.

    The name is the file stem, padded or truncated to 6 bytes.

    Returns:
        Tuple of (name_bytes, truncated)

    Raises:
        InvalidNameError: If the path has no usable stem

    Example:
        >>> file_name_of("/path/to/guybrush.bin")
        (b'guybru', True)
    """
    path = Path(path)
    stem = path.stem
    if not stem or stem in (".", ".."):
        raise InvalidNameError(f"Cannot derive a file name from path {str(path)!r}")
    return file_name(stem)


def unique_filename(path: PathLike) -> tuple[Path, bool]:
    """
    Find an output path that does not exist yet.

    If ``path`` is free it is returned unchanged; otherwise a numeric
    suffix is added to the stem: ``foo.bin`` -> ``foo-1.bin``.

    Returns:
        Tuple of (path, clash) where clash reports whether a suffix was needed
    """
    path = Path(path)
    if not path.exists():
        return path, False

    suffix = 1
    while True:
        candidate = path.with_name(f"{path.stem}-{suffix}{path.suffix}")
        if not candidate.exists():
            return candidate, True
        suffix += 1


# =============================================================================
# File Type Classification
# =============================================================================

def has_extension(path: PathLike, ext: str) -> bool:
    """Check the file extension, ignoring case."""
    return Path(path).suffix.lower() == f".{ext.lower()}"


def is_bin_file(path: PathLike) -> bool:
    return has_extension(path, "bin")


def is_ascii_file(path: PathLike) -> bool:
    return has_extension(path, "asc")


def is_basic_file(path: PathLike) -> bool:
    return has_extension(path, "bas")
