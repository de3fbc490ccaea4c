"""
MSX CAS Packager Error Hierarchy
================================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from CasError, allowing callers to catch every
packager error with a single except clause if desired.

Exception Hierarchy
-------------------
CasError (base)
├── ContainerError (reading CAS containers)
│   └── MalformedContainerError - broken framing or truncated fields
└── CodecError (building CAS containers)
    └── InvalidNameError - name not representable as a 6-byte MSX name

Name truncation and alignment padding are not errors. Both are reported
as return values by the operations that perform them, so that callers
can decide whether to show a warning.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class CasError(Exception):
    """
    Base exception for all MSX CAS Packager errors.

        try:
            tape = Tape.from_bytes(data)
        except CasError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Container (decode) Exceptions
# =============================================================================

class ContainerError(CasError):
    """Base exception for errors found while reading a CAS container."""
    pass


class MalformedContainerError(ContainerError):
    """
    The container framing cannot be interpreted.

    Raised when decoding a CAS container that has:
    - A file header block with no following data block
    - Name bytes that are not ASCII text
    - A block too short for a field it must carry

    Attributes:
        block_index: Index of the offending block, when known
    """

    def __init__(self, message: str, block_index: Optional[int] = None):
        self.message = message
        self.block_index = block_index
        if block_index is not None:
            message = f"block {block_index}: {message}"
        super().__init__(message)


# =============================================================================
# Codec (encode) Exceptions
# =============================================================================

class CodecError(CasError):
    """Base exception for errors found while adding files to a tape."""
    pass


class InvalidNameError(CodecError):
    """
    A file name cannot be stored in the container.

    Raised when a name contains non-ASCII characters, or when a source
    path yields no usable file name stem (".", "..", empty).
    """
    pass
