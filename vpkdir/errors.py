"""
Errors raised while reading VPK directory files and their archives.
"""

from typing import List


class VPKError(Exception):
    """Base class for all VPK reading errors."""


class BadSignatureError(VPKError, ValueError):
    """Directory file does not start with the VPK magic."""


class UnsupportedVersionError(VPKError, ValueError):
    """Directory header carries a version other than 1 or 2."""


class InvalidHeaderError(VPKError, ValueError):
    """A v2 header field holds an impossible value."""


class BadEntryTerminatorError(VPKError, ValueError):
    """A directory entry record does not end with 0xFFFF."""


class OutOfBoundsError(VPKError, IndexError):
    """Fixed-width read crosses the end of the buffer."""


class InsufficientDataError(VPKError, EOFError):
    """Fewer bytes remain than a raw read requested."""


class InvalidOffsetError(VPKError, ValueError):
    """Seek target falls outside the buffer."""


class EntryNotFoundError(VPKError, KeyError):
    """Requested virtual path is not in the directory."""


class ArchivePathError(VPKError, ValueError):
    """Sibling archive path cannot be derived from the directory path."""


class ShortReadError(VPKError, OSError):
    """Storage returned fewer bytes than the entry declares."""


class ValidationFailedError(VPKError, ValueError):
    """CRC-32 of extracted content does not match the entry."""


class ArchiveCloseError(VPKError, OSError):
    """One or more cached archive handles failed to close.

    Attributes:
        errors: The individual exceptions, in close order
    """

    def __init__(self, errors: List[BaseException]):
        super().__init__(f"Failed to close {len(errors)} archive handle(s)")
        self.errors = errors
