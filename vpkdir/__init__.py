"""
VPK Directory Utilities

Readers for Valve VPK directory files and their numbered content archives.
"""

from .reader import ByteCursor, ByteIterator, SeekMode
from .directory import VPKDirectory
from .types import VPKEntry, SELF_ARCHIVE_INDEX
from .errors import (
    VPKError,
    BadSignatureError,
    UnsupportedVersionError,
    InvalidHeaderError,
    BadEntryTerminatorError,
    OutOfBoundsError,
    InsufficientDataError,
    InvalidOffsetError,
    EntryNotFoundError,
    ArchivePathError,
    ShortReadError,
    ValidationFailedError,
    ArchiveCloseError,
)

__all__ = [
    'ByteCursor',
    'ByteIterator',
    'SeekMode',
    'VPKDirectory',
    'VPKEntry',
    'SELF_ARCHIVE_INDEX',
    'VPKError',
    'BadSignatureError',
    'UnsupportedVersionError',
    'InvalidHeaderError',
    'BadEntryTerminatorError',
    'OutOfBoundsError',
    'InsufficientDataError',
    'InvalidOffsetError',
    'EntryNotFoundError',
    'ArchivePathError',
    'ShortReadError',
    'ValidationFailedError',
    'ArchiveCloseError',
]
