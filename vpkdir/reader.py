"""
Byte cursor for VPK directory files.

Provides low-level reading over an in-memory buffer: little-endian
integers, null-terminated strings, raw byte ranges and seeking.
"""

import struct
from enum import Enum
from typing import Optional

from .errors import InsufficientDataError, InvalidOffsetError, OutOfBoundsError


class SeekMode(Enum):
    ABSOLUTE = 0
    RELATIVE = 1


class ByteCursor:
    """Sequential/random-access reader over an immutable byte buffer.

    Reads without an explicit offset happen at ``pos`` and advance it by
    the number of bytes consumed. Reads with an offset leave ``pos`` alone.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def _read_struct(self, fmt: str, width: int, offset: Optional[int]) -> int:
        start = self.pos if offset is None else offset
        if start < 0 or start + width > len(self.data):
            raise OutOfBoundsError(
                f"Cannot read {width} bytes at offset {start} (buffer is {len(self.data)} bytes)"
            )
        if offset is None:
            self.pos += width
        return struct.unpack_from(fmt, self.data, start)[0]

    def read_uint32(self, offset: Optional[int] = None) -> int:
        return self._read_struct("<I", 4, offset)

    def read_uint16(self, offset: Optional[int] = None) -> int:
        return self._read_struct("<H", 2, offset)

    def read_cstring(self, offset: Optional[int] = None) -> str:
        """Read a null-terminated ASCII string (may be empty).

        The cursor form always moves ``pos`` one byte past the last scanned
        byte, even when the scan stopped at the buffer end instead of a
        terminator. ``pos`` can therefore end up at ``len(data) + 1``.
        """
        start = self.pos if offset is None else offset
        data = self.data
        length = len(data)
        end = start
        while end < length and data[end]:
            end += 1
        if offset is None:
            self.pos = end + 1
        return bytes(data[start:end]).decode("ascii", errors="replace")

    def read_bytes(self, count: int) -> bytes:
        """Read raw bytes."""
        if count < 0 or self.pos + count > len(self.data):
            raise InsufficientDataError(
                f"Wanted {count} bytes at offset {self.pos}, only {self.remaining()} left"
            )
        start = self.pos
        self.pos += count
        return self.data[start:self.pos]

    def seek(self, offset: Optional[int] = None, mode: SeekMode = SeekMode.ABSOLUTE) -> int:
        """Move the cursor and return the new position.

        The target must satisfy ``0 < target <= len(data)``; position 0 is
        only reachable through ``reset``.
        """
        if offset is None:
            return self.pos
        target = offset if mode is SeekMode.ABSOLUTE else self.pos + offset
        if not 0 < target <= len(self.data):
            raise InvalidOffsetError(f"Invalid offset {target} (buffer is {len(self.data)} bytes)")
        self.pos = target
        return self.pos

    def tell(self) -> int:
        """Return current position."""
        return self.pos

    def remaining(self) -> int:
        """Return remaining bytes."""
        return max(len(self.data) - self.pos, 0)

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def reset(self):
        self.pos = 0

    def iter_bytes(self) -> "ByteIterator":
        """Iterate the remaining bytes, consuming the cursor as it goes."""
        return ByteIterator(self)


class ByteIterator:
    """Single-pass iterator over the bytes left in a ByteCursor.

    Shares the cursor's position: every yielded byte advances ``pos``, and
    other reads on the same cursor move where iteration resumes. Once it
    reaches the end it stays exhausted.

    The cursor moves when a byte is yielded, so after ``next()`` returns
    ``data[i]`` the cursor already sits at ``i + 1``.
    """

    def __init__(self, cursor: ByteCursor):
        self.cursor = cursor
        self.exhausted = False

    def __iter__(self):
        return self

    def __next__(self) -> int:
        cursor = self.cursor
        if self.exhausted or cursor.pos >= len(cursor.data):
            self.exhausted = True
            raise StopIteration
        value = cursor.data[cursor.pos]
        cursor.pos += 1
        return value
