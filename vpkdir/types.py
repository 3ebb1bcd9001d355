"""
Shared data types for VPK parsing.
"""

from dataclasses import dataclass
from typing import Optional

# Archive index meaning "content lives in the directory file itself"
SELF_ARCHIVE_INDEX = 0x7FFF


@dataclass
class VPKEntry:
    """One virtual file in a VPK directory tree."""
    extension: str
    folder: str
    file_name: str
    crc: int = 0
    preload_bytes: int = 0
    archive_index: int = 0
    entry_offset: int = 0
    entry_length: int = 0
    preload: Optional[bytes] = None

    @property
    def path(self) -> str:
        """Virtual path, ``folder/file_name.extension``."""
        return f"{self.folder}/{self.file_name}.{self.extension}"

    @property
    def size(self) -> int:
        """Total content size (preload + stored range)."""
        return self.preload_bytes + self.entry_length

    @property
    def is_self_contained(self) -> bool:
        return self.archive_index == SELF_ARCHIVE_INDEX
