"""
VPK Directory Reader.

Parses VPK directory files (``*_dir.vpk``, versions 1 and 2) and extracts
file content from the preload area, the directory file's own data region,
or the numbered sibling archives (``*_000.vpk``, ``*_001.vpk``, ...).
"""

import logging
import os
import re
import threading
import zlib
from typing import BinaryIO, Dict, Iterator, List, Optional

from .errors import (
    ArchiveCloseError,
    ArchivePathError,
    BadEntryTerminatorError,
    BadSignatureError,
    EntryNotFoundError,
    InvalidHeaderError,
    ShortReadError,
    UnsupportedVersionError,
    ValidationFailedError,
)
from .reader import ByteCursor
from .structs import (
    ENTRY_RECORD_SIZE,
    ENTRY_TERMINATOR,
    HEADER_SIZE_V1,
    HEADER_SIZE_V2,
    OTHER_MD5_SECTION_SIZE,
    SIGNATURE,
    VPKEntryRecord,
    VPKHeaderV2Extension,
)
from .types import VPKEntry

logger = logging.getLogger(__name__)

_DIR_SUFFIX = re.compile(r"_dir\.vpk$")


class VPKDirectory:
    """Parser for VPK directory files.

    Parses the header and directory tree and provides access to:
    - entries: virtual path => VPKEntry
    - data: directory file content after header and tree
    - read_file(): assembled content of a virtual file

    Handles to sibling archives are opened lazily and cached per archive
    index until ``close_all`` (or leaving a ``with`` block).
    """

    SIGNATURE = SIGNATURE

    def __init__(self, data: bytes, filepath: Optional[str] = None):
        """Parse a VPK directory file already loaded into memory.

        Args:
            data: Full content of the directory file
            filepath: Path of the directory file, needed to locate
                sibling archives
        """
        self.filepath = os.fspath(filepath) if filepath is not None else None
        self.reader = ByteCursor(data)
        self.entries: Dict[str, VPKEntry] = {}
        self.version = 0
        self.tree_size = 0
        self.header_size = 0
        self.data_offset = 0

        # Version 2 only
        self.file_data_section_size = 0
        self.archive_md5_section_size = 0
        self.other_md5_section_size = 0
        self.signature_section_size = 0

        self._handles: Dict[int, BinaryIO] = {}
        self._lock = threading.Lock()

        self._parse_header()
        self._parse_tree()
        self.data = data[self.data_offset:]

        logger.debug(
            "Parsed VPK v%d directory %s: %d entries, %d residual bytes",
            self.version, self.filepath or "<memory>", len(self.entries), len(self.data),
        )

    @classmethod
    def parse(cls, data: bytes, filepath: Optional[str] = None) -> "VPKDirectory":
        return cls(data, filepath)

    @classmethod
    def from_file(cls, filepath: str) -> "VPKDirectory":
        """Load and parse a VPK directory file.

        Args:
            filepath: Path to the ``*_dir.vpk`` file
        """
        with open(filepath, "rb") as f:
            data = f.read()
        return cls(data, filepath)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _parse_header(self):
        """Parse the fixed header and compute where residual data starts."""
        r = self.reader

        signature = r.read_uint32()
        if signature != self.SIGNATURE:
            raise BadSignatureError(f"Invalid VPK signature: {hex(signature)}")

        version = r.read_uint32()
        if version not in (1, 2):
            raise UnsupportedVersionError(f"Unsupported VPK version: {version}")
        self.version = version

        self.tree_size = r.read_uint32()

        if version == 2:
            self.header_size = HEADER_SIZE_V2
            ext = VPKHeaderV2Extension.parse(r.read_bytes(VPKHeaderV2Extension.sizeof()))
            self.file_data_section_size = ext.file_data_section_size
            self.archive_md5_section_size = ext.archive_md5_section_size
            self.other_md5_section_size = ext.other_md5_section_size
            self.signature_section_size = ext.signature_section_size
            if self.other_md5_section_size != OTHER_MD5_SECTION_SIZE:
                raise InvalidHeaderError(
                    f"Invalid OtherMD5SectionSize: {self.other_md5_section_size} "
                    f"(expected {OTHER_MD5_SECTION_SIZE})"
                )
        else:
            self.header_size = HEADER_SIZE_V1

        self.data_offset = self.header_size + self.tree_size

    def _parse_tree(self):
        """Parse the extension => folder => file name tree."""
        r = self.reader

        while True:
            extension = r.read_cstring()
            if not extension:
                break
            while True:
                folder = r.read_cstring()
                if not folder:
                    break
                while True:
                    file_name = r.read_cstring()
                    if not file_name:
                        break
                    entry = self._parse_entry(extension, folder, file_name)
                    # Later duplicates replace earlier ones
                    self.entries[entry.path] = entry

    def _parse_entry(self, extension: str, folder: str, file_name: str) -> VPKEntry:
        r = self.reader
        record = VPKEntryRecord.parse(r.read_bytes(ENTRY_RECORD_SIZE))

        entry = VPKEntry(
            extension=extension,
            folder=folder,
            file_name=file_name,
            crc=record.crc,
            preload_bytes=record.preload_bytes,
            archive_index=record.archive_index,
            entry_offset=record.entry_offset,
            entry_length=record.entry_length,
        )
        if record.terminator != ENTRY_TERMINATOR:
            raise BadEntryTerminatorError(
                f"Bad entry terminator {hex(record.terminator)} for {entry.path}"
            )
        if entry.preload_bytes:
            entry.preload = r.read_bytes(entry.preload_bytes)
        return entry

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def __contains__(self, path: str) -> bool:
        return self._normalize(path) in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    @staticmethod
    def _normalize(path: str) -> str:
        return path.replace("\\", "/")

    def get_entry(self, path: str) -> VPKEntry:
        """Get the entry for a virtual path.

        Args:
            path: Path inside the VPK (e.g. scripts/items/items_game.txt),
                either separator style

        Raises:
            EntryNotFoundError: path is not in the directory
        """
        path = self._normalize(path)
        try:
            return self.entries[path]
        except KeyError:
            raise EntryNotFoundError(f"File {path} not found") from None

    def get_entries_by_extension(self, extension: str) -> List[VPKEntry]:
        return [e for e in self.entries.values() if e.extension == extension]

    def archive_indices(self) -> List[int]:
        """Sorted indices of the sibling archives referenced by entries."""
        return sorted({
            e.archive_index for e in self.entries.values()
            if not e.is_self_contained and e.entry_length > 0
        })

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    def archive_path(self, archive_index: int) -> str:
        """Path of the sibling archive holding ``archive_index``.

        ``foo_dir.vpk`` => ``foo_003.vpk`` for index 3.
        """
        if self.filepath is None:
            raise ArchivePathError("Directory was parsed without a file path")
        path, count = _DIR_SUFFIX.subn(f"_{archive_index:03d}.vpk", self.filepath)
        if not count:
            raise ArchivePathError(f"Directory path does not end in _dir.vpk: {self.filepath}")
        return path

    def read_file(self, path: str, validate: bool = False) -> bytes:
        """Read the full content of a virtual file.

        Args:
            path: File path inside the VPK (e.g. scripts/items/items_game.txt)
            validate: Check the CRC-32 of the result against the entry.
                Applies to every storage branch (preload, directory data
                and sibling archives)

        Returns:
            Preload bytes followed by the stored range

        Raises:
            EntryNotFoundError: path is not in the directory
            ShortReadError: storage holds less than the entry declares
            ValidationFailedError: CRC-32 mismatch (only with validate)
        """
        entry = self.get_entry(path)

        buff = bytearray(entry.size)
        if entry.preload:
            buff[:entry.preload_bytes] = entry.preload

        if entry.entry_length > 0:
            if entry.is_self_contained:
                start = entry.entry_offset
                chunk = self.data[start:start + entry.entry_length]
                source = self.filepath or "<directory data>"
            else:
                chunk = self._read_archive(
                    entry.archive_index, entry.entry_offset, entry.entry_length
                )
                source = self.archive_path(entry.archive_index)
            if len(chunk) != entry.entry_length:
                raise ShortReadError(
                    f"Cannot read {entry.path} from {source}: "
                    f"got {len(chunk)} of {entry.entry_length} bytes"
                )
            buff[entry.preload_bytes:] = chunk

        if validate:
            crc = zlib.crc32(buff)
            if crc != entry.crc:
                raise ValidationFailedError(
                    f"Validation failed for {entry.path}: "
                    f"CRC {crc:08x} != expected {entry.crc:08x}"
                )

        return bytes(buff)

    def _get_handle(self, archive_index: int) -> BinaryIO:
        """Return the cached handle for an archive, opening it on first use.

        Caller must hold ``_lock``.
        """
        handle = self._handles.get(archive_index)
        if handle is None:
            archive_path = self.archive_path(archive_index)
            handle = open(archive_path, "rb")
            self._handles[archive_index] = handle
            logger.debug("Opened archive %d: %s", archive_index, archive_path)
        return handle

    def _read_archive(self, archive_index: int, offset: int, length: int) -> bytes:
        with self._lock:
            handle = self._get_handle(archive_index)
            handle.seek(offset)
            return handle.read(length)

    def open_archives(self) -> List[int]:
        """Sorted indices of archives with a cached open handle."""
        with self._lock:
            return sorted(self._handles)

    def close_all(self):
        """Close all cached sub-archive handles.

        Raises:
            ArchiveCloseError: one or more handles failed to close (all
                are still attempted)
        """
        with self._lock:
            handles = dict(self._handles)
            self._handles.clear()

        errors = []
        for archive_index, handle in handles.items():
            try:
                handle.close()
            except Exception as e:
                errors.append(e)
            else:
                logger.debug("Closed archive %d", archive_index)
        if errors:
            raise ArchiveCloseError(errors)

    def __enter__(self) -> "VPKDirectory":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close_all()

    def dump_info(self):
        """Print directory summary information."""
        print(f"VPK: {self.filepath or '<memory>'}")
        print(f"  Version: {self.version}")
        print(f"  Tree size: {self.tree_size}")
        print(f"  Data offset: {self.data_offset}")
        if self.version == 2:
            print(f"  File data section: {self.file_data_section_size}")
            print(f"  Archive MD5 section: {self.archive_md5_section_size}")
            print(f"  Other MD5 section: {self.other_md5_section_size}")
            print(f"  Signature section: {self.signature_section_size}")
        print(f"  Entries: {len(self.entries)}")
        print(f"  Archives: {self.archive_indices()}")
