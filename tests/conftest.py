import zlib

import pytest

from vpkdir.structs import (
    ENTRY_TERMINATOR,
    SIGNATURE,
    VPKEntryRecord,
    VPKHeaderBase,
    VPKHeaderV2Extension,
)
from vpkdir.types import SELF_ARCHIVE_INDEX


def make_file(path, content=b"", preload=b"", archive_index=SELF_ARCHIVE_INDEX,
              entry_offset=0, crc=None, terminator=ENTRY_TERMINATOR, entry_length=None):
    """Describe one tree entry. ``path`` is folder/name.ext."""
    folder, _, name = path.rpartition("/")
    file_name, _, extension = name.rpartition(".")
    return {
        "extension": extension,
        "folder": folder,
        "file_name": file_name,
        "preload": preload,
        "crc": zlib.crc32(preload + content) if crc is None else crc,
        "archive_index": archive_index,
        "entry_offset": entry_offset,
        "entry_length": len(content) if entry_length is None else entry_length,
        "terminator": terminator,
    }


def build_tree(files) -> bytes:
    tree = {}
    for f in files:
        tree.setdefault(f["extension"], {}).setdefault(f["folder"], []).append(f)

    out = bytearray()
    for extension, folders in tree.items():
        out += extension.encode("ascii") + b"\0"
        for folder, names in folders.items():
            out += folder.encode("ascii") + b"\0"
            for f in names:
                out += f["file_name"].encode("ascii") + b"\0"
                out += VPKEntryRecord.build(dict(
                    crc=f["crc"],
                    preload_bytes=len(f["preload"]),
                    archive_index=f["archive_index"],
                    entry_offset=f["entry_offset"],
                    entry_length=f["entry_length"],
                    terminator=f["terminator"],
                ))
                out += f["preload"]
            out += b"\0"
        out += b"\0"
    out += b"\0"
    return bytes(out)


def build_vpk(files=(), data=b"", version=1, other_md5_section_size=48,
              archive_md5_section_size=0, signature_section_size=0) -> bytes:
    tree = build_tree(files)
    header = VPKHeaderBase.build(dict(signature=SIGNATURE, version=version, tree_size=len(tree)))
    if version == 2:
        header += VPKHeaderV2Extension.build(dict(
            file_data_section_size=len(data),
            archive_md5_section_size=archive_md5_section_size,
            other_md5_section_size=other_md5_section_size,
            signature_section_size=signature_section_size,
        ))
    return header + tree + data


@pytest.fixture
def vpk_file():
    return make_file


@pytest.fixture
def vpk_bytes():
    return build_vpk


@pytest.fixture
def vpk_on_disk(tmp_path):
    """Write a directory file plus numbered archives into tmp_path.

    Returns a function ``(files, data=b"", archives=None) -> dir path`` where
    ``archives`` maps archive index to archive content.
    """
    def write(files, data=b"", archives=None, name="pak01"):
        dir_path = tmp_path / f"{name}_dir.vpk"
        dir_path.write_bytes(build_vpk(files, data))
        for index, content in (archives or {}).items():
            (tmp_path / f"{name}_{index:03d}.vpk").write_bytes(content)
        return str(dir_path)
    return write
