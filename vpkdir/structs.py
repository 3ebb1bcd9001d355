"""
VPK directory file record layouts.

Fixed-size records of the directory file as construct Structs. The
variable-length tree strings are read with ByteCursor instead.
"""

from construct import *

SIGNATURE = 0x55AA1234

# =============================================================================
# HEADER
# =============================================================================

VPKHeaderBase = Struct(
    "signature" / Int32ul,
    "version" / Int32ul,
    "tree_size" / Int32ul,
)

# Follows the base header in version 2 directories
VPKHeaderV2Extension = Struct(
    "file_data_section_size" / Int32ul,
    "archive_md5_section_size" / Int32ul,
    "other_md5_section_size" / Int32ul,   # always 48
    "signature_section_size" / Int32ul,   # 0 or 296
)

HEADER_SIZE_V1 = VPKHeaderBase.sizeof()                                  # 12
HEADER_SIZE_V2 = VPKHeaderBase.sizeof() + VPKHeaderV2Extension.sizeof()  # 28

OTHER_MD5_SECTION_SIZE = 48

# =============================================================================
# DIRECTORY ENTRY
# =============================================================================

ENTRY_TERMINATOR = 0xFFFF

VPKEntryRecord = Struct(
    "crc" / Int32ul,
    "preload_bytes" / Int16ul,
    "archive_index" / Int16ul,      # 0x7FFF = directory file itself
    "entry_offset" / Int32ul,
    "entry_length" / Int32ul,
    "terminator" / Int16ul,         # ENTRY_TERMINATOR
)

ENTRY_RECORD_SIZE = VPKEntryRecord.sizeof()  # 18
