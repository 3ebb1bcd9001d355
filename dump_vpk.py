#!/usr/bin/env python3
"""
Print a summary of a VPK directory file and list its entries.

Usage:
    python3 dump_vpk.py                          # uses config.VPK_PATH
    python3 dump_vpk.py pak01_dir.vpk --ext txt  # only .txt entries
    python3 dump_vpk.py pak01_dir.vpk --check scripts/items/items_game.txt
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from vpkdir import VPKDirectory, VPKError

# Import config
try:
    from config import VPK_PATH, VALIDATE_CRC
except ImportError:
    VPK_PATH = os.environ.get("VPK_PATH")
    VALIDATE_CRC = os.environ.get("VPK_VALIDATE_CRC", "0") == "1"


def dump_entries(vpk, extension=None):
    entries = vpk.get_entries_by_extension(extension) if extension else list(vpk.entries.values())
    for e in sorted(entries, key=lambda e: e.path):
        where = "dir" if e.is_self_contained else f"{e.archive_index:03d}"
        print(f"{e.crc:08x} {e.size:>10} {where:>4} {e.path}")
    print(f"\n{len(entries)} entries")


def check_file(vpk, path, validate):
    data = vpk.read_file(path, validate=validate)
    status = "CRC ok" if validate else "not validated"
    print(f"{path}: {len(data)} bytes ({status})")


def main():
    parser = argparse.ArgumentParser(description="Dump VPK directory contents")
    parser.add_argument("vpk", nargs="?", default=VPK_PATH, help="Path to *_dir.vpk")
    parser.add_argument("--ext", help="Only list entries with this extension")
    parser.add_argument("--check", metavar="PATH", help="Read one file and report its size")
    parser.add_argument("--validate", action="store_true", default=VALIDATE_CRC,
                        help="Check CRC-32 when reading with --check")
    args = parser.parse_args()

    if not args.vpk:
        parser.error("no VPK path given and VPK_PATH is not configured")
    if not os.path.exists(args.vpk):
        print(f"File not found: {args.vpk}")
        return 1

    try:
        with VPKDirectory.from_file(args.vpk) as vpk:
            vpk.dump_info()
            print()
            if args.check:
                check_file(vpk, args.check, args.validate)
            else:
                dump_entries(vpk, args.ext)
    except VPKError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
