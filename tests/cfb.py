"""Minimal Compound File Binary (v3) writer for ``.msg`` test fixtures.

Builds a single-FAT-sector file: enough for a few dozen entries and a few
kilobytes of stream data.  Streams under 4096 bytes go to the mini stream,
larger ones to regular sectors, as [MS-CFB] requires.
"""

from __future__ import annotations

import struct
from collections.abc import Mapping
from dataclasses import dataclass, field

MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

SECTOR_SIZE = 512
MINI_SECTOR_SIZE = 64
MINI_STREAM_CUTOFF = 4096

FREESECT = 0xFFFFFFFF
ENDOFCHAIN = 0xFFFFFFFE
FATSECT = 0xFFFFFFFD
NOSTREAM = 0xFFFFFFFF

STGTY_EMPTY = 0
STGTY_STORAGE = 1
STGTY_STREAM = 2
STGTY_ROOT = 5

_DIRENTRY = struct.Struct("<64sHBBIII16sIQQIII")
_HEADER = struct.Struct("<8s16sHHHHHHLLLLLLLLLL")
_ENTRIES_PER_SECTOR = SECTOR_SIZE // _DIRENTRY.size
_IDS_PER_SECTOR = SECTOR_SIZE // 4

Tree = Mapping[str, "bytes | Tree"]


@dataclass
class _Entry:
    name: str
    entry_type: int
    data: bytes = b""
    children: list[int] = field(default_factory=list)
    left: int = NOSTREAM
    right: int = NOSTREAM
    child: int = NOSTREAM
    start: int = ENDOFCHAIN
    size: int = 0


def _ceil_div(value: int, divisor: int) -> int:
    return -(-value // divisor)


def _pad(data: bytes, size: int) -> bytes:
    return data + b"\x00" * (-len(data) % size)


def _ids(values: list[int], count: int) -> bytes:
    values = values + [FREESECT] * (count - len(values))
    return struct.pack(f"<{count}I", *values)


def build_compound_file(tree: Tree) -> bytes:
    """Serialise *tree* (name → bytes for streams, name → mapping for
    storages) into compound file bytes readable by olefile."""
    entries = [_Entry("Root Entry", STGTY_ROOT)]

    def add(parent: int, name: str, value: bytes | Tree) -> None:
        index = len(entries)
        if isinstance(value, Mapping):
            entries.append(_Entry(name, STGTY_STORAGE))
            for child_name, child_value in value.items():
                add(index, child_name, child_value)
        else:
            entries.append(_Entry(name, STGTY_STREAM, data=bytes(value)))
        entries[parent].children.append(index)

    for name, value in tree.items():
        add(0, name, value)

    # Children are linked as a right-leaning chain; readers only need the
    # links to reach every sibling once.
    for entry in entries:
        if entry.children:
            entry.child = entry.children[0]
            for current, following in zip(entry.children, entry.children[1:]):
                entries[current].right = following

    ministream = bytearray()
    minifat: list[int] = []
    large: list[_Entry] = []
    for entry in entries:
        if entry.entry_type != STGTY_STREAM or not entry.data:
            continue
        entry.size = len(entry.data)
        if entry.size >= MINI_STREAM_CUTOFF:
            large.append(entry)
            continue
        count = _ceil_div(entry.size, MINI_SECTOR_SIZE)
        entry.start = len(minifat)
        minifat.extend(range(entry.start + 1, entry.start + count))
        minifat.append(ENDOFCHAIN)
        ministream += _pad(entry.data, MINI_SECTOR_SIZE)

    fat = [FATSECT]

    def chain(count: int) -> int:
        if count == 0:
            return ENDOFCHAIN
        start = len(fat)
        fat.extend(range(start + 1, start + count))
        fat.append(ENDOFCHAIN)
        return start

    dir_sectors = _ceil_div(len(entries), _ENTRIES_PER_SECTOR)
    minifat_sectors = _ceil_div(len(minifat), _IDS_PER_SECTOR)
    ministream_sectors = _ceil_div(len(ministream), SECTOR_SIZE)

    first_dir = chain(dir_sectors)
    first_minifat = chain(minifat_sectors)
    root = entries[0]
    root.start = chain(ministream_sectors)
    root.size = len(ministream)
    for entry in large:
        entry.start = chain(_ceil_div(entry.size, SECTOR_SIZE))

    if len(fat) > _IDS_PER_SECTOR:
        raise ValueError("Tree too large for a single FAT sector")

    directory = bytearray()
    for entry in entries:
        encoded = entry.name.encode("utf-16-le")
        directory += _DIRENTRY.pack(
            encoded.ljust(64, b"\x00"),
            len(encoded) + 2,
            entry.entry_type,
            1,
            entry.left,
            entry.right,
            entry.child,
            b"\x00" * 16,
            0,
            0,
            0,
            entry.start if entry.entry_type != STGTY_STORAGE else 0,
            entry.size,
            0,
        )
    for _ in range(dir_sectors * _ENTRIES_PER_SECTOR - len(entries)):
        directory += _DIRENTRY.pack(
            b"", 0, STGTY_EMPTY, 0, NOSTREAM, NOSTREAM, NOSTREAM,
            b"\x00" * 16, 0, 0, 0, 0, 0, 0,
        )

    header = _HEADER.pack(
        MAGIC,
        b"\x00" * 16,
        0x003E,
        3,
        0xFFFE,
        9,
        6,
        0,
        0,
        0,
        1,
        first_dir,
        0,
        MINI_STREAM_CUTOFF,
        first_minifat,
        minifat_sectors,
        ENDOFCHAIN,
        0,
    ) + _ids([0], 109)

    body = bytearray(_ids(fat, _IDS_PER_SECTOR))
    body += directory
    body += _ids(minifat, minifat_sectors * _IDS_PER_SECTOR)
    body += _pad(bytes(ministream), SECTOR_SIZE)
    for entry in large:
        body += _pad(entry.data, SECTOR_SIZE)

    return header + bytes(body)
