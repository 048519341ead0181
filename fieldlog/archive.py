"""
fieldlog/archive.py – store-only ZIP writer built from explicit struct layouts.

Layout of the output, in this exact order:

    [local file header + name + data] * N
    [central directory header + name] * N
    end of central directory record

All multi-byte fields are little-endian. Entries are stored uncompressed
(method 0) with a zero DOS timestamp so the output depends only on the
input entries. No Zip64 extension: every size and offset must fit in 32
bits, every name length and the entry count in 16 bits.
"""
from __future__ import annotations

import binascii
import logging
import struct
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ArchiveLimitError
from .models import ArchiveEntry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Record layouts
# ---------------------------------------------------------------------------
LOCAL_FILE_HEADER_SIG = 0x04034B50
CENTRAL_DIR_HEADER_SIG = 0x02014B50
END_OF_CENTRAL_DIR_SIG = 0x06054B50

# signature, version needed, flags, method, mod time, mod date,
# crc-32, compressed size, uncompressed size, name length, extra length
LOCAL_FILE_HEADER = struct.Struct("<IHHHHHIIIHH")

# signature, version made by, version needed, flags, method, mod time,
# mod date, crc-32, compressed size, uncompressed size, name length,
# extra length, comment length, disk number start, internal attributes,
# external attributes, local header offset
CENTRAL_DIR_HEADER = struct.Struct("<IHHHHHHIIIHHHHHII")

# signature, this disk, central directory disk, entries on this disk,
# total entries, central directory size, central directory offset,
# comment length
END_OF_CENTRAL_DIR = struct.Struct("<IHHHHIIH")

assert LOCAL_FILE_HEADER.size == 30
assert CENTRAL_DIR_HEADER.size == 46
assert END_OF_CENTRAL_DIR.size == 22

VERSION = 20            # 2.0, MS-DOS host
METHOD_STORED = 0
FLAG_UTF8_NAME = 0x0800

MAX_NAME_LENGTH = 0xFFFF
# 0xFFFF entries / 0xFFFFFFFF bytes are read as Zip64 markers.
MAX_ENTRIES = 0xFFFF - 1
MAX_U32 = 0xFFFFFFFF - 1


@dataclass
class _CentralEntry:
    name: bytes
    flags: int
    crc: int
    size: int
    offset: int


def _encode_name(name: str) -> tuple[bytes, int]:
    if not name or name.startswith("/") or "\\" in name:
        raise ArchiveLimitError(f"invalid archive entry name: {name!r}")
    raw = name.encode("utf-8")
    if len(raw) > MAX_NAME_LENGTH:
        raise ArchiveLimitError(f"archive entry name too long ({len(raw)} bytes): {name[:40]!r}…")
    flags = 0 if name.isascii() else FLAG_UTF8_NAME
    return raw, flags


def _check_u32(value: int, what: str) -> None:
    if value > MAX_U32:
        raise ArchiveLimitError(f"{what} exceeds the 4 GiB ZIP limit ({value} bytes)")


def build_archive(
    entries: Iterable[ArchiveEntry | tuple[str, bytes]],
    *,
    compute_crc: bool | None = None,
) -> bytes:
    """Return ZIP bytes containing *entries* in the given order.

    With ``compute_crc=False`` every CRC-32 field is written as zero, which
    lenient extractors accept and verifying readers (including Python's
    ``zipfile``) reject. ``None`` uses ``config.ZIP_COMPUTE_CRC``.
    """
    if compute_crc is None:
        from .config import ZIP_COMPUTE_CRC
        compute_crc = ZIP_COMPUTE_CRC

    chunks: list[bytes] = []
    central: list[_CentralEntry] = []
    offset = 0

    for name, data in entries:
        raw_name, flags = _encode_name(name)
        size = len(data)
        _check_u32(size, f"entry {name!r}")
        _check_u32(offset, "local header offset")
        crc = binascii.crc32(data) & 0xFFFFFFFF if compute_crc else 0

        header = LOCAL_FILE_HEADER.pack(
            LOCAL_FILE_HEADER_SIG,
            VERSION,
            flags,
            METHOD_STORED,
            0,              # mod time
            0,              # mod date
            crc,
            size,           # compressed == uncompressed for stored entries
            size,
            len(raw_name),
            0,              # extra length
        )
        chunks += [header, raw_name, bytes(data)]
        central.append(_CentralEntry(raw_name, flags, crc, size, offset))
        offset += len(header) + len(raw_name) + size

    if len(central) > MAX_ENTRIES:
        raise ArchiveLimitError(f"too many archive entries ({len(central)})")

    cd_offset = offset
    _check_u32(cd_offset, "central directory offset")
    cd_size = 0
    for ent in central:
        header = CENTRAL_DIR_HEADER.pack(
            CENTRAL_DIR_HEADER_SIG,
            VERSION,        # version made by
            VERSION,        # version needed
            ent.flags,
            METHOD_STORED,
            0,
            0,
            ent.crc,
            ent.size,
            ent.size,
            len(ent.name),
            0,              # extra length
            0,              # comment length
            0,              # disk number start
            0,              # internal attributes
            0,              # external attributes
            ent.offset,
        )
        chunks += [header, ent.name]
        cd_size += len(header) + len(ent.name)

    _check_u32(cd_offset + cd_size, "archive")
    chunks.append(
        END_OF_CENTRAL_DIR.pack(
            END_OF_CENTRAL_DIR_SIG,
            0,
            0,
            len(central),
            len(central),
            cd_size,
            cd_offset,
            0,
        )
    )
    logger.debug(
        "Built archive: %d entries, %d bytes",
        len(central), cd_offset + cd_size + END_OF_CENTRAL_DIR.size,
    )
    return b"".join(chunks)
