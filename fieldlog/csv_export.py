"""
fieldlog/csv_export.py – deterministic CSV encoding of records.

Output is UTF-8 with a byte-order mark and CRLF after every row (header
included). Rows are sorted oldest first regardless of store order.
"""
from __future__ import annotations

from collections.abc import Iterable

from .config import COORD_DECIMALS, CSV_HEADER
from .models import Record

BOM = b"\xef\xbb\xbf"
LINE_TERMINATOR = "\r\n"

# Every character str.splitlines() breaks on.
LINE_BREAKS = frozenset("\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029")


def sort_for_export(records: Iterable[Record]) -> list[Record]:
    """Oldest first; ties broken by id so the order is total."""
    return sorted(records, key=lambda r: (r.timestamp, r.id))


def _row(rec: Record) -> list[str]:
    return [
        rec.id,
        rec.timestamp,
        f"{rec.latitude:.{COORD_DECIMALS}f}",
        f"{rec.longitude:.{COORD_DECIMALS}f}",
        "" if rec.accuracy is None else str(rec.accuracy),
        rec.note or "",
        rec.photo_name or "",
    ]


def escape_field(value: str) -> str:
    """Quote *value*, doubling inner quotes, iff it holds a comma, quote or line break."""
    if "," in value or '"' in value or not LINE_BREAKS.isdisjoint(value):
        return '"' + value.replace('"', '""') + '"'
    return value


def encode_csv(records: Iterable[Record]) -> bytes:
    """Return CSV bytes for *records*."""
    lines = [",".join(escape_field(f) for f in CSV_HEADER)]
    for rec in sort_for_export(records):
        lines.append(",".join(escape_field(f) for f in _row(rec)))
    text = "".join(line + LINE_TERMINATOR for line in lines)
    return BOM + text.encode("utf-8")
