"""
fieldlog/export.py – build downloadable CSV / ZIP artifacts from the record store.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import date

from .archive import build_archive
from .config import CSV_FILENAME_IN_ARCHIVE, EXPORT_PREFIX, PHOTOS_DIR_IN_ARCHIVE
from .csv_export import encode_csv, sort_for_export
from .errors import EmptyDatasetError, ExportInProgressError
from .models import ArchiveEntry, Record
from .store import RecordStore

logger = logging.getLogger(__name__)

EXPORT_KINDS = ("csv", "zip")
MIME_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "zip": "application/zip",
}

# Non-reentrant: a second export while one is running fails fast.
_export_lock = threading.Lock()


def _check_kind(kind: str) -> None:
    if kind not in EXPORT_KINDS:
        raise ValueError(f"Unknown export kind: {kind!r}. Available: {list(EXPORT_KINDS)}")


def export_filename(kind: str, today: date | None = None) -> str:
    """e.g. ``fieldlog_2024-05-01.zip``"""
    _check_kind(kind)
    today = today or date.today()
    return f"{EXPORT_PREFIX}_{today.isoformat()}.{kind}"


def build_entries(records: Iterable[Record]) -> list[ArchiveEntry]:
    """CSV first, then one photo per photographed record in CSV row order."""
    ordered = sort_for_export(records)
    entries = [ArchiveEntry(CSV_FILENAME_IN_ARCHIVE, encode_csv(ordered))]
    for rec in ordered:
        if rec.has_photo:
            entries.append(ArchiveEntry(f"{PHOTOS_DIR_IN_ARCHIVE}/{rec.photo_name}", rec.photo_bytes))
    return entries


def export_records(records: list[Record], kind: str, *, compute_crc: bool | None = None) -> bytes:
    """Encode an already-scanned record snapshot as a *kind* artifact."""
    _check_kind(kind)
    if not records:
        raise EmptyDatasetError("no records to export")
    if kind == "csv":
        return encode_csv(records)
    return build_archive(build_entries(records), compute_crc=compute_crc)


def export_all(kind: str, store: RecordStore | None = None, *, compute_crc: bool | None = None) -> bytes:
    """Return the full dataset as CSV or ZIP bytes.

    Raises EmptyDatasetError when the store holds no records and
    ExportInProgressError when another export is still running.
    """
    _check_kind(kind)
    if not _export_lock.acquire(blocking=False):
        raise ExportInProgressError("an export is already in progress")
    try:
        store = store or RecordStore()
        records = store.scan_all()
        data = export_records(records, kind, compute_crc=compute_crc)
        logger.info("Exported %d records as %s (%d bytes)", len(records), kind, len(data))
        return data
    finally:
        _export_lock.release()
