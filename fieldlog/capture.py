"""
fieldlog/capture.py – turn a pending capture into a persisted record.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone

from .config import COORD_DECIMALS, DEFAULT_PHOTO_EXTENSION, PHOTO_EXTENSIONS, REQUIRE_PHOTO
from .errors import UnsupportedCaptureInput
from .models import PendingCapture, Record
from .store import RecordStore

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_ID_TIME_FORMAT = "%Y%m%dT%H%M%SZ"


def _as_utc(ts: datetime | None) -> datetime:
    if ts is None:
        return datetime.now(timezone.utc)
    if ts.tzinfo is None:
        # Naive sensor timestamps are taken as UTC.
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    return _as_utc(ts).strftime(TIMESTAMP_FORMAT)


def make_record_id(ts: datetime) -> str:
    """Capture time plus a random suffix, unique even within one second."""
    return f"{_as_utc(ts).strftime(_ID_TIME_FORMAT)}-{secrets.token_hex(3)}"


def photo_extension(mime: str | None) -> str:
    if not mime:
        return DEFAULT_PHOTO_EXTENSION
    return PHOTO_EXTENSIONS.get(mime.split(";")[0].strip().lower(), DEFAULT_PHOTO_EXTENSION)


def validate(pending: PendingCapture, *, require_photo: bool = REQUIRE_PHOTO) -> None:
    """Raise UnsupportedCaptureInput if *pending* cannot become a record."""
    if pending.fix is None:
        raise UnsupportedCaptureInput("no location fix: acquire GPS before saving")
    fix = pending.fix
    if not (-90.0 <= fix.latitude <= 90.0) or not (-180.0 <= fix.longitude <= 180.0):
        raise UnsupportedCaptureInput(
            f"location fix out of range: lat={fix.latitude}, lon={fix.longitude}"
        )
    if pending.photo_bytes is None:
        if require_photo:
            raise UnsupportedCaptureInput("no photo: take or pick a photo before saving")
    elif len(pending.photo_bytes) == 0:
        raise UnsupportedCaptureInput("photo is empty")


def build_record(pending: PendingCapture, *, require_photo: bool = REQUIRE_PHOTO) -> Record:
    validate(pending, require_photo=require_photo)
    fix = pending.fix
    ts = _as_utc(fix.timestamp)
    record_id = make_record_id(ts)

    photo_name = None
    if pending.photo_bytes:
        photo_name = f"{record_id}.{photo_extension(pending.photo_mime)}"

    return Record(
        id=record_id,
        timestamp=format_timestamp(ts),
        latitude=round(float(fix.latitude), COORD_DECIMALS),
        longitude=round(float(fix.longitude), COORD_DECIMALS),
        accuracy=None if fix.accuracy is None else int(round(fix.accuracy)),
        note=pending.note or "",
        photo_name=photo_name,
        photo_mime=pending.photo_mime if photo_name else None,
        photo_bytes=bytes(pending.photo_bytes) if photo_name else None,
    )


def save(store: RecordStore, pending: PendingCapture, *, require_photo: bool = REQUIRE_PHOTO) -> Record:
    """Validate *pending*, persist it as one record and return that record.

    Nothing is written when validation fails.
    """
    record = build_record(pending, require_photo=require_photo)
    store.insert(record)
    return record
