"""
fieldlog/imaging.py – Pillow helpers for captured photos: EXIF location and thumbnails.
"""
from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError

from .config import THUMBNAIL_SIZE
from .models import LocationFix

logger = logging.getLogger(__name__)

_GPS_IFD = 0x8825
_EXIF_IFD = 0x8769
_TAG_DATETIME = 0x0132
_TAG_DATETIME_ORIGINAL = 0x9003

# GPS IFD tag numbers
_GPS_LAT_REF = 1
_GPS_LAT = 2
_GPS_LON_REF = 3
_GPS_LON = 4
_GPS_H_POSITIONING_ERROR = 31


def _num(v: Any) -> float:
    if isinstance(v, tuple) and len(v) == 2:
        return float(v[0]) / float(v[1])
    return float(v)


def dms_to_degrees(dms: Any, ref: Any) -> float | None:
    """Convert an EXIF (deg, min, sec) triple plus N/S/E/W ref to signed degrees."""
    if not dms or len(dms) < 3:
        return None
    try:
        deg = _num(dms[0]) + _num(dms[1]) / 60.0 + _num(dms[2]) / 3600.0
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    if str(ref).strip().upper() in ("S", "W"):
        deg = -deg
    return deg


def location_from_gps_ifd(gps: dict[int, Any], taken_at: datetime | None = None) -> LocationFix | None:
    lat = dms_to_degrees(gps.get(_GPS_LAT), gps.get(_GPS_LAT_REF))
    lon = dms_to_degrees(gps.get(_GPS_LON), gps.get(_GPS_LON_REF))
    if lat is None or lon is None:
        return None
    accuracy = None
    if gps.get(_GPS_H_POSITIONING_ERROR) is not None:
        try:
            accuracy = _num(gps[_GPS_H_POSITIONING_ERROR])
        except (TypeError, ValueError, ZeroDivisionError):
            accuracy = None
    return LocationFix(latitude=lat, longitude=lon, accuracy=accuracy, timestamp=taken_at)


def _taken_at(exif: Image.Exif) -> datetime | None:
    raw = exif.get_ifd(_EXIF_IFD).get(_TAG_DATETIME_ORIGINAL) or exif.get(_TAG_DATETIME)
    if not raw:
        return None
    try:
        # Camera clocks carry no zone; treated as UTC like other naive timestamps.
        return datetime.strptime(str(raw).strip(), "%Y:%m:%d %H:%M:%S").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def location_from_photo(photo_bytes: bytes) -> LocationFix | None:
    """Best-effort location fix from a photo's EXIF GPS block."""
    try:
        with Image.open(io.BytesIO(photo_bytes)) as im:
            exif = im.getexif()
            gps = dict(exif.get_ifd(_GPS_IFD))
            if not gps:
                return None
            return location_from_gps_ifd(gps, _taken_at(exif))
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("EXIF location unavailable: %s", exc)
        return None


def pil_to_bytes(img: Image.Image, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_thumbnail(photo_bytes: bytes, max_size: int = THUMBNAIL_SIZE) -> bytes | None:
    """Return a PNG thumbnail of *photo_bytes*, or None if it cannot be decoded."""
    try:
        with Image.open(io.BytesIO(photo_bytes)) as im:
            img = ImageOps.exif_transpose(im).convert("RGB")
            img.thumbnail((max_size, max_size), Image.LANCZOS)
            return pil_to_bytes(img)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("make_thumbnail failed: %s", exc)
        return None
