"""
tests/test_imaging.py – unit tests for fieldlog/imaging.py
"""
from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest
from PIL import Image

_HERE = Path(__file__).resolve().parent.parent
if str(_HERE) not in sys.path:
    sys.path.insert(0, str(_HERE))

from fieldlog.imaging import (
    dms_to_degrees,
    location_from_gps_ifd,
    location_from_photo,
    make_thumbnail,
)


def _jpeg(size=(640, 480)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (30, 120, 60)).save(buf, format="JPEG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# GPS conversion
# ---------------------------------------------------------------------------

def test_dms_to_degrees_north_east():
    assert dms_to_degrees((35.0, 30.0, 36.0), "N") == pytest.approx(35.51)


def test_dms_to_degrees_south_west_negative():
    assert dms_to_degrees((33.0, 52.0, 12.0), "S") == pytest.approx(-33.87)
    assert dms_to_degrees((151.0, 12.0, 36.0), b"W") == pytest.approx(-151.21)


def test_dms_to_degrees_rational_tuples():
    assert dms_to_degrees(((35, 1), (30, 1), (3600, 100)), "N") == pytest.approx(35.51)


def test_dms_to_degrees_incomplete():
    assert dms_to_degrees((35.0, 30.0), "N") is None
    assert dms_to_degrees(None, "N") is None


def test_location_from_gps_ifd():
    gps = {1: "N", 2: (35.0, 40.0, 52.4503), 3: "E", 4: (139.0, 46.0, 1.6493), 31: 5.0}
    fix = location_from_gps_ifd(gps)
    assert fix.latitude == pytest.approx(35.6812362, abs=1e-6)
    assert fix.longitude == pytest.approx(139.7671248, abs=1e-6)
    assert fix.accuracy == 5.0
    assert fix.timestamp is None


def test_location_from_gps_ifd_missing_longitude():
    assert location_from_gps_ifd({1: "N", 2: (35.0, 0.0, 0.0)}) is None


# ---------------------------------------------------------------------------
# Photo decoding
# ---------------------------------------------------------------------------

def test_location_from_photo_without_exif():
    assert location_from_photo(_jpeg()) is None


def test_location_from_photo_not_an_image():
    assert location_from_photo(b"definitely not an image") is None


def test_make_thumbnail_bounds_size():
    thumb = make_thumbnail(_jpeg((640, 480)), max_size=128)
    assert thumb is not None
    with Image.open(io.BytesIO(thumb)) as im:
        assert im.format == "PNG"
        assert max(im.size) == 128


def test_make_thumbnail_invalid_bytes():
    assert make_thumbnail(b"\x00\x01\x02") is None
