"""
pages/1_Capture.py – collect a location fix, photo and note and save them as one record.
"""
from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import streamlit as st

# Ensure fieldlog package is importable when running from the pages/ subdirectory
_HERE = Path(__file__).resolve().parent.parent
if str(_HERE) not in sys.path:
    sys.path.insert(0, str(_HERE))

from fieldlog import capture
from fieldlog.errors import PersistenceError, UnsupportedCaptureInput
from fieldlog.imaging import location_from_photo, make_thumbnail
from fieldlog.models import LocationFix, PendingCapture
from fieldlog.store import RecordStore

st.set_page_config(page_title="Capture", page_icon=None, layout="centered")
st.title("Capture")

# ---------------------------------------------------------------------------
# Photo
# ---------------------------------------------------------------------------
st.header("Photo")
source = st.radio("Source", ["Camera", "File"], horizontal=True)
if source == "Camera":
    photo = st.camera_input("Take a photo")
else:
    photo = st.file_uploader("Pick a photo", type=["jpg", "jpeg", "png", "webp", "heic"])

photo_bytes = photo.getvalue() if photo is not None else None
photo_mime = photo.type if photo is not None else None
if photo_bytes:
    thumb = make_thumbnail(photo_bytes)
    if thumb is not None:
        st.image(thumb, caption="Preview")

# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------
st.header("Location")
exif_fix = location_from_photo(photo_bytes) if photo_bytes else None
use_exif = False
if exif_fix is not None:
    use_exif = st.checkbox(
        f"Use photo GPS ({exif_fix.latitude:.7f}, {exif_fix.longitude:.7f})", value=True
    )

fix: LocationFix | None = exif_fix if use_exif else None
if not use_exif:
    col1, col2, col3 = st.columns(3)
    with col1:
        lat = st.number_input("Latitude", min_value=-90.0, max_value=90.0, value=None, format="%.7f")
    with col2:
        lon = st.number_input("Longitude", min_value=-180.0, max_value=180.0, value=None, format="%.7f")
    with col3:
        acc = st.number_input("Accuracy (m)", min_value=0.0, value=None, format="%.1f")
    if lat is not None and lon is not None:
        fix = LocationFix(latitude=lat, longitude=lon, accuracy=acc, timestamp=datetime.now(timezone.utc))

# ---------------------------------------------------------------------------
# Note + save
# ---------------------------------------------------------------------------
st.header("Note")
note = st.text_area("Note", value="", height=120)

if st.button("Save", type="primary"):
    pending = PendingCapture(fix=fix, photo_bytes=photo_bytes, photo_mime=photo_mime, note=note)
    try:
        record = capture.save(RecordStore(), pending)
    except UnsupportedCaptureInput as exc:
        st.warning(f"Cannot save yet: {exc}")
    except PersistenceError as exc:
        st.error(f"Saving failed: {exc}")
    else:
        st.success(f"Saved record `{record.id}`.")
