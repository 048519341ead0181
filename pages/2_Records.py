"""
pages/2_Records.py – browse saved records, delete one or clear the store.
"""
from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

_HERE = Path(__file__).resolve().parent.parent
if str(_HERE) not in sys.path:
    sys.path.insert(0, str(_HERE))

from fieldlog.errors import PersistenceError
from fieldlog.imaging import make_thumbnail
from fieldlog.store import RecordStore

st.set_page_config(page_title="Records", page_icon=None, layout="centered")
st.title("Records")

store = RecordStore()
try:
    records = store.list_recent()
except PersistenceError as exc:
    st.error(f"Could not read records: {exc}")
    st.stop()

if not records:
    st.info("No records yet.  Go to **Capture** to save one.")
    st.stop()

st.caption(f"{len(records)} record(s), newest first")

for rec in records:
    acc = f" (±{rec.accuracy} m)" if rec.accuracy is not None else ""
    with st.expander(f"{rec.timestamp} – {rec.latitude:.7f}, {rec.longitude:.7f}{acc}"):
        col1, col2 = st.columns([1, 2])
        with col1:
            if rec.has_photo:
                thumb = make_thumbnail(rec.photo_bytes)
                if thumb is not None:
                    st.image(thumb, caption=rec.photo_name, use_container_width=True)
                else:
                    st.warning("Thumbnail unavailable.")
            else:
                st.caption("(no photo)")
        with col2:
            st.markdown(f"**ID:** `{rec.id}`")
            st.text(rec.note or "(no note)")
            if st.button("Delete", key=f"del_{rec.id}"):
                try:
                    store.delete_by_id(rec.id)
                except PersistenceError as exc:
                    st.error(f"Delete failed: {exc}")
                else:
                    st.rerun()

# ---------------------------------------------------------------------------
# Clear all
# ---------------------------------------------------------------------------
st.divider()
confirm = st.checkbox("I understand this deletes every record permanently")
if st.button("Clear all records", disabled=not confirm):
    try:
        removed = store.clear()
    except PersistenceError as exc:
        st.error(f"Clear failed: {exc}")
    else:
        st.success(f"Deleted {removed} record(s).")
        st.rerun()
