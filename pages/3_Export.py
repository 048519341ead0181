"""
pages/3_Export.py – download the dataset as CSV or as a ZIP with photos.
"""
from __future__ import annotations

import io
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

_HERE = Path(__file__).resolve().parent.parent
if str(_HERE) not in sys.path:
    sys.path.insert(0, str(_HERE))

from fieldlog.errors import EmptyDatasetError, ExportInProgressError, PersistenceError
from fieldlog.export import MIME_TYPES, export_all, export_filename

st.set_page_config(page_title="Export", page_icon=None, layout="centered")
st.title("Export")

kind = st.radio("Format", ["csv", "zip"], format_func=lambda k: {"csv": "CSV only", "zip": "ZIP (CSV + photos)"}[k])

if st.button("Prepare export", type="primary"):
    try:
        st.session_state["export_artifact"] = (kind, export_all(kind))
    except EmptyDatasetError:
        st.session_state.pop("export_artifact", None)
        st.info("No records to export yet.")
    except ExportInProgressError:
        st.warning("An export is already running – try again in a moment.")
    except PersistenceError as exc:
        st.error(f"Could not read records: {exc}")

artifact = st.session_state.get("export_artifact")
if artifact is not None:
    art_kind, data = artifact
    name = export_filename(art_kind)
    st.download_button(
        f"Download {name}",
        data=data,
        file_name=name,
        mime=MIME_TYPES[art_kind],
    )
    st.caption(f"{len(data) / 1024:.1f} KB")

    if art_kind == "csv":
        st.subheader("CSV preview")
        try:
            df = pd.read_csv(io.BytesIO(data), encoding="utf-8-sig", dtype=str, keep_default_na=False)
            st.dataframe(df.head(200), use_container_width=True)
        except Exception as exc:
            st.warning(f"Could not preview CSV: {exc}")
