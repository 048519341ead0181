"""
app.py – entry point for FieldLog Mini.

Launch with:
    streamlit run app.py
"""
import streamlit as st

from fieldlog.config import RECORDS_DIR, configure_logging

configure_logging()

st.set_page_config(
    page_title="FieldLog Mini",
    page_icon=None,
    layout="centered",
    initial_sidebar_state="expanded",
)

st.title("FieldLog Mini")
st.markdown(
    """
    Capture geotagged field observations offline and export them later.

    ### Quick start

    1. **Capture** -> enter or read a GPS fix, take a photo, write a note, save.
    2. **Records** -> review saved observations, delete single records or clear all.
    3. **Export** -> download everything as a CSV, or as a ZIP with the CSV plus all photos.

    Use the sidebar to navigate between pages.
    """
)

st.info(f"Records are stored locally under `{RECORDS_DIR}`. No data leaves this machine.")
