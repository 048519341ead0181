"""
fieldlog/config.py – centralised configuration for FieldLog Mini.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Workspace root – can be overridden via the FIELDLOG_WORKSPACE environment var
# ---------------------------------------------------------------------------
_DEFAULT_WORKSPACE = Path(os.getcwd()) / "workspace"
WORKSPACE_ROOT: Path = Path(os.environ.get("FIELDLOG_WORKSPACE", str(_DEFAULT_WORKSPACE)))

# One JSON document per record, keyed by record id
RECORDS_DIR: Path = WORKSPACE_ROOT / "records"

# ---------------------------------------------------------------------------
# Export artifacts
# ---------------------------------------------------------------------------
EXPORT_PREFIX: str = "fieldlog"
CSV_FILENAME_IN_ARCHIVE: str = "data.csv"
PHOTOS_DIR_IN_ARCHIVE: str = "photos"

CSV_HEADER: list[str] = ["id", "timestamp", "lat", "lon", "accuracy_m", "note", "photoName"]

# Emit real CRC-32 values; False reproduces the legacy all-zero CRC fields.
ZIP_COMPUTE_CRC: bool = _env_flag("FIELDLOG_ZIP_CRC", True)

# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------
PHOTO_EXTENSIONS: dict[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/heic": "heic",
}
DEFAULT_PHOTO_EXTENSION: str = "jpg"

REQUIRE_PHOTO: bool = _env_flag("FIELDLOG_REQUIRE_PHOTO", True)

COORD_DECIMALS: int = 7
THUMBNAIL_SIZE: int = 256

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.environ.get("FIELDLOG_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | None = None) -> None:
    """Install a root handler for the app process; library modules never do."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
