"""
fieldlog/models.py – plain dataclasses for captured observations.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime
from typing import Any, NamedTuple


# ---------------------------------------------------------------------------
# Capture inputs (handed over by the sensor / camera / note collaborators)
# ---------------------------------------------------------------------------
@dataclass
class LocationFix:
    latitude: float
    longitude: float
    accuracy: float | None = None   # metres, None if the sensor reports none
    timestamp: datetime | None = None


@dataclass
class PendingCapture:
    """Everything collected for one observation before it is saved."""

    fix: LocationFix | None = None
    photo_bytes: bytes | None = None
    photo_mime: str | None = None
    note: str = ""


# ---------------------------------------------------------------------------
# Persisted record
# ---------------------------------------------------------------------------
@dataclass
class Record:
    id: str
    timestamp: str  # ISO-8601, second precision, UTC ("...Z")
    latitude: float
    longitude: float
    accuracy: int | None = None
    note: str = ""
    photo_name: str | None = None
    photo_mime: str | None = None
    photo_bytes: bytes | None = None

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_bytes) and bool(self.photo_name)

    def as_dict(self) -> dict[str, Any]:
        d = self.__dict__.copy()
        if self.photo_bytes is not None:
            d["photo_bytes"] = base64.b64encode(self.photo_bytes).decode("ascii")
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Record":
        d = d.copy()
        if d.get("photo_bytes") is not None:
            d["photo_bytes"] = base64.b64decode(d["photo_bytes"], validate=True)
        return cls(**d)


# ---------------------------------------------------------------------------
# Archive entry (export-time only)
# ---------------------------------------------------------------------------
class ArchiveEntry(NamedTuple):
    name: str   # "/"-separated path inside the archive, no leading slash
    data: bytes
