"""
fieldlog/store.py – durable record store, one JSON document per record.

Scalar fields and the photo payload are written together as a single
document, so a record can never lose its photo to a partial write.
All writes are atomic (write-then-replace).
"""
from __future__ import annotations

import binascii
import hashlib
import json
import logging
import tempfile
from pathlib import Path
from typing import Any

from .errors import PersistenceError
from .models import Record

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def _doc_name(record_id: str) -> str:
    # Record ids are arbitrary strings; keep them out of the filesystem namespace.
    return hashlib.sha256(record_id.encode("utf-8")).hexdigest() + ".json"


class RecordStore:
    """Keyed record storage with insert / scan / delete / clear."""

    def __init__(self, root: Path | None = None) -> None:
        if root is None:
            from .config import RECORDS_DIR
            root = RECORDS_DIR
        self.root = Path(root)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path_for(self, record_id: str) -> Path:
        return self.root / _doc_name(record_id)

    def _doc_paths(self) -> list[Path]:
        if not self.root.exists():
            return []
        try:
            return sorted(self.root.glob("*.json"))
        except OSError as exc:
            raise PersistenceError(f"cannot list record store {self.root}: {exc}") from exc

    def _load_doc(self, path: Path) -> Record | None:
        try:
            with open(path, encoding="utf-8") as fh:
                doc: dict[str, Any] = json.load(fh)
        except FileNotFoundError:
            # Deleted between listing and reading.
            return None
        except OSError as exc:
            raise PersistenceError(f"cannot read {path}: {exc}") from exc
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError
            logger.warning("Skipping corrupt record document %s: %s", path.name, exc)
            return None

        if not isinstance(doc, dict):
            logger.warning("Skipping record document %s: not a JSON object", path.name)
            return None
        if doc.get("schema") != SCHEMA_VERSION:
            logger.warning(
                "Skipping record document %s with unknown schema %r", path.name, doc.get("schema")
            )
            return None
        try:
            return Record.from_dict(doc["record"])
        except (AttributeError, KeyError, TypeError, binascii.Error) as exc:
            logger.warning("Skipping corrupt record document %s: %s", path.name, exc)
            return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def insert(self, record: Record) -> None:
        """Persist *record*, replacing any existing record with the same id."""
        doc = {"schema": SCHEMA_VERSION, "record": record.as_dict()}
        target = self._path_for(record.id)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=".record_", suffix=".tmp")
        except OSError as exc:
            logger.exception("Could not open a write for record %s", record.id)
            raise PersistenceError(f"cannot write record {record.id}: {exc}") from exc
        try:
            with open(tmp_fd, "w", encoding="utf-8") as fh:
                json.dump(doc, fh)
            Path(tmp_path).replace(target)
        except (OSError, TypeError, ValueError) as exc:
            Path(tmp_path).unlink(missing_ok=True)
            logger.exception("Could not commit record %s", record.id)
            raise PersistenceError(f"cannot write record {record.id}: {exc}") from exc
        logger.info("Stored record %s (photo=%s)", record.id, record.has_photo)

    def get(self, record_id: str) -> Record | None:
        path = self._path_for(record_id)
        if not path.exists():
            return None
        return self._load_doc(path)

    def scan_all(self) -> list[Record]:
        """Return every persisted record, in no particular order."""
        records = []
        for path in self._doc_paths():
            rec = self._load_doc(path)
            if rec is not None:
                records.append(rec)
        return records

    def list_recent(self) -> list[Record]:
        """Return all records newest first, for display."""
        return sorted(self.scan_all(), key=lambda r: (r.timestamp, r.id), reverse=True)

    def delete_by_id(self, record_id: str) -> bool:
        """Remove one record. Returns False (not an error) if it was absent."""
        path = self._path_for(record_id)
        try:
            existed = path.exists()
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"cannot delete record {record_id}: {exc}") from exc
        if existed:
            logger.info("Deleted record %s", record_id)
        return existed

    def clear(self) -> int:
        """Remove every record. Returns how many documents were removed."""
        removed = 0
        for path in self._doc_paths():
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise PersistenceError(f"cannot clear record store {self.root}: {exc}") from exc
            removed += 1
        logger.info("Cleared record store (%d records)", removed)
        return removed
