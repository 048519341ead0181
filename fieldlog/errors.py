"""
fieldlog/errors.py – error taxonomy for the record store and export pipeline.

Storage and encoding errors propagate to the caller unmodified; only the
export orchestrator turns "no records" into a user-facing condition.
"""
from __future__ import annotations


class FieldLogError(Exception):
    """Base class for every error raised by the fieldlog package."""


class PersistenceError(FieldLogError):
    """A record store read or write could not complete."""


class EmptyDatasetError(FieldLogError):
    """There are no records to export."""


class UnsupportedCaptureInput(FieldLogError, ValueError):
    """A capture is missing its location fix or photo and cannot be saved."""


class ExportInProgressError(FieldLogError):
    """An export is already running in this process."""


class ArchiveLimitError(FieldLogError, ValueError):
    """An archive entry cannot be represented in a 32-bit ZIP container."""
