"""
import_engine.errors - Exception hierarchy for the import pipeline.
"""

from __future__ import annotations

from typing import Optional


class ImportEngineError(Exception):
    """Base exception for all import pipeline errors."""


class ImportFileError(ImportEngineError):
    """The uploaded file cannot be processed at all (nothing was attempted)."""


class RowError(ImportEngineError):
    """Raised when a single row cannot be imported."""

    def __init__(self, message: str, column: Optional[str] = None) -> None:
        self.column = column
        super().__init__(message)
