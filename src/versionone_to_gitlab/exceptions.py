"""
Custom exception classes for the VersionOne to GitLab migration tool.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for migration errors."""


class InputShapeError(MigrationError):
    """Raised when the CSV export does not have the expected row layout."""


class OrphanTaskError(InputShapeError):
    """Raised when a task row appears before any item row."""

    def __init__(self, position: int) -> None:
        self.position: int = position
        super().__init__(f"Task row {position} has no preceding item row")


class DataFormatError(MigrationError):
    """Raised when a date or number column cannot be parsed."""
