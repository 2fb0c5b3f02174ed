"""
Domain errors for scoring and ranking.

InvalidArgumentError and PreconditionViolationError signal caller bugs.
MissingDataError is recoverable (the caller can prompt for a profile) and
carries the offending entity id.
"""

from __future__ import annotations

from typing import Any


class TasteMatchError(Exception):
    """Base exception for tastematch errors."""

    code = "TASTEMATCH_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(TasteMatchError):
    """Raised for non-positive limits or mismatched vector dimensionality."""

    code = "INVALID_ARGUMENT"


class PreconditionViolationError(TasteMatchError):
    """Raised when a vector component lies outside the supported range."""

    code = "PRECONDITION_VIOLATION"

    def __init__(self, message: str, component: str | None = None, value: Any = None):
        super().__init__(message)
        self.component = component
        self.value = value


class MissingDataError(TasteMatchError):
    """Raised when an entity or its preference vector cannot be found."""

    code = "MISSING_DATA"

    def __init__(self, entity_id: Any, message: str | None = None):
        super().__init__(message or f"No preference vector for entity {entity_id}")
        self.entity_id = entity_id


class StorageTimeoutError(TasteMatchError):
    """Raised when a bulk read exceeds the configured query timeout."""

    code = "STORAGE_TIMEOUT"

    def __init__(self, message: str, timeout_ms: int | None = None):
        super().__init__(message)
        self.timeout_ms = timeout_ms
