"""
Domain error taxonomy shared by the repository, API and client layers.

Absence is not an error: reads return ``None`` and mutations such as
``set_cached_status`` return ``False``.
"""
from typing import Any, Dict, List, Optional


class SocialSyncError(Exception):
    """Base class for all SocialSync errors."""


class ValidationError(SocialSyncError):
    """An insert or update payload violated one or more field constraints."""

    def __init__(self, errors: List[Dict[str, Any]], message: Optional[str] = None):
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(message or f"Validation failed for: {fields}")

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]


class ConflictError(SocialSyncError):
    """A uniqueness constraint was violated (e.g. duplicate username)."""


class UnavailableError(SocialSyncError):
    """Local mirror storage could not be read or written."""
