"""
Schemas module - Request/Response schemas for API endpoints.

Schemas are the API contract (what the client sends and receives).
Stored documents use the same camelCase field names.
"""

from skillgate.schemas.schemas import (
    ApplicationStatus,
    DriveStatus,
    QuestionKind,
    UserRole,
    UserStatus,
)

__all__ = [
    "ApplicationStatus",
    "DriveStatus",
    "QuestionKind",
    "UserRole",
    "UserStatus",
]
