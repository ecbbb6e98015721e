"""
Models module containing Pydantic schemas.
"""

from .schemas import (
    REQUIRED_MEMBER_FIELDS,
    PingerState,
    MemberCreate,
    MemberUpdate,
    Member,
    UploadResponse,
    MessageResponse,
    ErrorResponse,
    HealthResponse
)

__all__ = [
    "REQUIRED_MEMBER_FIELDS",
    "PingerState",
    "MemberCreate",
    "MemberUpdate",
    "Member",
    "UploadResponse",
    "MessageResponse",
    "ErrorResponse",
    "HealthResponse"
]
