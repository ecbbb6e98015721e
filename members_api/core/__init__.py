"""
Core module containing configuration, errors and utilities.
"""

from .config import Settings, MongoConfig, MediaHostConfig, KeepAliveConfig
from .errors import (
    MembersApiError,
    MemberValidationError,
    MemberNotFoundError,
    StoreError,
    UploadError,
    MissingFileError,
)
from .utils import get_timestamp, format_validation_errors, sign_upload_params

__all__ = [
    "Settings",
    "MongoConfig",
    "MediaHostConfig",
    "KeepAliveConfig",
    "MembersApiError",
    "MemberValidationError",
    "MemberNotFoundError",
    "StoreError",
    "UploadError",
    "MissingFileError",
    "get_timestamp",
    "format_validation_errors",
    "sign_upload_params",
]
