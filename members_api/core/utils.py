"""
Shared utility functions for the members API.

Timestamps, error formatting and the media host request signature.
"""

import hashlib
import time
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError


def get_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        ISO-formatted UTC timestamp string
    """
    return datetime.now(timezone.utc).isoformat()


def get_unix_timestamp() -> int:
    """Current time as whole seconds since epoch."""
    return int(time.time())


def format_validation_errors(exc: ValidationError, model_name: str = "Member") -> str:
    """
    Render a pydantic ValidationError as a single human-readable line.

    Args:
        exc: The error raised by model validation
        model_name: Name shown at the start of the message

    Returns:
        A message like "Member validation failed: nome: Field required"
    """
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return f"{model_name} validation failed: " + ", ".join(parts)


def sign_upload_params(params: Mapping[str, Any], api_secret: str) -> str:
    """
    Compute the Cloudinary signature for a set of upload parameters.

    Parameters are sorted by name, serialized as ``key=value`` pairs joined
    with ``&``, suffixed with the API secret and hashed with SHA-1.

    Args:
        params: Parameters to sign (file, api_key and resource_type excluded)
        api_secret: Account API secret

    Returns:
        Hex digest of the signature
    """
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] is not None and params[key] != ""
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def truncate_string(s: str, max_length: int = 200) -> str:
    """
    Truncate a string to a maximum length for logging.

    Args:
        s: String to truncate
        max_length: Maximum allowed length

    Returns:
        Original string if short enough, otherwise truncated with ellipsis
    """
    if len(s) <= max_length:
        return s
    return s[:max_length - 3] + "..."
