"""Validation of the identity a client presents to the server."""

from typing import Optional

from protocol.constants import DEFAULT_IDENTITY
from utils.exceptions import InvalidIdentityError


def validate_identity(name: Optional[str]) -> str:
    """
    Resolve and validate a client identity.

    The identity travels as a single token of an IDN line, so it cannot
    contain whitespace. A missing or empty name falls back to the default.

    Args:
        name: Identity requested by the caller, or None

    Returns:
        Identity to send

    Raises:
        InvalidIdentityError: If the name contains whitespace
    """
    if not name:
        return DEFAULT_IDENTITY
    if any(ch.isspace() for ch in name):
        raise InvalidIdentityError(f"Identification IDs cannot contain whitespace: {name!r}")
    return name
