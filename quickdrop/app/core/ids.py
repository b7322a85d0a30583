"""
Opaque document identifiers.

Every stored document is keyed by a 32-character lowercase hex string.
"""

import re
import secrets
import uuid

from quickdrop.app.core.exceptions import InvalidArgumentError

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value) -> bool:
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))


def parse_id(value, resource: str = "document") -> str:
    """Return ``value`` unchanged if it is a well-formed id, else raise InvalidArgument."""
    if not is_valid_id(value):
        raise InvalidArgumentError(
            f"Invalid {resource} ID",
            details={"resource": resource, "id": value}
        )
    return value


def new_tracking_id() -> str:
    """Short human-facing parcel reference, e.g. ``QD-7F3A9C21``."""
    return f"QD-{secrets.token_hex(4).upper()}"
