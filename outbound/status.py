"""
HTTP status codes and the boundary parser for untyped status input.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict, Optional

from .faults import InvalidStatusFault


STATUS_CODES: Dict[int, str] = {status.value: status.phrase for status in HTTPStatus}


def status_message(code: Optional[int]) -> Optional[str]:
    """Canonical reason phrase for a status code, or None if unknown."""
    if code is None:
        return None
    return STATUS_CODES.get(code)


def validate_status(value: Any) -> int:
    """
    Check that value is already a usable status.

    Raises:
        InvalidStatusFault: value is not a non-negative int (bools rejected)
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidStatusFault(value)
    return int(value)


def parse_status(value: Any) -> int:
    """
    Parse untyped status input into an int.

    Accepts ints, HTTPStatus members and strings such as "404" or
    "404 Not Found" (the leading token is used).

    Raises:
        InvalidStatusFault: value cannot be read as a non-negative integer
    """
    if isinstance(value, HTTPStatus):
        return value.value

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("latin-1")

    if isinstance(value, str):
        token = value.strip().split(" ", 1)[0]
        if not token.isdigit():
            raise InvalidStatusFault(value)
        return int(token)

    return validate_status(value)
