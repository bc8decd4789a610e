"""
Validation Utilities
====================

Input checks for request fields at the operation boundary.
No check ever substitutes a default for a missing or invalid value.
"""

from __future__ import annotations

from typing import Any, Mapping

from securecrypt.core.errors import InvalidParameter


def require_field(params: Mapping[str, Any], name: str) -> Any:
    """
    Return a required request field.

    Raises:
        InvalidParameter: If the field is absent, None or an empty string
    """
    value = params.get(name)
    if value is None or value == "":
        raise InvalidParameter(f"Missing required field: {name}")
    return value


def require_text(value: Any, name: str, allow_empty: bool = False) -> str:
    """
    Validate a required string value.

    Empty strings are accepted only when ``allow_empty`` is set (plaintexts
    may legitimately be empty).
    """
    if value is None or (value == "" and not allow_empty):
        raise InvalidParameter(f"Missing required field: {name}")
    if not isinstance(value, str):
        raise InvalidParameter(f"{name} must be a string")
    return value


def require_int(value: Any, name: str) -> int:
    """
    Validate a required integer value; decimal strings are accepted.

    Booleans and non-integral values are rejected.
    """
    if value is None or value == "":
        raise InvalidParameter(f"Missing required field: {name}")
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be an integer")
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            raise InvalidParameter(f"{name} must be an integer") from None
    if not isinstance(value, int):
        raise InvalidParameter(f"{name} must be an integer")
    return value
