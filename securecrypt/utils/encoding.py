"""
Primitive Codec
===============

Base64 transport encoding and byte-length checks for binary values.

Every binary value (key, IV, nonce, tag, ciphertext, signature) crosses the
operation boundary as standard Base64 text. Engines work on raw bytes only.
"""

from __future__ import annotations

import base64
import binascii
from typing import Final, Type

from securecrypt.core.errors import CryptoError, InvalidParameter, MalformedKeyEncoding

TEXT_ENCODING: Final[str] = "utf-8"


def b64encode(data: bytes) -> str:
    """Encode bytes as standard, padded Base64 text."""
    return base64.b64encode(data).decode("ascii")


def b64decode(
    value: object,
    field: str,
    error: Type[CryptoError] = InvalidParameter,
    allow_empty: bool = False,
) -> bytes:
    """
    Strictly decode Base64 text.

    Args:
        value: Base64 text received from the caller
        field: Name of the field, used in the error message
        error: Error kind raised for non-text or non-Base64 input
        allow_empty: Accept "" as zero bytes (empty AEAD ciphertexts)

    Raises:
        InvalidParameter: If the field is missing (always)
        error: If the value is not valid Base64
    """
    if value is None or (value == "" and not allow_empty):
        raise InvalidParameter(f"Missing required field: {field}")
    if not isinstance(value, str):
        raise error(f"{field} must be Base64 text")
    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError):
        raise error(f"{field} is not valid Base64") from None


def decode_key(value: object, field: str = "key") -> bytes:
    """Decode Base64 key material, failing with MalformedKeyEncoding."""
    return b64decode(value, field, error=MalformedKeyEncoding)


def require_length(
    data: bytes,
    expected: int,
    field: str,
    error: Type[CryptoError] = InvalidParameter,
) -> bytes:
    """Fail with ``error`` unless ``data`` is exactly ``expected`` bytes long."""
    if len(data) != expected:
        raise error(f"{field} must be exactly {expected} bytes ({expected * 8} bits)")
    return data


def to_bytes(text: str | bytes) -> bytes:
    """Encode message text as UTF-8; bytes pass through unchanged."""
    if isinstance(text, bytes):
        return text
    if not isinstance(text, str):
        raise InvalidParameter("Text must be a string")
    return text.encode(TEXT_ENCODING)


def from_bytes(data: bytes) -> str:
    """Decode UTF-8 bytes to text. Raises UnicodeDecodeError on bad input."""
    return data.decode(TEXT_ENCODING)


def int_to_bytes(value: int) -> bytes:
    """Minimal big-endian encoding of a non-negative integer (0 -> b"\\x00")."""
    if value < 0:
        raise InvalidParameter("Integer value must be non-negative")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def bytes_to_int(data: bytes) -> int:
    """Big-endian bytes to integer."""
    return int.from_bytes(data, "big")
