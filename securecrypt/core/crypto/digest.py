"""
Message Digests
===============

Plain SHA-256 digests for integrity checks. Not for passwords: use
securecrypt.core.auth.PasswordHasher for those.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes

from securecrypt.utils.encoding import to_bytes


def sha256_digest(data: str | bytes) -> bytes:
    """Raw 32-byte SHA-256 digest of text (UTF-8) or bytes."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(to_bytes(data))
    return digest.finalize()


def sha256_hex(data: str | bytes) -> str:
    """Lowercase hex SHA-256 digest."""
    return sha256_digest(data).hex()
