"""
Credential Hashing
==================

Argon2id password hashing, independent of the encryption primitives.
"""

from securecrypt.core.auth.argon2_auth import (
    ARGON2_MEMORY_COST,
    ARGON2_PARALLELISM,
    ARGON2_TIME_COST,
    PasswordHasher,
)

__all__ = [
    "PasswordHasher",
    "ARGON2_TIME_COST",
    "ARGON2_MEMORY_COST",
    "ARGON2_PARALLELISM",
]
