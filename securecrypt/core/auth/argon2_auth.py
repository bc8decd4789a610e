"""
Argon2id Password Hashing
=========================

Implements credential hashing using Argon2id.

Security Properties:
- Memory-hard (resistant to GPU/ASIC attacks)
- Random 16-byte salt per hash
- Self-describing PHC string output ($argon2id$v=19$m=...,t=...,p=...$salt$hash),
  so verification needs no stored parameters
- Constant-time verification (argon2-cffi)

Parameters (fixed):
- time_cost: 3 iterations
- memory_cost: 65536 KiB (64 MiB)
- parallelism: 2 lanes

References:
- RFC 9106: Argon2 Memory-Hard Function
"""

from __future__ import annotations

from typing import Final

from argon2 import PasswordHasher as _Argon2PasswordHasher
from argon2 import Type, extract_parameters
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from securecrypt.core.errors import InvalidParameter
from securecrypt.core.logging import get_secure_logger

ARGON2_TIME_COST: Final[int] = 3
ARGON2_MEMORY_COST: Final[int] = 64 * 1024  # 64 MiB in KiB
ARGON2_PARALLELISM: Final[int] = 2
ARGON2_HASH_LENGTH: Final[int] = 32  # 256 bits
ARGON2_SALT_LENGTH: Final[int] = 16  # 128 bits

_HASH_PREFIX: Final[str] = "$argon2"

logger = get_secure_logger(__name__)


class PasswordHasher:
    """
    Argon2id password hasher with fixed cost parameters.

    Usage:
        hasher = PasswordHasher()

        encoded = hasher.hash("correct horse battery staple")
        store(encoded)

        hasher.verify("correct horse battery staple", encoded)  # True
        hasher.verify("wrong", encoded)                         # False
    """

    __slots__ = ("_hasher",)

    def __init__(self) -> None:
        self._hasher = _Argon2PasswordHasher(
            time_cost=ARGON2_TIME_COST,
            memory_cost=ARGON2_MEMORY_COST,
            parallelism=ARGON2_PARALLELISM,
            hash_len=ARGON2_HASH_LENGTH,
            salt_len=ARGON2_SALT_LENGTH,
            type=Type.ID,
        )

    @property
    def parameters(self) -> dict[str, int]:
        """Get current hashing parameters."""
        return {
            "time_cost": ARGON2_TIME_COST,
            "memory_cost": ARGON2_MEMORY_COST,
            "parallelism": ARGON2_PARALLELISM,
            "hash_length": ARGON2_HASH_LENGTH,
            "salt_length": ARGON2_SALT_LENGTH,
        }

    def hash(self, password: str) -> str:
        """
        Hash a password using Argon2id.

        Returns:
            Encoded hash string for storage

        Raises:
            InvalidParameter: If password is empty or not a string
        """
        if not isinstance(password, str) or not password:
            raise InvalidParameter("Password cannot be empty")

        return self._hasher.hash(password)

    def verify(self, password: str, encoded: str) -> bool:
        """
        Verify a password against an encoded hash.

        Parameters and salt are read from ``encoded``.

        Returns:
            True if password matches, False otherwise

        Raises:
            InvalidParameter: If ``encoded`` is not a structurally valid
                Argon2 hash string
        """
        self._check_encoded(encoded)
        if not isinstance(password, str):
            raise InvalidParameter("Password must be a string")

        try:
            return self._hasher.verify(encoded, password)
        except VerifyMismatchError:
            return False
        except InvalidHashError:
            raise InvalidParameter("Hash is not a valid Argon2 hash string") from None
        except VerificationError:
            logger.warning("Argon2 verification failed for a structurally valid hash")
            return False

    def needs_rehash(self, encoded: str) -> bool:
        """
        Check whether a stored hash was made with different parameters.

        Raises:
            InvalidParameter: If ``encoded`` is not an Argon2 hash string
        """
        self._check_encoded(encoded)
        try:
            return self._hasher.check_needs_rehash(encoded)
        except (InvalidHashError, ValueError):
            raise InvalidParameter("Hash is not a valid Argon2 hash string") from None

    @staticmethod
    def _check_encoded(encoded: str) -> None:
        if not isinstance(encoded, str) or not encoded.startswith(_HASH_PREFIX):
            raise InvalidParameter("Hash is not a valid Argon2 hash string")
        try:
            extract_parameters(encoded)
        except (InvalidHashError, ValueError):
            raise InvalidParameter("Hash is not a valid Argon2 hash string") from None
