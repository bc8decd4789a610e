"""
Cryptographic Error Kinds
=========================

Every operation either succeeds or raises one of the exceptions below.
Each class carries a ``kind`` string that the outer transport maps to a
response code.

Security Notes:
    - DecryptionFailed and AuthenticationFailed always carry a fixed,
      generic message so a caller cannot tell which check failed.
    - Backend exceptions are translated, never re-raised as-is.
"""

from __future__ import annotations

from typing import ClassVar, Optional


class CryptoError(Exception):
    """Base exception for all cryptographic operation failures."""

    kind: ClassVar[str] = "CryptoError"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self) -> dict[str, str]:
        """Failure payload for the operation boundary."""
        return {"error": self.kind, "message": self.message}


class InvalidParameter(CryptoError, ValueError):
    """Bad size, curve, algorithm or missing field."""

    kind = "InvalidParameter"


class InvalidKeySize(CryptoError, ValueError):
    """Symmetric key is not exactly 32 bytes."""

    kind = "InvalidKeySize"


class UnsupportedCurve(CryptoError, ValueError):
    """ECDSA curve outside P-256, P-384 and P-521."""

    kind = "UnsupportedCurve"


class MalformedKeyEncoding(CryptoError, ValueError):
    """Key material could not be decoded or parsed."""

    kind = "MalformedKeyEncoding"


class MessageTooLong(CryptoError):
    """Plaintext exceeds the RSA-OAEP limit for the key size."""

    kind = "MessageTooLong"


class DecryptionFailed(CryptoError):
    """Decryption failed. The message never says why."""

    kind = "DecryptionFailed"
    MESSAGE: ClassVar[str] = "Decryption failed"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class AuthenticationFailed(CryptoError):
    """AEAD tag mismatch: the message may be forged and must be discarded."""

    kind = "AuthenticationFailed"
    MESSAGE: ClassVar[str] = "Message authentication failed"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class InvalidSignature(CryptoError):
    """Signature over a hybrid ciphertext did not verify."""

    kind = "InvalidSignature"


class SessionNotFound(CryptoError):
    """No live key-exchange session for the identifier."""

    kind = "SessionNotFound"


class DuplicateSession(CryptoError):
    """A live key-exchange session already uses the identifier."""

    kind = "DuplicateSession"


ERROR_KINDS: tuple[type[CryptoError], ...] = (
    InvalidParameter,
    InvalidKeySize,
    MessageTooLong,
    DecryptionFailed,
    AuthenticationFailed,
    InvalidSignature,
    SessionNotFound,
    DuplicateSession,
    UnsupportedCurve,
    MalformedKeyEncoding,
)
