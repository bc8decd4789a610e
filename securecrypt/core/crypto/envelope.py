"""
Cipher Envelope
===============

Immutable result of one symmetric encryption: everything except the key
that the matching decryption needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Mapping, Optional

from securecrypt.core.errors import InvalidParameter
from securecrypt.utils.encoding import b64decode, b64encode

ALGORITHM_AES_CBC: Final[str] = "AES-256-CBC"
ALGORITHM_CHACHA20: Final[str] = "ChaCha20-Poly1305"


@dataclass(frozen=True, slots=True)
class CipherEnvelope:
    """
    Attributes:
        algorithm: ALGORITHM_AES_CBC or ALGORITHM_CHACHA20
        ciphertext: Encrypted bytes (tag NOT appended)
        iv: 16-byte IV (AES-CBC) or 12-byte nonce (ChaCha20)
        tag: 16-byte Poly1305 tag, None for AES-CBC
    """

    algorithm: str
    ciphertext: bytes
    iv: bytes
    tag: Optional[bytes] = None

    @property
    def nonce(self) -> bytes:
        """ChaCha20 name for the IV field."""
        return self.iv

    def to_dict(self) -> dict[str, str]:
        """Boundary representation with Base64 fields."""
        data = {
            "algorithm": self.algorithm,
            "encryptedData": b64encode(self.ciphertext),
        }
        if self.tag is None:
            data["iv"] = b64encode(self.iv)
        else:
            data["nonce"] = b64encode(self.iv)
            data["authTag"] = b64encode(self.tag)
        return data

    @classmethod
    def from_dict(cls, algorithm: str, data: Mapping[str, Any]) -> CipherEnvelope:
        """
        Rebuild an envelope from boundary fields.

        Raises:
            InvalidParameter: If a field is missing or not Base64
        """
        if algorithm == ALGORITHM_AES_CBC:
            return cls(
                algorithm=algorithm,
                ciphertext=b64decode(data.get("encryptedData"), "encryptedData"),
                iv=b64decode(data.get("iv"), "iv"),
            )
        if algorithm == ALGORITHM_CHACHA20:
            return cls(
                algorithm=algorithm,
                ciphertext=b64decode(
                    data.get("encryptedData"), "encryptedData", allow_empty=True
                ),
                iv=b64decode(data.get("nonce"), "nonce"),
                tag=b64decode(data.get("authTag"), "authTag"),
            )
        raise InvalidParameter(f"Unknown symmetric algorithm: {algorithm}")

    def __repr__(self) -> str:
        return (
            f"CipherEnvelope({self.algorithm}, ciphertext_len={len(self.ciphertext)}, "
            f"iv_len={len(self.iv)})"
        )
