"""
ChaCha20-Poly1305 Authenticated Encryption
==========================================

Security Properties:
    - 256-bit key
    - 96-bit nonce (IETF variant), always drawn from the OS CSPRNG
    - 128-bit Poly1305 authentication tag
    - IETF RFC 8439 compliant

WARNING:
    - Never reuse (key, nonce) pairs. Nonces are never caller-supplied
      for encryption.
    - The tag is verified before any plaintext is returned.
"""

from __future__ import annotations

import secrets
from typing import Final

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from securecrypt.core.crypto.envelope import ALGORITHM_CHACHA20, CipherEnvelope
from securecrypt.core.errors import AuthenticationFailed, InvalidKeySize, InvalidParameter
from securecrypt.utils.encoding import from_bytes, require_length, to_bytes

# Constants per RFC 8439
CHACHA_KEY_SIZE: Final[int] = 32  # 256 bits
CHACHA_NONCE_SIZE: Final[int] = 12  # 96 bits (IETF variant)
CHACHA_TAG_SIZE: Final[int] = 16  # 128 bits Poly1305


class ChaCha20Cipher:
    """
    ChaCha20-Poly1305 AEAD cipher (RFC 8439), without associated data.

    The backend appends the tag to the ciphertext; the envelope keeps the
    two apart so they travel as separate Base64 fields.
    """

    __slots__ = ()

    @staticmethod
    def generate_nonce() -> bytes:
        """
        Generate a cryptographically secure random nonce.

        Returns:
            12 bytes of cryptographic random data

        Security:
            96-bit random nonces safe for ~2^32 messages per key
        """
        return secrets.token_bytes(CHACHA_NONCE_SIZE)

    def encrypt(self, plaintext: str | bytes, key: bytes) -> CipherEnvelope:
        """
        Encrypt plaintext using ChaCha20-Poly1305.

        Raises:
            InvalidKeySize: If key is not exactly 32 bytes
        """
        require_length(key, CHACHA_KEY_SIZE, "key", error=InvalidKeySize)

        nonce = self.generate_nonce()
        sealed = ChaCha20Poly1305(key).encrypt(nonce, to_bytes(plaintext), None)

        return CipherEnvelope(
            algorithm=ALGORITHM_CHACHA20,
            ciphertext=sealed[:-CHACHA_TAG_SIZE],
            iv=nonce,
            tag=sealed[-CHACHA_TAG_SIZE:],
        )

    def decrypt(self, envelope: CipherEnvelope, key: bytes) -> str:
        """
        Verify the tag, then decrypt.

        Raises:
            InvalidKeySize: If key is not exactly 32 bytes
            InvalidParameter: If nonce or tag has the wrong length
            AuthenticationFailed: If the tag does not match
        """
        require_length(key, CHACHA_KEY_SIZE, "key", error=InvalidKeySize)
        require_length(envelope.iv, CHACHA_NONCE_SIZE, "nonce", error=InvalidParameter)
        if envelope.tag is None:
            raise InvalidParameter("Missing required field: authTag")
        require_length(envelope.tag, CHACHA_TAG_SIZE, "authTag", error=InvalidParameter)

        try:
            plaintext = ChaCha20Poly1305(key).decrypt(
                envelope.iv, envelope.ciphertext + envelope.tag, None
            )
        except InvalidTag:
            raise AuthenticationFailed() from None

        try:
            return from_bytes(plaintext)
        except UnicodeDecodeError:
            # Authentic but not text: the sender encrypted binary data.
            raise InvalidParameter("Decrypted payload is not UTF-8 text") from None
