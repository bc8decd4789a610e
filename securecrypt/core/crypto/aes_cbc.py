"""
AES-256-CBC Encryption
======================

AES-256 in CBC mode with PKCS#7 padding and a fresh random IV per call.

Security Properties:
    - 256-bit key
    - 128-bit random IV, never reused
    - No integrity protection of its own: pair with a MAC or signature
      when tampering matters

WARNING:
    - Every decryption failure surfaces as the same DecryptionFailed error.
      Distinguishing bad padding from a bad key would create a padding oracle.
"""

from __future__ import annotations

import secrets
from typing import Final

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from securecrypt.core.crypto.envelope import ALGORITHM_AES_CBC, CipherEnvelope
from securecrypt.core.errors import DecryptionFailed, InvalidKeySize, InvalidParameter
from securecrypt.utils.encoding import from_bytes, require_length, to_bytes

AES_KEY_SIZE: Final[int] = 32  # 256 bits
AES_IV_SIZE: Final[int] = 16  # 128 bits, one AES block
AES_BLOCK_BITS: Final[int] = 128


class AesCbcCipher:
    """
    AES-256-CBC cipher.

    Usage:
        cipher = AesCbcCipher()
        envelope = cipher.encrypt("hello", key)
        text = cipher.decrypt(envelope, key)
    """

    __slots__ = ()

    @staticmethod
    def generate_iv() -> bytes:
        """
        Generate a cryptographically secure random IV.

        Returns:
            16 bytes of cryptographic random data
        """
        return secrets.token_bytes(AES_IV_SIZE)

    def encrypt(self, plaintext: str | bytes, key: bytes) -> CipherEnvelope:
        """
        Encrypt plaintext under ``key`` with a fresh IV.

        Raises:
            InvalidKeySize: If key is not exactly 32 bytes
        """
        require_length(key, AES_KEY_SIZE, "key", error=InvalidKeySize)

        iv = self.generate_iv()

        padder = padding.PKCS7(AES_BLOCK_BITS).padder()
        padded = padder.update(to_bytes(plaintext)) + padder.finalize()

        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return CipherEnvelope(algorithm=ALGORITHM_AES_CBC, ciphertext=ciphertext, iv=iv)

    def decrypt_bytes(self, envelope: CipherEnvelope, key: bytes) -> bytes:
        """
        Decrypt an envelope to raw bytes.

        Raises:
            InvalidKeySize: If key is not exactly 32 bytes
            InvalidParameter: If the IV is not exactly 16 bytes
            DecryptionFailed: On any padding, block-length or key mismatch
        """
        require_length(key, AES_KEY_SIZE, "key", error=InvalidKeySize)
        require_length(envelope.iv, AES_IV_SIZE, "iv", error=InvalidParameter)

        try:
            decryptor = Cipher(algorithms.AES(key), modes.CBC(envelope.iv)).decryptor()
            padded = decryptor.update(envelope.ciphertext) + decryptor.finalize()

            unpadder = padding.PKCS7(AES_BLOCK_BITS).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError:
            raise DecryptionFailed() from None

    def decrypt(self, envelope: CipherEnvelope, key: bytes) -> str:
        """Decrypt an envelope to text. Non-UTF-8 output is a DecryptionFailed."""
        plaintext = self.decrypt_bytes(envelope, key)
        try:
            return from_bytes(plaintext)
        except UnicodeDecodeError:
            raise DecryptionFailed() from None
