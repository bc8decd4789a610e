"""
Symmetric Engine
================

Single entry point for 256-bit symmetric encryption:
    1. AES-256-CBC: confidentiality only
    2. ChaCha20-Poly1305: authenticated encryption

Keys are raw 32-byte values held by the caller; the engine keeps nothing
between calls.
"""

from __future__ import annotations

import secrets
from typing import Final

from securecrypt.core.crypto.aes_cbc import AES_KEY_SIZE, AesCbcCipher
from securecrypt.core.crypto.chacha20 import ChaCha20Cipher
from securecrypt.core.crypto.envelope import CipherEnvelope
from securecrypt.core.errors import CryptoError
from securecrypt.core.logging import get_secure_logger

SYMMETRIC_KEY_SIZE: Final[int] = AES_KEY_SIZE

logger = get_secure_logger(__name__)


class SymmetricEngine:
    """
    AES-256-CBC and ChaCha20-Poly1305 behind one interface.

    Usage:
        engine = SymmetricEngine()
        key = engine.generate_key()

        envelope = engine.encrypt_chacha20("attack at dawn", key)
        text = engine.decrypt_chacha20(envelope, key)
    """

    __slots__ = ("_aes", "_chacha")

    def __init__(self) -> None:
        self._aes = AesCbcCipher()
        self._chacha = ChaCha20Cipher()

    @staticmethod
    def generate_key() -> bytes:
        """
        Generate a cryptographically secure random 256-bit key.

        Returns:
            32 bytes of cryptographic random data
        """
        return secrets.token_bytes(SYMMETRIC_KEY_SIZE)

    def encrypt_aes(self, text: str | bytes, key: bytes) -> CipherEnvelope:
        envelope = self._aes.encrypt(text, key)
        logger.debug("AES-256-CBC encrypt: ciphertext_len=%d", len(envelope.ciphertext))
        return envelope

    def decrypt_aes(self, envelope: CipherEnvelope, key: bytes) -> str:
        try:
            return self._aes.decrypt(envelope, key)
        except CryptoError as exc:
            logger.warning("AES-256-CBC decrypt rejected: %s", exc.kind)
            raise

    def encrypt_chacha20(self, text: str | bytes, key: bytes) -> CipherEnvelope:
        envelope = self._chacha.encrypt(text, key)
        logger.debug("ChaCha20-Poly1305 encrypt: ciphertext_len=%d", len(envelope.ciphertext))
        return envelope

    def decrypt_chacha20(self, envelope: CipherEnvelope, key: bytes) -> str:
        """
        Decrypt a ChaCha20-Poly1305 envelope.

        Raises:
            AuthenticationFailed: The message may be forged; discard it.
        """
        try:
            return self._chacha.decrypt(envelope, key)
        except CryptoError as exc:
            logger.warning("ChaCha20-Poly1305 decrypt rejected: %s", exc.kind)
            raise
