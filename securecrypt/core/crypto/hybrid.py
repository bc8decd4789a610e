"""
Hybrid Encrypt-then-Sign Protocol
=================================

Composes RSA-OAEP and DSA/ECDSA signatures:

Sender:
    plaintext
        ↓ RSA-OAEP (recipient public key)
    ciphertext
        ↓ sign SHA-256(ciphertext) (sender private key)
    (ciphertext, signature)

Recipient:
    (ciphertext, signature)
        ↓ verify (sender public key)  -- stop here on failure
    ciphertext
        ↓ RSA-OAEP decrypt (recipient private key)
    plaintext

WARNING:
    - The signature covers the ciphertext, the exact bytes transmitted.
    - Unauthenticated ciphertext never reaches the decryption step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from securecrypt.core.crypto.asymmetric import AsymmetricEngine, KeyAlgorithm, is_der_signature
from securecrypt.core.errors import InvalidSignature
from securecrypt.core.logging import get_secure_logger
from securecrypt.utils.encoding import b64encode

ENCRYPTION_ALGORITHM = "RSA-OAEP"

logger = get_secure_logger(__name__)


@dataclass(frozen=True, slots=True)
class SignedCiphertext:
    """RSA-OAEP ciphertext plus the sender's signature over it."""

    ciphertext: bytes
    signature: bytes
    signature_algorithm: KeyAlgorithm

    def to_dict(self) -> dict[str, object]:
        return {
            "encryptedData": b64encode(self.ciphertext),
            "signature": b64encode(self.signature),
            "algorithm": {
                "encryption": ENCRYPTION_ALGORITHM,
                "signature": self.signature_algorithm.value,
            },
        }


class HybridProtocol:
    """
    Encrypt-then-sign and verify-then-decrypt over an AsymmetricEngine.

    Usage:
        protocol = HybridProtocol()
        sealed = protocol.encrypt_and_sign(text, bob_rsa_public, alice_ec_private)
        text = protocol.verify_and_decrypt(
            sealed.ciphertext, sealed.signature, alice_ec_public, bob_rsa_private
        )
    """

    __slots__ = ("_engine",)

    def __init__(self, engine: Optional[AsymmetricEngine] = None) -> None:
        self._engine = engine or AsymmetricEngine()

    def encrypt_and_sign(
        self,
        text: str | bytes,
        recipient_public_key: bytes,
        sender_private_key: bytes,
    ) -> SignedCiphertext:
        """
        Encrypt for the recipient, then sign the ciphertext.

        Raises:
            MessageTooLong: Propagated unchanged from the RSA step
            MalformedKeyEncoding, InvalidParameter: Unusable keys
        """
        ciphertext = self._engine.encrypt_rsa(text, recipient_public_key)
        signed = self._engine.sign(ciphertext, sender_private_key)

        logger.debug("Encrypt-then-sign: signature=%s", signed.algorithm.value)
        return SignedCiphertext(
            ciphertext=ciphertext,
            signature=signed.signature,
            signature_algorithm=signed.algorithm,
        )

    def verify_and_decrypt(
        self,
        ciphertext: bytes,
        signature: bytes,
        sender_public_key: bytes,
        recipient_private_key: bytes,
    ) -> str:
        """
        Verify the sender's signature over the ciphertext, then decrypt.

        Raises:
            InvalidSignature: Verification failed or the signature is not
                DER-encoded; nothing was decrypted
            DecryptionFailed: Authentic ciphertext that does not decrypt
                under the recipient key
        """
        if not is_der_signature(signature) or not self._engine.verify(
            ciphertext, signature, sender_public_key
        ):
            logger.warning("Verify-then-decrypt rejected: bad signature")
            raise InvalidSignature(
                "Signature is not valid; the message may have been altered"
            )

        return self._engine.decrypt_rsa(ciphertext, recipient_private_key)
