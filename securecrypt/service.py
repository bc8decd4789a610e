"""
Crypto Service
==============

Transport-neutral operation boundary.

Every binary value enters and leaves as Base64 text. Each call either
returns an operation-specific payload or raises a CryptoError;
``execute()`` turns that into the response envelope an outer transport
serializes:

    {"success": True,  "data": {...}}
    {"success": False, "error": "<kind>", "message": "<text>"}
"""

from __future__ import annotations

from typing import Any, Callable, Final, Mapping, Optional

from securecrypt.core.auth.argon2_auth import PasswordHasher
from securecrypt.core.config import SecureConfig
from securecrypt.core.crypto.asymmetric import HASH_ALGORITHM, AsymmetricEngine
from securecrypt.core.crypto.digest import sha256_hex
from securecrypt.core.crypto.envelope import (
    ALGORITHM_AES_CBC,
    ALGORITHM_CHACHA20,
    CipherEnvelope,
)
from securecrypt.core.crypto.hybrid import ENCRYPTION_ALGORITHM, HybridProtocol
from securecrypt.core.crypto.key_exchange import KeyExchangeSession
from securecrypt.core.crypto.session_store import DHSessionStore
from securecrypt.core.crypto.symmetric import SymmetricEngine
from securecrypt.core.errors import CryptoError, InvalidParameter
from securecrypt.core.logging import get_secure_logger
from securecrypt.utils.encoding import b64decode, b64encode, decode_key
from securecrypt.utils.validators import require_field, require_int, require_text

Payload = dict[str, Any]

_ERROR_STATUS: Final[dict[str, int]] = {
    "InvalidParameter": 400,
    "InvalidKeySize": 400,
    "UnsupportedCurve": 400,
    "MalformedKeyEncoding": 400,
    "MessageTooLong": 413,
    "DecryptionFailed": 400,
    "AuthenticationFailed": 400,
    "InvalidSignature": 400,
    "SessionNotFound": 404,
    "DuplicateSession": 409,
}

logger = get_secure_logger(__name__)


def error_status(kind: str) -> int:
    """HTTP status an outer transport should use for an error kind."""
    return _ERROR_STATUS.get(kind, 500)


class CryptoService:
    """
    One canonical method per cryptographic operation.

    Usage:
        service = CryptoService()

        key = service.generate_key()["key"]
        sealed = service.encrypt_aes("hello", key)
        service.decrypt_aes(sealed["encryptedData"], key, sealed["iv"])

        service.execute("encryptAES", {"text": "hello", "key": key})
    """

    __slots__ = ("_symmetric", "_asymmetric", "_exchange", "_hybrid", "_passwords", "_handlers")

    def __init__(
        self,
        config: Optional[SecureConfig] = None,
        session_store: Optional[DHSessionStore] = None,
    ) -> None:
        config = config or SecureConfig.get_instance()

        self._symmetric = SymmetricEngine()
        self._asymmetric = AsymmetricEngine()
        self._exchange = KeyExchangeSession(
            session_store or DHSessionStore.from_config(config.key_exchange)
        )
        self._hybrid = HybridProtocol(self._asymmetric)
        self._passwords = PasswordHasher()
        self._handlers = self._build_handlers()

    @property
    def sessions(self) -> DHSessionStore:
        return self._exchange.store

    # -- symmetric ------------------------------------------------------

    def generate_key(self) -> Payload:
        return {
            "key": b64encode(self._symmetric.generate_key()),
            "description": "256-bit key for AES-256 or ChaCha20",
        }

    def encrypt_aes(self, text: str, key: str) -> Payload:
        text = require_text(text, "text", allow_empty=True)
        return self._symmetric.encrypt_aes(text, decode_key(key)).to_dict()

    def decrypt_aes(self, encrypted_data: str, key: str, iv: str) -> Payload:
        envelope = CipherEnvelope.from_dict(
            ALGORITHM_AES_CBC, {"encryptedData": encrypted_data, "iv": iv}
        )
        return {
            "decryptedData": self._symmetric.decrypt_aes(envelope, decode_key(key)),
            "algorithm": ALGORITHM_AES_CBC,
        }

    def encrypt_chacha20(self, text: str, key: str) -> Payload:
        text = require_text(text, "text", allow_empty=True)
        return self._symmetric.encrypt_chacha20(text, decode_key(key)).to_dict()

    def decrypt_chacha20(self, encrypted_data: str, key: str, nonce: str, auth_tag: str) -> Payload:
        envelope = CipherEnvelope.from_dict(
            ALGORITHM_CHACHA20,
            {"encryptedData": encrypted_data, "nonce": nonce, "authTag": auth_tag},
        )
        return {
            "decryptedData": self._symmetric.decrypt_chacha20(envelope, decode_key(key)),
            "algorithm": ALGORITHM_CHACHA20,
        }

    # -- asymmetric -----------------------------------------------------

    def generate_rsa_key_pair(self, key_size: int) -> Payload:
        return self._asymmetric.generate_rsa_key_pair(require_int(key_size, "keySize")).to_dict()

    def generate_dsa_key_pair(self, key_size: int) -> Payload:
        return self._asymmetric.generate_dsa_key_pair(require_int(key_size, "keySize")).to_dict()

    def generate_ecdsa_key_pair(self, curve: str) -> Payload:
        curve = require_text(curve, "curve")
        return self._asymmetric.generate_ecdsa_key_pair(curve).to_dict()

    def encrypt_rsa(self, text: str, public_key: str) -> Payload:
        text = require_text(text, "text", allow_empty=True)
        ciphertext = self._asymmetric.encrypt_rsa(text, decode_key(public_key, "publicKey"))
        return {
            "encryptedData": b64encode(ciphertext),
            "algorithm": ENCRYPTION_ALGORITHM,
            "hashAlgorithm": HASH_ALGORITHM,
        }

    def decrypt_rsa(self, encrypted_data: str, private_key: str) -> Payload:
        ciphertext = b64decode(encrypted_data, "encryptedData")
        return {
            "decryptedData": self._asymmetric.decrypt_rsa(
                ciphertext, decode_key(private_key, "privateKey")
            ),
            "algorithm": ENCRYPTION_ALGORITHM,
        }

    def sign(self, message: str, private_key: str, algorithm: Optional[str] = None) -> Payload:
        message = require_text(message, "message", allow_empty=True)
        if algorithm is not None:
            algorithm = require_text(algorithm, "algorithm")
        signed = self._asymmetric.sign(message, decode_key(private_key, "privateKey"), algorithm)
        return {"message": message, **signed.to_dict()}

    def verify(self, message: str, signature: str, public_key: str) -> Payload:
        message = require_text(message, "message", allow_empty=True)
        is_valid = self._asymmetric.verify(
            message,
            b64decode(signature, "signature"),
            decode_key(public_key, "publicKey"),
        )
        return {"isValid": is_valid, "message": message}

    # -- key exchange ---------------------------------------------------

    def dh_init(self, session_id: str) -> Payload:
        return self._exchange.init(require_text(session_id, "sessionId")).to_dict()

    def dh_complete(
        self,
        session_id: str,
        other_public_key: str,
        prime: Optional[str] = None,
        generator: Optional[str] = None,
    ) -> Payload:
        result = self._exchange.complete(
            require_text(session_id, "sessionId"),
            b64decode(other_public_key, "otherPublicKey"),
            prime=b64decode(prime, "prime") if prime else None,
            generator=b64decode(generator, "generator") if generator else None,
        )
        return result.to_dict()

    # -- hybrid ---------------------------------------------------------

    def encrypt_and_sign(
        self,
        text: str,
        recipient_public_key: str,
        sender_private_key: str,
    ) -> Payload:
        text = require_text(text, "text", allow_empty=True)
        sealed = self._hybrid.encrypt_and_sign(
            text,
            decode_key(recipient_public_key, "recipientPublicKey"),
            decode_key(sender_private_key, "senderPrivateKey"),
        )
        return sealed.to_dict()

    def verify_and_decrypt(
        self,
        encrypted_data: str,
        signature: str,
        sender_public_key: str,
        recipient_private_key: str,
    ) -> Payload:
        plaintext = self._hybrid.verify_and_decrypt(
            b64decode(encrypted_data, "encryptedData"),
            b64decode(signature, "signature"),
            decode_key(sender_public_key, "senderPublicKey"),
            decode_key(recipient_private_key, "recipientPrivateKey"),
        )
        return {
            "decryptedData": plaintext,
            "signatureValid": True,
            "algorithm": {"encryption": ENCRYPTION_ALGORITHM},
        }

    # -- hashing --------------------------------------------------------

    def hash_password(self, password: str) -> Payload:
        return {"hash": self._passwords.hash(require_text(password, "password"))}

    def verify_password(self, password: str, hash: str) -> Payload:
        valid = self._passwords.verify(
            require_text(password, "password"), require_text(hash, "hash")
        )
        return {"valid": valid}

    def sha256(self, text: str) -> Payload:
        return {"hash": sha256_hex(require_text(text, "text", allow_empty=True))}

    # -- dispatch -------------------------------------------------------

    def _build_handlers(self) -> dict[str, Callable[[Mapping[str, Any]], Payload]]:
        return {
            "generateKey": lambda p: self.generate_key(),
            "encryptAES": lambda p: self.encrypt_aes(p.get("text"), p.get("key")),
            "decryptAES": lambda p: self.decrypt_aes(
                p.get("encryptedData"), p.get("key"), p.get("iv")
            ),
            "encryptChaCha20": lambda p: self.encrypt_chacha20(p.get("text"), p.get("key")),
            "decryptChaCha20": lambda p: self.decrypt_chacha20(
                p.get("encryptedData"), p.get("key"), p.get("nonce"), p.get("authTag")
            ),
            "generateRSAKeyPair": lambda p: self.generate_rsa_key_pair(
                require_field(p, "keySize")
            ),
            "generateDSAKeyPair": lambda p: self.generate_dsa_key_pair(
                require_field(p, "keySize")
            ),
            "generateECDSAKeyPair": lambda p: self.generate_ecdsa_key_pair(
                require_field(p, "curve")
            ),
            "encryptRSA": lambda p: self.encrypt_rsa(p.get("text"), p.get("publicKey")),
            "decryptRSA": lambda p: self.decrypt_rsa(
                p.get("encryptedData"), p.get("privateKey")
            ),
            "sign": lambda p: self.sign(
                p.get("message"), p.get("privateKey"), p.get("algorithm")
            ),
            "verify": lambda p: self.verify(
                p.get("message"), p.get("signature"), p.get("publicKey")
            ),
            "dhInit": lambda p: self.dh_init(p.get("sessionId")),
            "dhComplete": lambda p: self.dh_complete(
                p.get("sessionId"), p.get("otherPublicKey"), p.get("prime"), p.get("generator")
            ),
            "encryptAndSign": lambda p: self.encrypt_and_sign(
                p.get("text"), p.get("recipientPublicKey"), p.get("senderPrivateKey")
            ),
            "verifyAndDecrypt": lambda p: self.verify_and_decrypt(
                p.get("encryptedData"),
                p.get("signature"),
                p.get("senderPublicKey"),
                p.get("recipientPrivateKey"),
            ),
            "hashPassword": lambda p: self.hash_password(p.get("password")),
            "verifyPassword": lambda p: self.verify_password(p.get("password"), p.get("hash")),
            "sha256": lambda p: self.sha256(p.get("text")),
        }

    @property
    def operations(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def execute(self, operation: str, params: Optional[Mapping[str, Any]] = None) -> Payload:
        """
        Run an operation by name and wrap the outcome in a response envelope.

        Only CryptoError becomes a failure payload; anything else is a bug
        and propagates.
        """
        params = params or {}
        try:
            handler = self._handlers.get(operation)
            if handler is None:
                raise InvalidParameter(f"Unknown operation: {operation!r}")
            data = handler(params)
        except CryptoError as exc:
            logger.warning(
                "Operation %s failed: %s", operation, exc.kind,
                extra={"operation": operation, "kind": exc.kind},
            )
            return {"success": False, **exc.to_dict()}

        logger.debug("Operation %s succeeded", operation, extra={"operation": operation})
        return {"success": True, "data": data}
