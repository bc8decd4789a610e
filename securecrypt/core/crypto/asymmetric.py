"""
Asymmetric Engine
=================

RSA-OAEP encryption and DSA/ECDSA signatures.

Key Encoding:
    - Public keys: PEM, SubjectPublicKeyInfo
    - Private keys: PEM, PKCS#8, unencrypted
    At the operation boundary the PEM text travels Base64-encoded.

Security Properties:
    - OAEP with SHA-256 and MGF1-SHA-256, no automatic chunking
    - Signatures always hash the message with SHA-256 first
    - Verification never raises for a wrong signature, only for an
      unusable key or a signature that is not DER-encoded (r, s)

WARNING:
    - Private keys are returned to the caller that generated them and are
      never logged or retained.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional, Union

from cryptography.exceptions import InvalidSignature as _BackendInvalidSignature
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from securecrypt.core.errors import (
    DecryptionFailed,
    InvalidParameter,
    MalformedKeyEncoding,
    MessageTooLong,
    UnsupportedCurve,
)
from securecrypt.core.logging import get_secure_logger
from securecrypt.utils.encoding import b64encode, from_bytes, to_bytes

RSA_MIN_BITS: Final[int] = 2048
RSA_MAX_BITS: Final[int] = 4096
RSA_PUBLIC_EXPONENT: Final[int] = 65537

DSA_MIN_BITS: Final[int] = 1024
DSA_MAX_BITS: Final[int] = 3072
DSA_SUPPORTED_BITS: Final[tuple[int, ...]] = (1024, 2048, 3072)

OAEP_HASH_LEN: Final[int] = 32  # SHA-256 digest size
HASH_ALGORITHM: Final[str] = "SHA-256"

_CURVES: Final[dict[str, type[ec.EllipticCurve]]] = {
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
}
_CURVE_ALIASES: Final[dict[str, str]] = {
    "prime256v1": "P-256",
    "secp256r1": "P-256",
    "secp384r1": "P-384",
    "secp521r1": "P-521",
}

PrivateKey = Union[rsa.RSAPrivateKey, dsa.DSAPrivateKey, ec.EllipticCurvePrivateKey]
PublicKey = Union[rsa.RSAPublicKey, dsa.DSAPublicKey, ec.EllipticCurvePublicKey]

logger = get_secure_logger(__name__)


class KeyAlgorithm(Enum):
    """Asymmetric algorithm families."""
    RSA = "RSA"
    DSA = "DSA"
    ECDSA = "ECDSA"

    @classmethod
    def parse(cls, name: str) -> KeyAlgorithm:
        try:
            return cls(name.strip().upper())
        except (ValueError, AttributeError):
            raise InvalidParameter(f"Unknown algorithm: {name!r}") from None


@dataclass(frozen=True, slots=True)
class AsymmetricKeyPair:
    """
    Immutable key pair tagged with its algorithm and size or curve.

    Attributes:
        algorithm: Key family
        public_key: PEM SubjectPublicKeyInfo bytes
        private_key: PEM PKCS#8 bytes
        key_size: Modulus size in bits (RSA, DSA)
        curve: Curve name (ECDSA)
    """

    algorithm: KeyAlgorithm
    public_key: bytes
    private_key: bytes
    key_size: Optional[int] = None
    curve: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "publicKey": b64encode(self.public_key),
            "privateKey": b64encode(self.private_key),
            "algorithm": self.algorithm.value,
        }
        if self.curve is not None:
            data["curve"] = self.curve
        else:
            data["keySize"] = self.key_size
        return data

    def __repr__(self) -> str:
        """Safe representation without exposing the private key."""
        detail = self.curve if self.curve is not None else f"{self.key_size} bits"
        return f"AsymmetricKeyPair({self.algorithm.value}, {detail})"


@dataclass(frozen=True, slots=True)
class SignedMessage:
    """A message, its signature and the signing parameters."""

    message: bytes
    signature: bytes
    algorithm: KeyAlgorithm
    hash_algorithm: str = HASH_ALGORITHM

    def to_dict(self) -> dict[str, str]:
        return {
            "signature": b64encode(self.signature),
            "algorithm": self.algorithm.value,
            "hashAlgorithm": self.hash_algorithm,
        }


def normalize_curve(name: str) -> str:
    """
    Map a curve name or OpenSSL alias to its canonical NIST name.

    Raises:
        UnsupportedCurve: For any curve outside P-256, P-384 and P-521
    """
    if not isinstance(name, str):
        raise UnsupportedCurve(f"Unsupported curve: {name!r}")
    candidate = name.strip()
    if candidate.upper() in _CURVES:
        return candidate.upper()
    canonical = _CURVE_ALIASES.get(candidate.lower())
    if canonical is None:
        raise UnsupportedCurve(
            f"Unsupported curve: {name!r} (expected one of {', '.join(_CURVES)})"
        )
    return canonical


def max_oaep_plaintext(key_size: int) -> int:
    """Largest RSA-OAEP-SHA256 plaintext in bytes: k - 2*hLen - 2."""
    return (key_size + 7) // 8 - 2 * OAEP_HASH_LEN - 2


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def load_public_key(pem: bytes) -> PublicKey:
    """
    Parse a PEM public key.

    Raises:
        MalformedKeyEncoding: If the bytes are not a supported PEM public key
    """
    try:
        key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, UnsupportedAlgorithm):
        raise MalformedKeyEncoding("Public key is not a valid PEM public key") from None
    if not isinstance(key, (rsa.RSAPublicKey, dsa.DSAPublicKey, ec.EllipticCurvePublicKey)):
        raise MalformedKeyEncoding("Unsupported public key type")
    return key


def load_private_key(pem: bytes) -> PrivateKey:
    """
    Parse an unencrypted PEM private key.

    Raises:
        MalformedKeyEncoding: If the bytes are not a supported PEM private key
    """
    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm):
        raise MalformedKeyEncoding("Private key is not a valid unencrypted PEM private key") from None
    if not isinstance(key, (rsa.RSAPrivateKey, dsa.DSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise MalformedKeyEncoding("Unsupported private key type")
    return key


def is_der_signature(signature: bytes) -> bool:
    """True if ``signature`` parses as a DER SEQUENCE of two INTEGERs (r, s)."""
    if not isinstance(signature, (bytes, bytearray)) or not signature:
        return False
    try:
        decode_dss_signature(bytes(signature))
    except ValueError:
        return False
    return True


def _algorithm_of(key: PrivateKey | PublicKey) -> KeyAlgorithm:
    if isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        return KeyAlgorithm.RSA
    if isinstance(key, (dsa.DSAPrivateKey, dsa.DSAPublicKey)):
        return KeyAlgorithm.DSA
    return KeyAlgorithm.ECDSA


def _encode_pair(private_key: PrivateKey) -> tuple[bytes, bytes]:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return public_pem, private_pem


class AsymmetricEngine:
    """
    RSA, DSA and ECDSA key generation, RSA-OAEP encryption, DSA/ECDSA signing.

    Usage:
        engine = AsymmetricEngine()

        rsa_pair = engine.generate_rsa_key_pair(2048)
        ciphertext = engine.encrypt_rsa("hi", rsa_pair.public_key)
        text = engine.decrypt_rsa(ciphertext, rsa_pair.private_key)

        ec_pair = engine.generate_ecdsa_key_pair("P-256")
        signed = engine.sign("hi", ec_pair.private_key)
        assert engine.verify("hi", signed.signature, ec_pair.public_key)

    Security Notes:
        - The engine is stateless; keys are parsed per call from PEM
        - Never pass raw, unhashed input to a DSA/ECDSA primitive
    """

    __slots__ = ()

    # -- key generation -------------------------------------------------

    def generate_rsa_key_pair(self, key_size: int) -> AsymmetricKeyPair:
        """
        Generate an RSA key pair.

        Raises:
            InvalidParameter: If key_size is outside [2048, 4096]
        """
        if isinstance(key_size, bool) or not isinstance(key_size, int):
            raise InvalidParameter("keySize must be an integer")
        if not RSA_MIN_BITS <= key_size <= RSA_MAX_BITS:
            raise InvalidParameter(
                f"RSA key size must be between {RSA_MIN_BITS} and {RSA_MAX_BITS} bits"
            )

        private_key = rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT,
            key_size=key_size,
        )
        public_pem, private_pem = _encode_pair(private_key)

        logger.info("Generated RSA key pair: key_size=%d", key_size)
        return AsymmetricKeyPair(KeyAlgorithm.RSA, public_pem, private_pem, key_size=key_size)

    def generate_dsa_key_pair(self, key_size: int) -> AsymmetricKeyPair:
        """
        Generate a DSA key pair.

        Raises:
            InvalidParameter: If key_size is outside [1024, 3072] or is not
                one of the standard sizes 1024, 2048, 3072
        """
        if isinstance(key_size, bool) or not isinstance(key_size, int):
            raise InvalidParameter("keySize must be an integer")
        if not DSA_MIN_BITS <= key_size <= DSA_MAX_BITS:
            raise InvalidParameter(
                f"DSA key size must be between {DSA_MIN_BITS} and {DSA_MAX_BITS} bits"
            )
        if key_size not in DSA_SUPPORTED_BITS:
            raise InvalidParameter(
                f"DSA key size must be one of {', '.join(map(str, DSA_SUPPORTED_BITS))}"
            )

        private_key = dsa.generate_private_key(key_size=key_size)
        public_pem, private_pem = _encode_pair(private_key)

        logger.info("Generated DSA key pair: key_size=%d", key_size)
        return AsymmetricKeyPair(KeyAlgorithm.DSA, public_pem, private_pem, key_size=key_size)

    def generate_ecdsa_key_pair(self, curve: str) -> AsymmetricKeyPair:
        """
        Generate an ECDSA key pair on a NIST prime curve.

        Raises:
            UnsupportedCurve: For any curve outside P-256, P-384 and P-521
        """
        canonical = normalize_curve(curve)

        private_key = ec.generate_private_key(_CURVES[canonical]())
        public_pem, private_pem = _encode_pair(private_key)

        logger.info("Generated ECDSA key pair: curve=%s", canonical)
        return AsymmetricKeyPair(KeyAlgorithm.ECDSA, public_pem, private_pem, curve=canonical)

    # -- RSA-OAEP -------------------------------------------------------

    def encrypt_rsa(self, text: str | bytes, public_key: bytes) -> bytes:
        """
        Encrypt with RSA-OAEP (SHA-256).

        Raises:
            MalformedKeyEncoding: If the public key cannot be parsed
            InvalidParameter: If the key is not an RSA key
            MessageTooLong: If the plaintext exceeds k - 2*hLen - 2 bytes
        """
        key = load_public_key(public_key)
        if not isinstance(key, rsa.RSAPublicKey):
            raise InvalidParameter("RSA encryption requires an RSA public key")

        data = to_bytes(text)
        limit = max_oaep_plaintext(key.key_size)
        if len(data) > limit:
            raise MessageTooLong(
                f"Message is {len(data)} bytes; RSA-OAEP with a {key.key_size}-bit key "
                f"accepts at most {limit}. Use hybrid or symmetric encryption."
            )

        ciphertext = key.encrypt(data, _oaep())
        logger.debug("RSA-OAEP encrypt: key_size=%d", key.key_size)
        return ciphertext

    def decrypt_rsa(self, ciphertext: bytes, private_key: bytes) -> str:
        """
        Decrypt RSA-OAEP ciphertext.

        Raises:
            MalformedKeyEncoding: If the private key cannot be parsed
            InvalidParameter: If the key is not an RSA key
            DecryptionFailed: On any padding or key mismatch
        """
        key = load_private_key(private_key)
        if not isinstance(key, rsa.RSAPrivateKey):
            raise InvalidParameter("RSA decryption requires an RSA private key")

        try:
            plaintext = key.decrypt(ciphertext, _oaep())
            return from_bytes(plaintext)
        except (ValueError, UnicodeDecodeError):
            logger.warning("RSA-OAEP decrypt rejected")
            raise DecryptionFailed() from None

    # -- signatures -----------------------------------------------------

    def sign(
        self,
        message: str | bytes,
        private_key: bytes,
        algorithm: Optional[str | KeyAlgorithm] = None,
    ) -> SignedMessage:
        """
        Sign SHA-256(message) with a DSA or ECDSA private key.

        Args:
            message: Text or bytes to sign
            private_key: PEM PKCS#8 private key
            algorithm: Expected key family ("DSA" or "ECDSA"); inferred from
                the key when omitted

        Raises:
            MalformedKeyEncoding: If the private key cannot be parsed
            InvalidParameter: If the key is not DSA/ECDSA or does not match
                ``algorithm``
        """
        key = load_private_key(private_key)
        actual = _algorithm_of(key)

        if algorithm is not None:
            expected = algorithm if isinstance(algorithm, KeyAlgorithm) else KeyAlgorithm.parse(algorithm)
            if expected is not actual:
                raise InvalidParameter(
                    f"Signing algorithm {expected.value} does not match the {actual.value} key"
                )

        data = to_bytes(message)
        if isinstance(key, dsa.DSAPrivateKey):
            signature = key.sign(data, hashes.SHA256())
        elif isinstance(key, ec.EllipticCurvePrivateKey):
            signature = key.sign(data, ec.ECDSA(hashes.SHA256()))
        else:
            raise InvalidParameter("Signing requires a DSA or ECDSA private key")

        logger.debug("Signed message: algorithm=%s", actual.value)
        return SignedMessage(message=data, signature=signature, algorithm=actual)

    def verify(self, message: str | bytes, signature: bytes, public_key: bytes) -> bool:
        """
        Verify a DSA/ECDSA signature over SHA-256(message).

        Returns:
            True if valid, False otherwise (a normal outcome)

        Raises:
            MalformedKeyEncoding: If the public key cannot be parsed
            InvalidParameter: If the key is not DSA/ECDSA, or the signature
                is not a DER-encoded (r, s) pair
        """
        key = load_public_key(public_key)
        if not isinstance(key, (dsa.DSAPublicKey, ec.EllipticCurvePublicKey)):
            raise InvalidParameter("Verification requires a DSA or ECDSA public key")
        if not is_der_signature(signature):
            raise InvalidParameter("Signature is not a DER-encoded DSA/ECDSA signature")
        data = to_bytes(message)

        try:
            if isinstance(key, dsa.DSAPublicKey):
                key.verify(signature, data, hashes.SHA256())
            else:
                key.verify(signature, data, ec.ECDSA(hashes.SHA256()))
        except _BackendInvalidSignature:
            return False

        return True
