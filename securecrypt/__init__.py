"""
SecureCrypt - Cryptographic Primitives as Operations
====================================================

Symmetric authenticated encryption, RSA-OAEP, DSA/ECDSA signatures,
Diffie-Hellman key exchange and Argon2id password hashing for client
applications that should not implement cryptography themselves.

Security Notice:
- No key material, plaintext or password is logged
- Decryption failures never reveal which check failed
- The caller owns all key material except pending key-exchange sessions
"""

from securecrypt.core.config import SecureConfig
from securecrypt.core.errors import CryptoError
from securecrypt.service import CryptoService, error_status

__version__ = "0.1.0"

__all__ = ["CryptoService", "CryptoError", "SecureConfig", "error_status", "__version__"]
