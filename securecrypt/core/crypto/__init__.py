"""
SecureCrypt Cryptographic Core
==============================

Components:
    1. SymmetricEngine: AES-256-CBC and ChaCha20-Poly1305
    2. AsymmetricEngine: RSA-OAEP, DSA and ECDSA
    3. KeyExchangeSession: Diffie-Hellman with TTL-bounded sessions
    4. HybridProtocol: encrypt-then-sign / verify-then-decrypt

Security Properties:
    - IVs and nonces always come from the OS CSPRNG
    - Authentication is checked before any plaintext is returned
    - Engines are stateless except for the key-exchange session store

WARNING: This module handles sensitive cryptographic material.
         Incorrect usage can compromise security.
"""

from securecrypt.core.crypto.asymmetric import (
    AsymmetricEngine,
    AsymmetricKeyPair,
    KeyAlgorithm,
    SignedMessage,
)
from securecrypt.core.crypto.envelope import CipherEnvelope
from securecrypt.core.crypto.hybrid import HybridProtocol, SignedCiphertext
from securecrypt.core.crypto.key_exchange import DHSession, KeyExchangeSession
from securecrypt.core.crypto.session_store import DHSessionStore
from securecrypt.core.crypto.symmetric import SymmetricEngine

__all__ = [
    "SymmetricEngine",
    "CipherEnvelope",
    "AsymmetricEngine",
    "AsymmetricKeyPair",
    "KeyAlgorithm",
    "SignedMessage",
    "KeyExchangeSession",
    "DHSession",
    "DHSessionStore",
    "HybridProtocol",
    "SignedCiphertext",
]
