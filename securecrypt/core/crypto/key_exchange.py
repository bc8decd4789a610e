"""
Diffie-Hellman Key Exchange
===========================

Finite-field Diffie-Hellman over the RFC 3526 2048-bit MODP group with
server-held session state.

State machine:
    init(session_id)      -> Created   (stored with a TTL)
    complete(session_id)  -> Completed (removed; a replay finds nothing)

A responder that never called init() locally may complete an exchange by
supplying the initiator's prime and generator; it gets a fresh ephemeral
key pair and must send its public value back out of band.

Security Properties:
    - Sessions hold only integers (p, g, x, y); no key objects are kept
      across calls
    - The raw shared secret never leaves this module: callers receive
      SHA-256(shared secret)
    - Peer public values outside [2, p-2] are rejected
    - The shared secret is left-padded to the byte length of p before
      hashing, so both sides derive the same key whatever its leading zeros
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from typing import Final, Optional

from securecrypt.core.crypto.session_store import DHSessionStore
from securecrypt.core.errors import InvalidParameter, SessionNotFound
from securecrypt.core.logging import get_secure_logger
from securecrypt.utils.encoding import b64encode, bytes_to_int, int_to_bytes

# RFC 3526 - 2048-bit MODP Group (Group 14)
MODP_2048_PRIME: Final[int] = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3D"
    "C2007CB8A163BF0598DA48361C55D39A69163FA8FD24CF5F"
    "83655D23DCA3AD961C62F356208552BB9ED529077096966D"
    "670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9"
    "DE2BCBF6955817183995497CEA956AE515D2261898FA0510"
    "15728E5A8AACAA68FFFFFFFFFFFFFFFF", 16
)
MODP_GENERATOR: Final[int] = 2
MIN_PRIME_BITS: Final[int] = 2048
MAX_SESSION_ID_LENGTH: Final[int] = 256

logger = get_secure_logger(__name__)


@dataclass(frozen=True, slots=True)
class DHSession:
    """
    Pending exchange: group parameters plus the local ephemeral key pair.

    Attributes:
        session_id: Caller-supplied unique identifier
        prime: Group modulus p
        generator: Group generator g
        private_exponent: Local secret x
        public_value: Local public value y = g^x mod p
    """

    session_id: str
    prime: int
    generator: int
    private_exponent: int
    public_value: int

    def __repr__(self) -> str:
        """Safe representation without the private exponent."""
        return f"DHSession(id={self.session_id!r}, prime_bits={self.prime.bit_length()})"


@dataclass(frozen=True, slots=True)
class DHInitResult:
    """Public values the initiator shares with its peer."""

    session_id: str
    public_key: bytes
    prime: bytes
    generator: bytes

    def to_dict(self) -> dict[str, str]:
        return {
            "sessionId": self.session_id,
            "publicKey": b64encode(self.public_key),
            "prime": b64encode(self.prime),
            "generator": b64encode(self.generator),
        }


@dataclass(frozen=True, slots=True)
class DHCompleteResult:
    """
    Outcome of complete().

    Attributes:
        derived_key: SHA-256 of the shared secret (32 bytes)
        public_key: Responder's fresh public value; None when a stored
            session was completed
    """

    derived_key: bytes
    public_key: Optional[bytes] = None

    def to_dict(self) -> dict[str, str]:
        data = {"sharedKey": b64encode(self.derived_key)}
        if self.public_key is not None:
            data["myPublicKey"] = b64encode(self.public_key)
        return data

    def __repr__(self) -> str:
        return f"DHCompleteResult(responder={self.public_key is not None})"


def _check_group(prime: int, generator: int) -> None:
    if prime.bit_length() < MIN_PRIME_BITS:
        raise InvalidParameter(f"prime must be at least {MIN_PRIME_BITS} bits")
    if prime % 2 == 0:
        raise InvalidParameter("prime must be odd")
    if not 2 <= generator <= prime - 2:
        raise InvalidParameter("generator must be in [2, p-2]")


def _generate_exponent(prime: int, generator: int) -> tuple[int, int]:
    """Generate an ephemeral (x, y = g^x mod p) pair, x in [2, p-2]."""
    private_exponent = secrets.randbelow(prime - 3) + 2
    return private_exponent, pow(generator, private_exponent, prime)


def _derive_key(prime: int, private_exponent: int, peer_value: int) -> bytes:
    """SHA-256 of (peer^x mod p), padded to the byte length of p."""
    if not 2 <= peer_value <= prime - 2:
        raise InvalidParameter("Peer public key is out of range for the group")

    shared = pow(peer_value, private_exponent, prime)
    if shared == 1:
        raise InvalidParameter("Peer public key is not valid for the group")

    shared_secret = shared.to_bytes((prime.bit_length() + 7) // 8, "big")
    return hashlib.sha256(shared_secret).digest()


class KeyExchangeSession:
    """
    Diffie-Hellman exchange orchestrator over a DHSessionStore.

    Usage:
        exchange = KeyExchangeSession(DHSessionStore())

        # Initiator
        offer = exchange.init("chat-42")

        # Responder (no local session)
        answer = exchange.complete(
            "chat-42", offer.public_key, prime=offer.prime, generator=offer.generator
        )

        # Initiator finishes
        mine = exchange.complete("chat-42", answer.public_key)
        assert mine.derived_key == answer.derived_key
    """

    __slots__ = ("_store",)

    def __init__(self, store: DHSessionStore) -> None:
        self._store = store

    @property
    def store(self) -> DHSessionStore:
        return self._store

    def init(self, session_id: str) -> DHInitResult:
        """
        Start an exchange under ``session_id``.

        Raises:
            InvalidParameter: If session_id is empty or too long
            DuplicateSession: If a live session already uses session_id
        """
        self._check_session_id(session_id)

        private_exponent, public_value = _generate_exponent(MODP_2048_PRIME, MODP_GENERATOR)

        self._store.add(DHSession(
            session_id=session_id,
            prime=MODP_2048_PRIME,
            generator=MODP_GENERATOR,
            private_exponent=private_exponent,
            public_value=public_value,
        ))
        logger.info(
            "Key exchange session created: %s", session_id, extra={"session_id": session_id}
        )

        return DHInitResult(
            session_id=session_id,
            public_key=int_to_bytes(public_value),
            prime=int_to_bytes(MODP_2048_PRIME),
            generator=int_to_bytes(MODP_GENERATOR),
        )

    def complete(
        self,
        session_id: str,
        peer_public_key: bytes,
        prime: Optional[bytes] = None,
        generator: Optional[bytes] = None,
    ) -> DHCompleteResult:
        """
        Finish an exchange and return the derived key.

        A stored session is consumed even if the peer value turns out to be
        invalid; the exchange must then be restarted.

        Raises:
            InvalidParameter: Bad identifier, peer value or group parameters
            SessionNotFound: No live session and no prime/generator supplied
        """
        self._check_session_id(session_id)
        if not peer_public_key:
            raise InvalidParameter("Missing required field: otherPublicKey")
        peer_value = bytes_to_int(peer_public_key)

        session = self._store.take(session_id)
        if session is not None:
            derived = _derive_key(session.prime, session.private_exponent, peer_value)
            logger.info(
                "Key exchange session completed: %s", session_id, extra={"session_id": session_id}
            )
            return DHCompleteResult(derived_key=derived)

        if prime and generator:
            group_prime, group_generator = bytes_to_int(prime), bytes_to_int(generator)
            _check_group(group_prime, group_generator)
            private_exponent, public_value = _generate_exponent(group_prime, group_generator)
            derived = _derive_key(group_prime, private_exponent, peer_value)
            logger.info(
                "Key exchange completed as responder: %s", session_id, extra={"session_id": session_id}
            )
            return DHCompleteResult(derived_key=derived, public_key=int_to_bytes(public_value))

        raise SessionNotFound(f"No pending key exchange session {session_id!r}")

    @staticmethod
    def _check_session_id(session_id: str) -> None:
        if not isinstance(session_id, str) or not session_id.strip():
            raise InvalidParameter("Missing required field: sessionId")
        if len(session_id) > MAX_SESSION_ID_LENGTH:
            raise InvalidParameter(
                f"sessionId must be at most {MAX_SESSION_ID_LENGTH} characters"
            )
