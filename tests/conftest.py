"""
Shared fixtures: key pairs are expensive, so they are generated once.
"""

import pytest

from securecrypt.core.config import KeyExchangeConfig, SecureConfig
from securecrypt.core.crypto.asymmetric import AsymmetricEngine
from securecrypt.core.crypto.key_exchange import KeyExchangeSession
from securecrypt.core.crypto.session_store import DHSessionStore
from securecrypt.core.crypto.symmetric import SymmetricEngine
from securecrypt.service import CryptoService


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def asymmetric_engine():
    return AsymmetricEngine()


@pytest.fixture
def symmetric_engine():
    return SymmetricEngine()


@pytest.fixture(scope="session")
def rsa_pair(asymmetric_engine):
    return asymmetric_engine.generate_rsa_key_pair(2048)


@pytest.fixture(scope="session")
def other_rsa_pair(asymmetric_engine):
    return asymmetric_engine.generate_rsa_key_pair(2048)


@pytest.fixture(scope="session")
def ecdsa_pair(asymmetric_engine):
    return asymmetric_engine.generate_ecdsa_key_pair("P-256")


@pytest.fixture(scope="session")
def dsa_pair(asymmetric_engine):
    return asymmetric_engine.generate_dsa_key_pair(2048)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_store(clock):
    return DHSessionStore(ttl_seconds=60, max_sessions=8, clock=clock)


@pytest.fixture
def key_exchange(session_store):
    return KeyExchangeSession(session_store)


@pytest.fixture
def service(session_store):
    config = SecureConfig(key_exchange=KeyExchangeConfig(session_ttl_seconds=60))
    return CryptoService(config=config, session_store=session_store)


@pytest.fixture(autouse=True)
def _reset_config_singleton():
    yield
    SecureConfig.reset_instance()
