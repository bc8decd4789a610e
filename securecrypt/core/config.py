"""
Service Configuration
=====================

Two small, frozen sections plus a process-wide holder:

    key_exchange  DH session retention (TTL, capacity)
    logging       level and handler selection

Only operational knobs live here. Algorithms, key sizes, curves, the DH
group and Argon2 costs are constants in the modules that use them and
cannot be overridden.

Environment overrides use ``<PREFIX>_<SECTION>__<FIELD>``:

    SECURECRYPT_KEY_EXCHANGE__SESSION_TTL_SECONDS=120
    SECURECRYPT_LOGGING__LEVEL=DEBUG
    SECURECRYPT_LOGGING__ENABLE_FILE=true
    SECURECRYPT_LOGGING__LOG_DIR=/var/log/securecrypt

Names that look like they carry secrets are never read from the
environment.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Final, Optional

DH_GROUP_BITS: Final[int] = 2048
MAX_SESSION_TTL_SECONDS: Final[int] = 86_400
LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

_SECRET_MARKERS: Final[tuple[str, ...]] = (
    "password", "secret", "key_material", "token", "private", "credential",
)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


# "section.field" -> converter from the raw environment string
_ENV_FIELDS: Final[dict[str, Callable[[str], Any]]] = {
    "key_exchange.session_ttl_seconds": int,
    "key_exchange.max_sessions": int,
    "logging.level": str.strip,
    "logging.enable_console": _parse_bool,
    "logging.enable_file": _parse_bool,
    "logging.enable_json": _parse_bool,
    "logging.log_dir": Path,
}


def _looks_secret(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


@dataclass(frozen=True, slots=True)
class KeyExchangeConfig:
    """
    Retention policy for pending Diffie-Hellman sessions.

    Attributes:
        session_ttl_seconds: Lifetime of an uncompleted session
        max_sessions: Upper bound on live sessions held at once
        group_bits: Size of the fixed MODP group (informational)
    """

    session_ttl_seconds: int = 300
    max_sessions: int = 10_000
    group_bits: int = field(default=DH_GROUP_BITS, init=False)

    def __post_init__(self) -> None:
        if not 0 < self.session_ttl_seconds <= MAX_SESSION_TTL_SECONDS:
            raise ValueError(
                f"session_ttl_seconds must be in [1, {MAX_SESSION_TTL_SECONDS}], "
                f"got {self.session_ttl_seconds}"
            )
        if self.max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {self.max_sessions}")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Where log records go and from which level."""

    level: str = "INFO"
    enable_console: bool = True
    enable_file: bool = False
    enable_json: bool = False
    log_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {self.level!r}")
        if self.log_dir is not None and not self.log_dir.is_absolute():
            raise ValueError(f"log_dir must be absolute, got {self.log_dir}")


class SecureConfig:
    """
    Frozen bundle of all configuration sections.

    Usage:
        config = SecureConfig.load()
        config.key_exchange.session_ttl_seconds
        config.logging.level

        # process-wide instance, loaded lazily from the environment
        SecureConfig.get_instance()
    """

    __slots__ = ("_key_exchange", "_logging", "_fingerprint", "_sealed")

    _instance: Optional[SecureConfig] = None

    def __init__(
        self,
        key_exchange: Optional[KeyExchangeConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        object.__setattr__(self, "_sealed", False)
        self._key_exchange = key_exchange or KeyExchangeConfig()
        self._logging = logging or LoggingConfig()
        self._fingerprint = hashlib.sha256(
            repr((self._key_exchange, self._logging)).encode()
        ).hexdigest()[:16]
        self._sealed = True

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_sealed", False):
            raise AttributeError(f"SecureConfig is read-only; cannot set {name}")
        object.__setattr__(self, name, value)

    @property
    def key_exchange(self) -> KeyExchangeConfig:
        return self._key_exchange

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def config_hash(self) -> str:
        """Short fingerprint of the effective settings, safe to log."""
        return self._fingerprint

    @classmethod
    def load(cls, env_prefix: str = "SECURECRYPT") -> SecureConfig:
        """
        Build a configuration from defaults plus environment overrides.

        Raises:
            ValueError: If an override cannot be converted or is out of range
        """
        sections: dict[str, dict[str, Any]] = {"key_exchange": {}, "logging": {}}

        for dotted, raw in cls._parse_env_overrides(env_prefix).items():
            convert = _ENV_FIELDS.get(dotted)
            if convert is None:
                continue
            section, name = dotted.split(".", 1)
            try:
                sections[section][name] = convert(raw)
            except ValueError:
                raise ValueError(f"Invalid value for {dotted}: {raw!r}") from None

        return cls(
            key_exchange=KeyExchangeConfig(**sections["key_exchange"]),
            logging=LoggingConfig(**sections["logging"]),
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Map ``<PREFIX>_SECTION__FIELD`` variables to ``section.field`` keys."""
        head = f"{prefix.upper()}_"
        overrides: dict[str, str] = {}
        for name, value in os.environ.items():
            if not name.startswith(head):
                continue
            dotted = name[len(head):].lower().replace("__", ".")
            if not _looks_secret(dotted):
                overrides[dotted] = value
        return overrides

    @classmethod
    def get_instance(cls) -> SecureConfig:
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the process-wide instance (tests only)."""
        cls._instance = None

    def __repr__(self) -> str:
        return f"SecureConfig(hash={self._fingerprint})"
