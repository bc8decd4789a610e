"""
Core module - Contains configuration, logging, errors and the engines.
"""

from securecrypt.core.config import SecureConfig
from securecrypt.core.logging import SecureLogFilter, get_secure_logger

__all__ = ["SecureConfig", "get_secure_logger", "SecureLogFilter"]
