"""
Utils module - Base64 codec and request validation helpers.
"""

from securecrypt.utils.encoding import b64decode, b64encode, decode_key, require_length
from securecrypt.utils.validators import require_field, require_int, require_text

__all__ = [
    "b64encode",
    "b64decode",
    "decode_key",
    "require_length",
    "require_field",
    "require_int",
    "require_text",
]
