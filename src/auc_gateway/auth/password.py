"""Password hashing utilities using bcrypt.

Uses the ``bcrypt`` library directly (>=4.0); passlib is unmaintained and
incompatible with bcrypt >=4.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes; longer inputs raise on bcrypt >= 4.1
_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
