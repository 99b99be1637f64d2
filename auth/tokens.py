"""
auth/tokens.py -- Password hashing, session token generation, and login.

Security design decisions:
  Passwords: bcrypt directly (no passlib wrapper). The salt is generated per
       call and embedded in the digest, so no separate salt column exists.
       Cost factor comes from Settings.bcrypt_rounds (default 10). A digest
       that bcrypt cannot parse is treated as a non-match, never an error.

       bcrypt only reads the first 72 bytes of its input and current releases
       raise on anything longer. The API layer rejects such passwords before
       they reach hash_password().

  Timing: _DUMMY_HASH enables timing equalization in authenticate_user() so
       response time does not reveal whether an email is registered.

  Session tokens: secrets.token_hex(32) gives 256 bits of entropy as a
       fixed-length 64-character hex string.

Layer rule: no imports from api/ or alerts/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING

import bcrypt

from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("alertservice.auth")

_settings = get_settings()

# Longest password bcrypt will accept, in UTF-8 bytes.
MAX_PASSWORD_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt digest of the given plaintext password."""
    salt = bcrypt.gensalt(rounds=rounds or _settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt digest.

    Malformed digests, non-ASCII garbage, and over-long inputs all raise
    inside bcrypt; every one of them is a non-match.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("alertservice_timing_dummy")


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------


def generate_token() -> str:
    """Return a new opaque session token: 64 hex chars, 256 bits of entropy."""
    return secrets.token_hex(32)


# ---------------------------------------------------------------------------
# Login (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the email exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real digest (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
