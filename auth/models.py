"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in alerts/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or alerts/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is unique and compared case-sensitively, exactly as stored.
    password_hash is a bcrypt digest. It never leaves the server: API
    response models expose only id and email.

    id is None before the record is written to the database.
    """

    email: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Session:
    """A live login, held only in process memory.

    user_id references a User; it is not an ownership link. created_at lets a
    max-age policy be applied without changing the registry.
    """

    token: str
    user_id: int
    created_at: float  # time.time() at issue
