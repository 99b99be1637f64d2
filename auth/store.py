"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as alerts/store.py).
UserStore is the repository; _row_to_user is the mapper. Route and
dependency code never touches SQL directly.

Uniqueness:
  users.email carries a UNIQUE constraint, and that constraint -- not the
  route's get_by_email() pre-check -- is what guarantees one account per
  email. Two concurrent registrations can both pass the pre-check; the
  second INSERT then fails with IntegrityError, which create_user() surfaces
  as DuplicateIdentity.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/ or alerts/.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.clock import now_iso
from core.config import get_settings
from core.db import make_engine, store_errors
from core.errors import DuplicateIdentity, UpstreamError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore()
        user = store.create_user("a@x.com", hash_password("secret"))
        same = store.get_by_email("a@x.com")
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        with store_errors("users schema"):
            _metadata.create_all(self.engine)

    def create_user(self, email: str, password_hash: str) -> User:
        """Insert a new user and return it with its assigned ID.

        Raises DuplicateIdentity if the email is already registered, including
        when a concurrent request inserted it after the caller's pre-check.
        """
        with store_errors("create_user"), self.engine.connect() as conn:
            try:
                row = conn.execute(
                    _users.insert()
                    .values(email=email, password_hash=password_hash, created_at=now_iso())
                    .returning(*_users.c)
                ).fetchone()
                conn.commit()
            except IntegrityError as exc:
                raise DuplicateIdentity() from exc
        return _row_to_user(row)

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with store_errors("get_by_email"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email).limit(1)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with store_errors("get_by_id"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id).limit(1)).fetchone()
        return _row_to_user(row) if row is not None else None

    def ping(self) -> bool:
        """Return True if the backing store answers a trivial query."""
        try:
            with store_errors("ping"), self.engine.connect() as conn:
                conn.execute(_users.select().limit(1)).fetchall()
        except UpstreamError:
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )
