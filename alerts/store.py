"""
alerts/store.py -- SQLAlchemy-backed, owner-scoped persistence for alerts.

Uses SQLAlchemy Core (not ORM) so the dataclass in alerts/models.py remains
the authoritative domain representation.

Pattern: Repository + Data Mapper. AlertStore is the repository;
_row_to_alert is the mapper. Route handlers never touch SQL directly.

Ownership:
  Every method takes owner_id and every statement filters on it. An alert is
  never addressable by id alone. Writes are a single
  UPDATE ... WHERE id = :id AND user_id = :owner RETURNING * statement, so
  there is no read-then-write window in which another owner's row could be
  touched. A miss -- wrong id or wrong owner, indistinguishably -- raises
  NotFoundError.

  Two concurrent updates to the same alert both succeed; the last write wins.

Timestamps:
  modified is set from core.clock on every write and never taken from input.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = AlertStore()                               # DATABASE_URL default
    store = AlertStore("postgresql://user:pw@host/db") # PostgreSQL
    alert = store.create_alert(owner_id, "123 Main", "price>100", "2024-01-01T00:00:00Z")
    store.update_alert(owner_id, alert.id, pinned=True)
    store.soft_delete(owner_id, alert.id)
    store.restore(owner_id, alert.id)
    store.close()
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Column, Index, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from alerts.models import Alert
from core.clock import now_iso
from core.config import get_settings
from core.db import make_engine, store_errors
from core.errors import InvalidInput, NotFoundError, ValidationError

logger = logging.getLogger("alertservice.alerts")

# Domain field name -> column name. Only these are writable through update_alert().
_UPDATABLE: dict[str, str] = {
    "address": "address",
    "alert_condition": "alert",
    "time": "time",
    "pinned": "pinned",
}

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_alerts = Table(
    "alerts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),
    Column("address", Text, nullable=False),
    Column("alert", Text, nullable=False),
    Column("time", Text, nullable=False),
    Column("pinned", Integer, nullable=False, server_default="0"),  # boolean stored as 0/1
    Column("deleted", Integer, nullable=False, server_default="0"),  # boolean stored as 0/1
    Column("created_at", String(32), nullable=False),
    Column("modified", String(32), nullable=False),
    Index("ix_alerts_user_id", "user_id"),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AlertStore:
    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        with store_errors("alerts schema"):
            metadata.create_all(self.engine)

    def list_alerts(self, owner_id: int, include_deleted: bool = True) -> list[Alert]:
        """Return the owner's alerts, newest first.

        Soft-deleted alerts are included unless include_deleted is False.
        """
        query = _alerts.select().where(_alerts.c.user_id == owner_id)
        if not include_deleted:
            query = query.where(_alerts.c.deleted == 0)
        query = query.order_by(_alerts.c.id.desc())
        with store_errors("list_alerts"), self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_alert(r) for r in rows]

    def create_alert(self, owner_id: int, address: str, alert_condition: str, time: str) -> Alert:
        """Insert a new alert owned by owner_id and return it.

        Raises InvalidInput if any business field is missing or empty.
        pinned and deleted start False; created_at and modified are set here.
        """
        if not address or not alert_condition or not time:
            raise InvalidInput("Missing fields.")
        stamp = now_iso()
        with store_errors("create_alert"), self.engine.connect() as conn:
            row = conn.execute(
                _alerts.insert()
                .values(
                    user_id=owner_id,
                    address=address,
                    alert=alert_condition,
                    time=time,
                    pinned=0,
                    deleted=0,
                    created_at=stamp,
                    modified=stamp,
                )
                .returning(*_alerts.c)
            ).fetchone()
            conn.commit()
        logger.info("Alert %s created for user_id=%s", row.id, owner_id)
        return _row_to_alert(row)

    def update_alert(self, owner_id: int, alert_id: int, **fields: Any) -> Alert:
        """Apply a partial update to one of the owner's alerts.

        Accepted fields: address, alert_condition, time, pinned. Unknown keys
        raise ValidationError rather than being silently written. modified is
        always overwritten with the server clock.

        Raises NotFoundError if no alert matches (alert_id, owner_id).
        """
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValidationError(f"Unknown alert fields: {', '.join(sorted(unknown))}")
        if not fields:
            raise ValidationError("No fields to update.")
        values: dict[str, Any] = {_UPDATABLE[k]: v for k, v in fields.items()}
        if "pinned" in values:
            values["pinned"] = 1 if values["pinned"] else 0
        return self._scoped_update(owner_id, alert_id, values, "update_alert")

    def soft_delete(self, owner_id: int, alert_id: int) -> Alert:
        """Mark one of the owner's alerts deleted. Raises NotFoundError on a miss."""
        return self._scoped_update(owner_id, alert_id, {"deleted": 1}, "soft_delete")

    def restore(self, owner_id: int, alert_id: int) -> Alert:
        """Clear the deleted flag on one of the owner's alerts. Raises NotFoundError on a miss."""
        return self._scoped_update(owner_id, alert_id, {"deleted": 0}, "restore")

    def _scoped_update(self, owner_id: int, alert_id: int, values: dict[str, Any], operation: str) -> Alert:
        values["modified"] = now_iso()
        with store_errors(operation), self.engine.connect() as conn:
            row = conn.execute(
                _alerts.update()
                .where((_alerts.c.id == alert_id) & (_alerts.c.user_id == owner_id))
                .values(**values)
                .returning(*_alerts.c)
            ).fetchone()
            conn.commit()
        if row is None:
            raise NotFoundError("Alert not found.")
        logger.info("Alert %s %s by user_id=%s", alert_id, operation, owner_id)
        return _row_to_alert(row)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_alert(row) -> Alert:
    return Alert(
        id=row.id,
        user_id=row.user_id,
        address=row.address,
        alert_condition=row.alert,
        time=row.time,
        pinned=bool(row.pinned),
        deleted=bool(row.deleted),
        created_at=row.created_at,
        modified=row.modified,
    )
