"""Unit tests for alerts/store.py -- owner-scoped AlertStore.

Covers:
- create_alert() defaults (pinned/deleted False, server timestamps)
- create_alert() rejects missing business fields with InvalidInput
- list_alerts() returns only the owner's alerts; include_deleted filter
- update_alert() partial writes, whitelist, and cross-owner NotFoundError
- soft_delete() / restore() round trip and modified ordering
"""

from __future__ import annotations

import pytest

from alerts.store import AlertStore
from core.errors import InvalidInput, NotFoundError, ValidationError

OWNER_A = 1
OWNER_B = 2


@pytest.fixture
def alert(alert_store: AlertStore):
    return alert_store.create_alert(OWNER_A, "123 Main", "price>100", "2024-01-01T00:00:00Z")


def _only_alert(store: AlertStore, owner_id: int):
    """Return the owner's single alert, read back through the scoped list."""
    alerts = store.list_alerts(owner_id)
    assert len(alerts) == 1
    return alerts[0]


class TestCreate:
    def test_defaults(self, alert) -> None:
        assert alert.id is not None
        assert alert.user_id == OWNER_A
        assert alert.address == "123 Main"
        assert alert.alert_condition == "price>100"
        assert alert.time == "2024-01-01T00:00:00Z"
        assert alert.pinned is False
        assert alert.deleted is False
        assert alert.modified
        assert alert.modified == alert.created_at

    @pytest.mark.parametrize(
        "address,condition,time",
        [("", "c", "t"), ("a", "", "t"), ("a", "c", ""), (None, "c", "t")],
    )
    def test_missing_field_rejected(self, alert_store: AlertStore, address, condition, time) -> None:
        with pytest.raises(InvalidInput):
            alert_store.create_alert(OWNER_A, address, condition, time)
        assert alert_store.list_alerts(OWNER_A) == []


class TestList:
    def test_scoped_to_owner(self, alert_store: AlertStore, alert) -> None:
        other = alert_store.create_alert(OWNER_B, "9 Elm", "x", "t")
        ids_a = [a.id for a in alert_store.list_alerts(OWNER_A)]
        ids_b = [a.id for a in alert_store.list_alerts(OWNER_B)]
        assert ids_a == [alert.id]
        assert ids_b == [other.id]

    def test_newest_first(self, alert_store: AlertStore, alert) -> None:
        newer = alert_store.create_alert(OWNER_A, "2 Oak", "y", "t")
        assert [a.id for a in alert_store.list_alerts(OWNER_A)] == [newer.id, alert.id]

    def test_deleted_included_by_default(self, alert_store: AlertStore, alert) -> None:
        alert_store.soft_delete(OWNER_A, alert.id)
        listed = alert_store.list_alerts(OWNER_A)
        assert len(listed) == 1
        assert listed[0].deleted is True

    def test_deleted_excluded_on_request(self, alert_store: AlertStore, alert) -> None:
        alert_store.soft_delete(OWNER_A, alert.id)
        assert alert_store.list_alerts(OWNER_A, include_deleted=False) == []


class TestUpdate:
    def test_partial_update(self, alert_store: AlertStore, alert) -> None:
        updated = alert_store.update_alert(OWNER_A, alert.id, pinned=True, address="5 Pine")
        assert updated.pinned is True
        assert updated.address == "5 Pine"
        assert updated.alert_condition == "price>100"
        assert updated.modified > alert.modified
        assert updated.created_at == alert.created_at

    def test_other_owner_gets_not_found(self, alert_store: AlertStore, alert) -> None:
        """The id exists, but not for OWNER_B -- ownership gates visibility."""
        with pytest.raises(NotFoundError):
            alert_store.update_alert(OWNER_B, alert.id, pinned=True)
        assert _only_alert(alert_store, OWNER_A).pinned is False

    def test_nonexistent_id_gets_not_found(self, alert_store: AlertStore) -> None:
        with pytest.raises(NotFoundError):
            alert_store.update_alert(OWNER_A, 999, pinned=True)

    def test_unknown_field_rejected(self, alert_store: AlertStore, alert) -> None:
        with pytest.raises(ValidationError):
            alert_store.update_alert(OWNER_A, alert.id, user_id=OWNER_B)
        with pytest.raises(ValidationError):
            alert_store.update_alert(OWNER_A, alert.id, modified="1999-01-01")
        assert _only_alert(alert_store, OWNER_A).user_id == OWNER_A

    def test_empty_update_rejected(self, alert_store: AlertStore, alert) -> None:
        with pytest.raises(ValidationError):
            alert_store.update_alert(OWNER_A, alert.id)


class TestSoftDeleteRestore:
    def test_round_trip(self, alert_store: AlertStore, alert) -> None:
        deleted = alert_store.soft_delete(OWNER_A, alert.id)
        assert deleted.deleted is True
        restored = alert_store.restore(OWNER_A, alert.id)
        assert restored.deleted is False
        assert alert.created_at < deleted.modified < restored.modified

    def test_other_owner_cannot_delete_or_restore(self, alert_store: AlertStore, alert) -> None:
        with pytest.raises(NotFoundError):
            alert_store.soft_delete(OWNER_B, alert.id)
        assert _only_alert(alert_store, OWNER_A).deleted is False

        alert_store.soft_delete(OWNER_A, alert.id)
        with pytest.raises(NotFoundError):
            alert_store.restore(OWNER_B, alert.id)
        assert _only_alert(alert_store, OWNER_A).deleted is True

    def test_missing_alert(self, alert_store: AlertStore) -> None:
        with pytest.raises(NotFoundError):
            alert_store.soft_delete(OWNER_A, 404)
        with pytest.raises(NotFoundError):
            alert_store.restore(OWNER_A, 404)

