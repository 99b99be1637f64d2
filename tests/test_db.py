"""Unit tests for core/db.py -- engine pooling and backend error translation."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.pool import SingletonThreadPool

from core.db import make_engine, store_errors
from core.errors import NotFoundError, UpstreamError


@pytest.mark.parametrize(
    "db_url",
    [
        "sqlite://",
        "sqlite:///:memory:",
        "sqlite:///file:test_db_pool?mode=memory&cache=shared&uri=true",
    ],
)
def test_memory_urls_keep_one_connection_per_thread(db_url: str) -> None:
    engine = make_engine(db_url)
    try:
        assert isinstance(engine.pool, SingletonThreadPool)
    finally:
        engine.dispose()


def test_file_url_uses_default_pool(tmp_path) -> None:
    engine = make_engine(f"sqlite:///{tmp_path / 'alerts.db'}")
    try:
        assert not isinstance(engine.pool, SingletonThreadPool)
    finally:
        engine.dispose()


class TestStoreErrors:
    def test_backend_failure_becomes_upstream(self) -> None:
        cause = OperationalError("SELECT 1", {}, Exception("disk I/O error"))
        with pytest.raises(UpstreamError) as info:
            with store_errors("list_alerts"):
                raise cause
        assert info.value.__cause__ is cause
        assert "disk" not in str(info.value)

    def test_any_sqlalchemy_error_is_mapped(self) -> None:
        with pytest.raises(UpstreamError):
            with store_errors("create_user"):
                raise IntegrityError("INSERT", {}, Exception("constraint"))

    def test_domain_errors_pass_through(self) -> None:
        with pytest.raises(NotFoundError):
            with store_errors("restore"):
                raise NotFoundError("Alert not found.")
