"""
The PostgreSQL statements the store emits, compiled without a database.
"""
import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from vrdb import store


def compiled(stmt) -> str:
    return " ".join(str(stmt.compile(dialect=postgresql.dialect())).split())


@pytest.fixture
def pg_db():
    db = MagicMock()
    db.get_bind.return_value.dialect.name = "postgresql"
    result = db.execute.return_value
    result.scalar_one.return_value = uuid.uuid4()
    result.scalar_one_or_none.return_value = uuid.uuid4()
    return db


def statements(db):
    return [compiled(c.args[0]) for c in db.execute.call_args_list]


def test_cloud_upsert_updates_recipients_on_conflict(pg_db):
    store.cloud_upsert(pg_db, "acme.example.com", "a@example.com")

    (sql,) = statements(pg_db)
    assert sql.startswith("INSERT INTO clouds")
    assert "ON CONFLICT (fqdn) DO UPDATE SET email_recipients = excluded.email_recipients" in sql
    assert sql.endswith("RETURNING clouds.id")


def test_cloud_get_id_does_nothing_on_conflict(pg_db):
    store.cloud_get_id(pg_db, "acme.example.com")

    (sql,) = statements(pg_db)
    assert "ON CONFLICT (fqdn) DO NOTHING" in sql
    assert sql.endswith("RETURNING clouds.id")


def test_cloud_get_id_falls_back_to_lookup(pg_db):
    existing = uuid.uuid4()
    pg_db.execute.return_value.scalar_one_or_none.return_value = None
    pg_db.execute.return_value.scalar_one.return_value = existing

    assert store.cloud_get_id(pg_db, "acme.example.com") == existing

    insert_sql, select_sql = statements(pg_db)
    assert "DO NOTHING" in insert_sql
    assert select_sql.startswith("SELECT clouds.id FROM clouds WHERE clouds.fqdn =")


def test_snapshot_upsert_overwrites_only_success_rates(pg_db):
    store.snapshot_upsert(pg_db, "acme.example.com", "2024-01-01", 92, 90, 88)

    sql = statements(pg_db)[-1]
    assert sql.startswith("INSERT INTO snapshots")
    assert "ON CONFLICT (cloud_id, snapshot_date) DO UPDATE SET" in sql
    for column in ("success_last24h", "success_last7d", "success_last30d"):
        assert f"{column} = excluded.{column}" in sql
    assert "lab_issues = excluded" not in sql
    assert sql.endswith("RETURNING snapshots.id")


def test_snapshot_set_issues_overwrites_only_counters(pg_db):
    store.snapshot_set_issues(pg_db, "acme.example.com", "2024-01-01", 1, 2, 3)

    sql = statements(pg_db)[-1]
    for column in ("lab_issues", "orchestration_issues", "scripting_issues"):
        assert f"{column} = excluded.{column}" in sql
    assert "success_last24h = excluded" not in sql


def test_snapshot_get_id_does_nothing_on_conflict(pg_db):
    store.snapshot_get_id(pg_db, "acme.example.com", "2024-01-01")

    cloud_sql, snapshot_sql = statements(pg_db)
    assert cloud_sql.startswith("INSERT INTO clouds")
    assert "ON CONFLICT (cloud_id, snapshot_date) DO NOTHING" in snapshot_sql


@pytest.mark.parametrize(
    "add, table, args",
    [
        (store.device_add, "devices", (1, "iPhone X", "iOS 17.2", "ABC123", 5)),
        (store.test_add, "tests", (1, "Login", 30, 5, 10)),
        (store.recommendation_add, "recommendations", (1, "Replace top 5 failing devices", 12, None)),
    ],
)
def test_appenders_insert_plainly(pg_db, add, table, args):
    add(pg_db, "acme.example.com", "2024-01-01", *args)

    sql = statements(pg_db)[-1]
    assert sql.startswith(f"INSERT INTO {table}")
    assert "ON CONFLICT" not in sql
    assert sql.endswith(f"RETURNING {table}.id")
