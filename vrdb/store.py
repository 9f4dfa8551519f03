"""
Write path for the Value Realization tables.

Callers go through these functions instead of issuing INSERT/UPDATE statements
themselves, so the table layout can change without breaking them. Every
function takes an open SQLAlchemy Session, runs inside the caller's
transaction and never commits; wrap calls in ``session_scope()`` (or commit
yourself) to make them durable.

Each write is a single INSERT ... ON CONFLICT statement, so concurrent callers
racing on the same cloud or snapshot are serialized by the database itself.
Constraint violations (``sqlalchemy.exc.IntegrityError``) propagate as-is.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Union
from uuid import UUID

from sqlalchemy import Table, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from vrdb.models import Cloud, DeviceFinding, Recommendation, Snapshot, TestFinding

logger = logging.getLogger(__name__)

DateLike = Union[date, str]

clouds: Table = Cloud.__table__
snapshots: Table = Snapshot.__table__
devices: Table = DeviceFinding.__table__
tests: Table = TestFinding.__table__
recommendations: Table = Recommendation.__table__


def as_date(value: DateLike) -> date:
    """
    Accept a date or an ISO ``YYYY-MM-DD`` string. Raises ValueError otherwise.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError(f"Expected a date or ISO date string, got {type(value).__name__}")


def _insert(db: Session, table: Table) -> Any:
    # ON CONFLICT is dialect specific; SQLite is only used by the test suite
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert(table)
    return pg_insert(table)


# ---------------------------------------------------------------------
# clouds
# ---------------------------------------------------------------------

def cloud_upsert(db: Session, fqdn: str, emails: Optional[str]) -> UUID:
    """
    Insert a cloud, or overwrite the recipient list of the existing one.
    Returns the cloud id either way.
    """
    stmt = _insert(db, clouds).values(fqdn=fqdn, email_recipients=emails)
    stmt = stmt.on_conflict_do_update(
        index_elements=[clouds.c.fqdn],
        set_={"email_recipients": stmt.excluded.email_recipients},
    ).returning(clouds.c.id)

    cloud_id = db.execute(stmt).scalar_one()
    logger.debug("cloud_upsert fqdn=%s id=%s", fqdn, cloud_id)
    return cloud_id


def cloud_get_id(db: Session, fqdn: str) -> UUID:
    """
    Id of the cloud for ``fqdn``, creating it (without recipients) if absent.
    An existing cloud is never modified.
    """
    stmt = (
        _insert(db, clouds)
        .values(fqdn=fqdn)
        .on_conflict_do_nothing(index_elements=[clouds.c.fqdn])
        .returning(clouds.c.id)
    )
    cloud_id = db.execute(stmt).scalar_one_or_none()
    if cloud_id is None:
        # DO NOTHING returns no row when the cloud already existed
        cloud_id = db.execute(select(clouds.c.id).where(clouds.c.fqdn == fqdn)).scalar_one()
    else:
        logger.debug("created cloud fqdn=%s id=%s", fqdn, cloud_id)
    return cloud_id


# ---------------------------------------------------------------------
# snapshots
# ---------------------------------------------------------------------

def snapshot_upsert(
    db: Session,
    fqdn: str,
    snapshot_date: DateLike,
    success_last24h: Optional[int],
    success_last7d: Optional[int],
    success_last30d: Optional[int],
) -> UUID:
    """
    Create the day's snapshot for a cloud or overwrite its three success
    rates. The cloud is created if needed. Returns the snapshot id.
    """
    d = as_date(snapshot_date)
    cloud_id = cloud_get_id(db, fqdn)

    stmt = _insert(db, snapshots).values(
        cloud_id=cloud_id,
        snapshot_date=d,
        success_last24h=success_last24h,
        success_last7d=success_last7d,
        success_last30d=success_last30d,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[snapshots.c.cloud_id, snapshots.c.snapshot_date],
        set_={
            "success_last24h": stmt.excluded.success_last24h,
            "success_last7d": stmt.excluded.success_last7d,
            "success_last30d": stmt.excluded.success_last30d,
        },
    ).returning(snapshots.c.id)

    snapshot_id = db.execute(stmt).scalar_one()
    logger.debug("snapshot_upsert fqdn=%s date=%s id=%s", fqdn, d, snapshot_id)
    return snapshot_id


def snapshot_get_id(db: Session, fqdn: str, snapshot_date: DateLike) -> UUID:
    """
    Id of the snapshot for (fqdn, date). Cloud and snapshot are created when
    missing; a new snapshot has all metrics null. Existing rows are untouched.
    """
    d = as_date(snapshot_date)
    cloud_id = cloud_get_id(db, fqdn)

    stmt = (
        _insert(db, snapshots)
        .values(cloud_id=cloud_id, snapshot_date=d)
        .on_conflict_do_nothing(index_elements=[snapshots.c.cloud_id, snapshots.c.snapshot_date])
        .returning(snapshots.c.id)
    )
    snapshot_id = db.execute(stmt).scalar_one_or_none()
    if snapshot_id is None:
        snapshot_id = db.execute(
            select(snapshots.c.id).where(
                snapshots.c.cloud_id == cloud_id,
                snapshots.c.snapshot_date == d,
            )
        ).scalar_one()
    else:
        logger.debug("created snapshot fqdn=%s date=%s id=%s", fqdn, d, snapshot_id)
    return snapshot_id


def snapshot_set_issues(
    db: Session,
    fqdn: str,
    snapshot_date: DateLike,
    lab_issues: Optional[int],
    orchestration_issues: Optional[int],
    scripting_issues: Optional[int],
) -> UUID:
    """
    Overwrite the failure counters of the day's snapshot, creating the cloud
    and snapshot if needed. Success rates are left alone.
    """
    d = as_date(snapshot_date)
    cloud_id = cloud_get_id(db, fqdn)

    stmt = _insert(db, snapshots).values(
        cloud_id=cloud_id,
        snapshot_date=d,
        lab_issues=lab_issues,
        orchestration_issues=orchestration_issues,
        scripting_issues=scripting_issues,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[snapshots.c.cloud_id, snapshots.c.snapshot_date],
        set_={
            "lab_issues": stmt.excluded.lab_issues,
            "orchestration_issues": stmt.excluded.orchestration_issues,
            "scripting_issues": stmt.excluded.scripting_issues,
        },
    ).returning(snapshots.c.id)

    snapshot_id = db.execute(stmt).scalar_one()
    logger.debug("snapshot_set_issues fqdn=%s date=%s id=%s", fqdn, d, snapshot_id)
    return snapshot_id


# ---------------------------------------------------------------------
# ranked findings (append only; a reused rank raises IntegrityError)
# ---------------------------------------------------------------------

def _append(db: Session, table: Table, fqdn: str, snapshot_date: DateLike, **row: Any) -> UUID:
    snapshot_id = snapshot_get_id(db, fqdn, snapshot_date)
    stmt = _insert(db, table).values(snapshot_id=snapshot_id, **row).returning(table.c.id)
    row_id = db.execute(stmt).scalar_one()
    logger.debug("added %s rank=%s snapshot=%s id=%s", table.name, row.get("rank"), snapshot_id, row_id)
    return row_id


def device_add(
    db: Session,
    fqdn: str,
    snapshot_date: DateLike,
    rank: int,
    model: str,
    os: str,
    device_id: str,
    errors_last7d: int,
) -> UUID:
    return _append(
        db,
        devices,
        fqdn,
        snapshot_date,
        rank=rank,
        model=model,
        os=os,
        device_id=device_id,
        errors_last7d=errors_last7d,
    )


def test_add(
    db: Session,
    fqdn: str,
    snapshot_date: DateLike,
    rank: int,
    test_name: str,
    age: int,
    failures_last7d: int,
    passes_last7d: int,
) -> UUID:
    return _append(
        db,
        tests,
        fqdn,
        snapshot_date,
        rank=rank,
        test_name=test_name,
        age=age,
        failures_last7d=failures_last7d,
        passes_last7d=passes_last7d,
    )


def recommendation_add(
    db: Session,
    fqdn: str,
    snapshot_date: DateLike,
    rank: int,
    recommendation: str,
    impact_percentage: int,
    impact_message: Optional[str],
) -> UUID:
    return _append(
        db,
        recommendations,
        fqdn,
        snapshot_date,
        rank=rank,
        recommendation=recommendation,
        impact_percentage=impact_percentage,
        impact_message=impact_message,
    )
