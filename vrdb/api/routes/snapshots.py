from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vrdb import store
from vrdb.db.session import SessionLocal
from vrdb.models import Cloud, DeviceFinding, Recommendation, Snapshot, TestFinding
from vrdb.api.utils.validation import clean_fqdn, get_count, get_percentage, parse_date, require_object

router = APIRouter()


def sa_to_dict(obj: Any) -> Dict[str, Any]:
    d = dict(getattr(obj, "__dict__", {}) or {})
    d.pop("_sa_instance_state", None)
    return d


@router.put("/clouds/{fqdn}/snapshots/{snapshot_date}")
def upsert_snapshot(fqdn: str, snapshot_date: str, body: dict) -> Dict[str, Any]:
    """
    Create the day's snapshot or overwrite its success rates.

    Body (integers 0..100):
      - success_last24h
      - success_last7d
      - success_last30d
    """
    f = clean_fqdn(fqdn)
    d = parse_date(snapshot_date)
    body = require_object(body)
    rates = {k: get_percentage(body, k) for k in ("success_last24h", "success_last7d", "success_last30d")}

    db: Session = SessionLocal()
    try:
        snapshot_id = store.snapshot_upsert(db, f, d, **rates)
        db.commit()
        return {"id": str(snapshot_id)}
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(409, f"Constraint violation: {e.orig}")
    finally:
        db.close()


@router.put("/clouds/{fqdn}/snapshots/{snapshot_date}/issues")
def set_snapshot_issues(fqdn: str, snapshot_date: str, body: dict) -> Dict[str, Any]:
    """
    Overwrite the day's failure counters (non-negative integers or null):
    lab_issues, orchestration_issues, scripting_issues.
    """
    f = clean_fqdn(fqdn)
    d = parse_date(snapshot_date)
    body = require_object(body)
    counts = {
        k: get_count(body, k, required=False)
        for k in ("lab_issues", "orchestration_issues", "scripting_issues")
    }

    db: Session = SessionLocal()
    try:
        snapshot_id = store.snapshot_set_issues(db, f, d, **counts)
        db.commit()
        return {"id": str(snapshot_id)}
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(409, f"Constraint violation: {e.orig}")
    finally:
        db.close()


@router.post("/clouds/{fqdn}/snapshots/{snapshot_date}/resolve")
def resolve_snapshot(fqdn: str, snapshot_date: str) -> Dict[str, Any]:
    f = clean_fqdn(fqdn)
    d = parse_date(snapshot_date)

    db: Session = SessionLocal()
    try:
        snapshot_id = store.snapshot_get_id(db, f, d)
        db.commit()
        return {"id": str(snapshot_id)}
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(409, f"Constraint violation: {e.orig}")
    finally:
        db.close()


@router.get("/clouds/{fqdn}/snapshots/{snapshot_date}")
def get_snapshot_report(fqdn: str, snapshot_date: str) -> Dict[str, Any]:
    """
    Snapshot with its ranked devices, tests and recommendations. Read only:
    unknown clouds or dates are a 404, nothing gets created.
    """
    f = clean_fqdn(fqdn)
    d = parse_date(snapshot_date)

    db: Session = SessionLocal()
    try:
        cloud = db.query(Cloud).filter(Cloud.fqdn == f).first()
        if not cloud:
            raise HTTPException(404, "Cloud not found")

        snapshot = (
            db.query(Snapshot)
            .filter(Snapshot.cloud_id == cloud.id, Snapshot.snapshot_date == d)
            .first()
        )
        if not snapshot:
            raise HTTPException(404, "Snapshot not found")

        def ranked(model: Any) -> list:
            rows = db.query(model).filter(model.snapshot_id == snapshot.id).order_by(model.rank.asc()).all()
            return [sa_to_dict(r) for r in rows]

        return {
            "cloud": sa_to_dict(cloud),
            "snapshot": sa_to_dict(snapshot),
            "devices": ranked(DeviceFinding),
            "tests": ranked(TestFinding),
            "recommendations": ranked(Recommendation),
        }
    finally:
        db.close()
