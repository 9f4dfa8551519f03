from __future__ import annotations

from typing import Any, Callable, Dict

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vrdb import store
from vrdb.db.session import SessionLocal
from vrdb.api.utils.validation import (
    clean_fqdn,
    get_count,
    get_percentage,
    get_rank,
    get_str,
    parse_date,
    require_object,
)

router = APIRouter()


def append(add: Callable[..., Any], fqdn: str, snapshot_date: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run one of the store's *_add functions in its own transaction.
    A rank already used in the snapshot comes back as 409.
    """
    db: Session = SessionLocal()
    try:
        row_id = add(db, fqdn, snapshot_date, **fields)
        db.commit()
        return {"id": str(row_id)}
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(409, f"Constraint violation (rank {fields.get('rank')} already used?): {e.orig}")
    finally:
        db.close()


@router.post("/clouds/{fqdn}/snapshots/{snapshot_date}/devices")
def add_device(fqdn: str, snapshot_date: str, body: dict) -> Dict[str, Any]:
    f = clean_fqdn(fqdn)
    d = parse_date(snapshot_date)
    body = require_object(body)

    fields = {
        "rank": get_rank(body),
        "model": get_str(body, "model", max_len=255),
        "os": get_str(body, "os", max_len=255),
        "device_id": get_str(body, "device_id", max_len=255),
        "errors_last7d": get_count(body, "errors_last7d"),
    }
    return append(store.device_add, f, d, fields)


@router.post("/clouds/{fqdn}/snapshots/{snapshot_date}/tests")
def add_test(fqdn: str, snapshot_date: str, body: dict) -> Dict[str, Any]:
    f = clean_fqdn(fqdn)
    d = parse_date(snapshot_date)
    body = require_object(body)

    fields = {
        "rank": get_rank(body),
        "test_name": get_str(body, "test_name", max_len=4000),
        "age": get_count(body, "age"),
        "failures_last7d": get_count(body, "failures_last7d"),
        "passes_last7d": get_count(body, "passes_last7d"),
    }
    return append(store.test_add, f, d, fields)


@router.post("/clouds/{fqdn}/snapshots/{snapshot_date}/recommendations")
def add_recommendation(fqdn: str, snapshot_date: str, body: dict) -> Dict[str, Any]:
    f = clean_fqdn(fqdn)
    d = parse_date(snapshot_date)
    body = require_object(body)

    impact = get_percentage(body, "impact_percentage", required=False)
    fields = {
        "rank": get_rank(body),
        "recommendation": get_str(body, "recommendation", max_len=2000),
        "impact_percentage": 0 if impact is None else impact,
        "impact_message": get_str(body, "impact_message", required=False, max_len=2000),
    }
    return append(store.recommendation_add, f, d, fields)
