from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vrdb import store
from vrdb.db.session import SessionLocal
from vrdb.api.utils.validation import clean_fqdn, get_str, require_object

router = APIRouter()


@router.put("/clouds/{fqdn}")
def upsert_cloud(fqdn: str, body: dict) -> Dict[str, Any]:
    """
    Register a cloud or replace its report recipients.

    Body:
      - email_recipients: str | null (comma-separated)
    """
    f = clean_fqdn(fqdn)
    emails = get_str(require_object(body), "email_recipients", required=False, max_len=4000)

    db: Session = SessionLocal()
    try:
        cloud_id = store.cloud_upsert(db, f, emails)
        db.commit()
        return {"id": str(cloud_id)}
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(409, f"Constraint violation: {e.orig}")
    finally:
        db.close()


@router.post("/clouds/{fqdn}/resolve")
def resolve_cloud(fqdn: str) -> Dict[str, Any]:
    f = clean_fqdn(fqdn)

    db: Session = SessionLocal()
    try:
        cloud_id = store.cloud_get_id(db, f)
        db.commit()
        return {"id": str(cloud_id)}
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(409, f"Constraint violation: {e.orig}")
    finally:
        db.close()
