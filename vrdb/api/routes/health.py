from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vrdb.db.session import SessionLocal

router = APIRouter()


@router.get("/health")
def health() -> Dict[str, Any]:
    db: Session = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except SQLAlchemyError as e:
        raise HTTPException(503, f"Database unavailable: {e.__class__.__name__}")
    finally:
        db.close()
