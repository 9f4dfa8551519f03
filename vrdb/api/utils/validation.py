from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from fastapi import HTTPException

from vrdb.store import as_date


def require_object(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise HTTPException(400, "Body must be a JSON object")
    return body


def parse_date(value: str) -> date:
    try:
        return as_date(value)
    except ValueError:
        raise HTTPException(400, f"Invalid date '{value}', expected YYYY-MM-DD")


def get_int(body: Dict[str, Any], key: str, *, required: bool = True, lo: Optional[int] = None, hi: Optional[int] = None) -> Optional[int]:
    """
    Integer field from a JSON body. bool is rejected even though it is an int subclass.
    """
    if key not in body or body[key] is None:
        if required:
            raise HTTPException(400, f"Missing required field: {key}")
        return None

    v = body[key]
    if isinstance(v, bool) or not isinstance(v, int):
        raise HTTPException(400, f"'{key}' must be an integer")
    if (lo is not None and v < lo) or (hi is not None and v > hi):
        bounds = f"{lo if lo is not None else ''}..{hi if hi is not None else ''}"
        raise HTTPException(400, f"'{key}' out of range ({bounds})")
    return v


# bigint columns
BIGINT_MAX = 2**63 - 1


def get_count(body: Dict[str, Any], key: str, *, required: bool = True) -> Optional[int]:
    return get_int(body, key, required=required, lo=0, hi=BIGINT_MAX)


def get_percentage(body: Dict[str, Any], key: str, *, required: bool = True) -> Optional[int]:
    return get_int(body, key, required=required, lo=0, hi=100)


def get_str(body: Dict[str, Any], key: str, *, required: bool = True, max_len: Optional[int] = None) -> Optional[str]:
    v = body.get(key)
    if v is None:
        if required:
            raise HTTPException(400, f"Missing required field: {key}")
        return None
    if not isinstance(v, str):
        raise HTTPException(400, f"'{key}' must be a string")

    v = v.strip()
    if not v:
        if required:
            raise HTTPException(400, f"'{key}' must be non-empty string")
        return None
    if max_len is not None and len(v) > max_len:
        raise HTTPException(400, f"'{key}' longer than {max_len} characters")
    return v


def get_rank(body: Dict[str, Any]) -> int:
    # smallint column
    return get_int(body, "rank", lo=1, hi=32767)  # type: ignore[return-value]


def clean_fqdn(fqdn: str) -> str:
    f = fqdn.strip().lower()
    if not f:
        raise HTTPException(400, "fqdn is required")
    if len(f) > 255:
        raise HTTPException(400, "fqdn longer than 255 characters")
    return f
