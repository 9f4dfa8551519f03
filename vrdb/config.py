from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv
import os


load_dotenv()


@dataclass(frozen=True)
class Settings:
    database_url: str
    database_locale: Optional[str]
    log_level: str


def get_settings() -> Settings:
    database_url = os.getenv("DATABASE_URL") or os.getenv("PG_URL") or ""
    if not database_url:
        raise RuntimeError("Missing DATABASE_URL (or PG_URL)")

    database_locale = os.getenv("VR_DB_LOCALE") or None
    log_level = os.getenv("VR_LOG_LEVEL", "INFO").upper()

    return Settings(
        database_url=database_url,
        database_locale=database_locale,
        log_level=log_level,
    )
