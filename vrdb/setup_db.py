"""
Recreate the Value Realization database from scratch and migrate it to head.

DESTRUCTIVE: every other connection to the target database is terminated and
the database is dropped before being created again.

    vrdb-setup                # drop, create, migrate
    vrdb-setup --skip-create  # migrate only
"""
from __future__ import annotations

import argparse
import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, make_url

from vrdb.config import Settings, get_settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATABASE_COMMENT = "Value Realization"
LOCALE_RE = re.compile(r"[A-Za-z0-9_.@-]+")

TERMINATE_SQL = text(
    "SELECT pid, pg_terminate_backend(pid) FROM pg_stat_activity "
    "WHERE datname = :name AND pid <> pg_backend_pid()"
)


def admin_url_for(database_url: str) -> URL:
    """Same server and credentials, pointed at the ``postgres`` maintenance database."""
    return make_url(database_url).set(database="postgres")


def recreate_statements(quoted_name: str, locale: Optional[str] = None) -> List[str]:
    if locale and not LOCALE_RE.fullmatch(locale):
        raise ValueError(f"Invalid locale name: {locale!r}")
    create = f"CREATE DATABASE {quoted_name} WITH ENCODING 'UTF8' TEMPLATE template0 CONNECTION LIMIT -1"
    if locale:
        create += f" LC_COLLATE '{locale}' LC_CTYPE '{locale}'"
    return [
        f"DROP DATABASE IF EXISTS {quoted_name}",
        create,
        f"COMMENT ON DATABASE {quoted_name} IS '{DATABASE_COMMENT}'",
    ]


def recreate_database(settings: Settings) -> None:
    name = make_url(settings.database_url).database
    if not name:
        raise RuntimeError("DATABASE_URL does not name a database")

    engine = create_engine(admin_url_for(settings.database_url), isolation_level="AUTOCOMMIT", future=True)
    try:
        quoted = engine.dialect.identifier_preparer.quote(name)
        with engine.connect() as conn:
            terminated = conn.execute(TERMINATE_SQL, {"name": name}).fetchall()
            logger.info("Terminated %d connection(s) to %s", len(terminated), name)
            for stmt in recreate_statements(quoted, settings.database_locale):
                logger.info("%s", stmt)
                conn.execute(text(stmt))
    finally:
        engine.dispose()


def alembic_config(settings: Settings) -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    # percent signs in passwords would otherwise be read as ini interpolation
    cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    return cfg


def migrate(settings: Settings) -> None:
    logger.info("Upgrading schema to head")
    command.upgrade(alembic_config(settings), "head")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Drop, recreate and migrate the Value Realization database.")
    parser.add_argument("--skip-create", action="store_true", help="only run migrations against the existing database")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if not args.skip_create:
        recreate_database(settings)
    migrate(settings)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
