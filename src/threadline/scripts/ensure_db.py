# src/threadline/scripts/ensure_db.py
"""Create the configured Postgres database if it does not exist yet."""
from __future__ import annotations

import argparse
import sys

import psycopg
from psycopg import sql
from sqlalchemy.engine import URL, make_url

from threadline.core.settings import settings
from threadline.db.session import create_tables, drop_tables


def to_psycopg_dsn(url: URL) -> str:
    """Render a SQLAlchemy URL as a libpq connection string for psycopg."""
    return url.set(drivername="postgresql").render_as_string(hide_password=False)


def split_admin_url(db_url: str) -> tuple[str, str]:
    """Return `(maintenance_dsn, target_db)` for a Postgres database URL.

    Raises:
        ValueError: If the URL does not point at Postgres.
    """
    url = make_url(db_url.strip().strip("'\""))
    if not url.drivername.startswith("postgresql"):
        raise ValueError(f"not a Postgres URL: {url.drivername!r}")
    target_db = url.database or "postgres"
    return to_psycopg_dsn(url.set(database="postgres")), target_db


def ensure_database_exists(db_url: str) -> bool:
    """Create the target database when missing; return True if it was created."""
    admin_dsn, target_db = split_admin_url(db_url)
    with psycopg.connect(admin_dsn, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is not None:
            print(f"[ensure_db] database {target_db} already exists")
            return False
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
    print(f"[ensure_db] created database {target_db}")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database exists")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop all tables on the configured database afterwards",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables from the models instead of running migrations",
    )
    args = parser.parse_args()

    try:
        ensure_database_exists(args.url or settings.database_url_sync)
    except (ValueError, psycopg.Error) as exc:
        print(f"[ensure_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.drop_tables:
        drop_tables()
        print("[ensure_db] dropped all tables")
    if args.create_tables:
        create_tables()
        print("[ensure_db] created all tables")


if __name__ == "__main__":
    main()
