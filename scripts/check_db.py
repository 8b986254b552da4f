#!/usr/bin/env python
"""Verify that the configured database is reachable and has the analytics tables.

Usage:
    uv run python scripts/check_db.py

Exit status is 0 when the connection works, 1 otherwise. Missing tables
are reported as a warning only.
"""

import asyncio
import sys

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.features.data_platform import models  # noqa: F401  (registers tables on Base)


async def missing_tables(conn: AsyncConnection) -> list[str]:
    existing = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    return sorted(set(Base.metadata.tables) - set(existing))


async def check_database() -> int:
    settings = get_settings()
    host_part = settings.database_url.rsplit("@", 1)[-1]
    print(f"Checking {host_part}")

    engine = create_async_engine(settings.database_url)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            print("  connection  ok")
            missing = await missing_tables(conn)
    except SQLAlchemyError as exc:
        print(f"  connection  FAILED ({type(exc).__name__}: {exc})")
        print("Is PostgreSQL running, and is DATABASE_URL in .env correct?")
        return 1
    finally:
        await engine.dispose()

    if missing:
        print(f"  tables      missing: {', '.join(missing)}")
        print("Create them with: uv run python scripts/seed_demo.py --status --init-schema")
    else:
        print(f"  tables      all {len(Base.metadata.tables)} present")
    return 0


def main() -> None:
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
