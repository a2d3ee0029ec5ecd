# app/services/migrations.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List
import logging
import re

from app.models.registry import MigrationsStatus

logger = logging.getLogger("migrations")

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"

_FILENAME = re.compile(r"^(\d+)_(.+)\.up\.sql$")

_CREATE_STATE_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version BIGINT NOT NULL PRIMARY KEY,
        dirty BOOLEAN NOT NULL
    )
"""


class MigrationError(Exception):
    """A migration failed or the database is in a dirty state."""


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    path: Path

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")


def discover(directory: Path = MIGRATIONS_DIR) -> List[Migration]:
    """Find NNNN_name.up.sql files, sorted by version."""
    found: List[Migration] = []
    for path in directory.glob("*.up.sql"):
        m = _FILENAME.match(path.name)
        if not m:
            logger.warning("Ignoring migration file with unexpected name: %s", path.name)
            continue
        found.append(Migration(version=int(m.group(1)), name=m.group(2), path=path))
    found.sort(key=lambda mig: mig.version)
    versions = [mig.version for mig in found]
    if len(versions) != len(set(versions)):
        raise MigrationError(f"duplicate migration versions in {directory}")
    return found


async def status(conn: Any) -> MigrationsStatus:
    """Current version and dirty flag; version 0 when nothing was applied."""
    await conn.execute(_CREATE_STATE_TABLE)
    row = await conn.fetchrow("SELECT version, dirty FROM schema_migrations LIMIT 1")
    if row is None:
        return MigrationsStatus(version=0, dirty=False)
    return MigrationsStatus(version=row["version"], dirty=row["dirty"])


async def _set_version(conn: Any, version: int, dirty: bool) -> None:
    async with conn.transaction():
        await conn.execute("DELETE FROM schema_migrations")
        await conn.execute(
            "INSERT INTO schema_migrations (version, dirty) VALUES ($1, $2)", version, dirty
        )


async def apply_pending(pool: Any, directory: Path = MIGRATIONS_DIR) -> int:
    """
    Apply every migration newer than the recorded version.

    A migration is recorded dirty before it runs and clean once it commits,
    so a failure leaves the database marked dirty and later runs refuse to
    continue until someone fixes it by hand. Returns the number applied.
    """
    migrations = discover(directory)
    applied = 0
    async with pool.acquire() as conn:
        current = await status(conn)
        if current.dirty:
            raise MigrationError(f"database is dirty at version {current.version}")

        for mig in migrations:
            if mig.version <= current.version:
                continue
            logger.info("Applying migration %04d_%s", mig.version, mig.name)
            await _set_version(conn, mig.version, True)
            try:
                async with conn.transaction():
                    await conn.execute(mig.read())
            except Exception as exc:
                logger.error("Migration %04d_%s failed: %s", mig.version, mig.name, exc)
                raise MigrationError(f"migration {mig.version} failed: {exc}") from exc
            await _set_version(conn, mig.version, False)
            applied += 1

    if applied:
        logger.info("database migrations applied successfully (%d)", applied)
    else:
        logger.info("database schema up to date")
    return applied
