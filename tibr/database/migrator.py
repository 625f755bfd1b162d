"""
Migration Runner

Applies every .sql file in a migrations directory through psql, in filename
(and therefore timestamp) order, stopping at the first failure.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from tibr import process
from tibr.errors import CommandFailedError, ConfigNotFoundError, MissingInputError

logger = logging.getLogger(__name__)


def list_migrations(migrations_dir: Path) -> List[Path]:
    """Sorted .sql files in migrations_dir."""
    migrations_dir = Path(migrations_dir)
    if not migrations_dir.is_dir():
        raise MissingInputError(migrations_dir, f"Migrations directory not found: {migrations_dir}")
    return sorted(p for p in migrations_dir.iterdir() if p.is_file() and p.suffix == ".sql")


def resolve_database_url(config_url: Optional[str], env_url: Optional[str]) -> str:
    database_url = config_url or env_url
    if not database_url:
        raise ConfigNotFoundError(
            'Missing database URL. Set DATABASE_URL env or add "databaseUrl" to .tibrrc.'
        )
    return database_url


def psql_args(database_url: str, migration: Path) -> List[str]:
    return ["-d", database_url, "-v", "ON_ERROR_STOP=1", "-f", str(migration)]


def apply_migrations(
    migrations: List[Path],
    database_url: str,
    on_apply: Optional[Callable[[Path], None]] = None,
) -> int:
    """Run psql for each migration; returns how many were applied.

    Raises:
        CommandFailedError: psql exited non-zero; later files are not run
    """
    applied = 0
    for migration in migrations:
        if on_apply:
            on_apply(migration)
        logger.info(f"Applying migration {migration.name}")
        result = process.run_command("psql", psql_args(database_url, migration), inherit_io=True)
        if not result.success:
            raise CommandFailedError(result.command_line, result.returncode)
        applied += 1
    return applied
