"""Applying generated migrations."""

from .migrator import apply_migrations, list_migrations, psql_args, resolve_database_url

__all__ = [
    "apply_migrations",
    "list_migrations",
    "psql_args",
    "resolve_database_url",
]
