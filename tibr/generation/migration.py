"""
Postgres Migration Generator

Turns an EntityDescription into an ordered batch of DDL statements:

    1. uuid-ossp extension
    2. one enum type per enumerated field, in declaration order
    3. CREATE TABLE with the uuid primary key only
    4. one ADD COLUMN per non-id field, in declaration order

Every statement is guarded so the file can be applied more than once.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple

from tibr.schema import EntityDescription, PropertySchema

logger = logging.getLogger(__name__)

TYPE_MAP: Dict[str, str] = {
    "string": "text",
    "integer": "integer",
    "number": "integer",
    "boolean": "boolean",
    "object": "jsonb",
    "array": "jsonb",
}
DEFAULT_SQL_TYPE = "text"

PRIMARY_KEY = "id"
HEADER = "-- Auto-generated migration"
EXTENSION_STMT = 'CREATE EXTENSION IF NOT EXISTS "uuid-ossp";'


@dataclass(frozen=True)
class GeneratedMigration:
    """DDL for one entity, in application order."""
    table_name: str
    statements: Tuple[str, ...]

    def to_sql(self) -> str:
        """File body: header plus statements separated by blank lines."""
        return "\n\n".join([HEADER, *self.statements]) + "\n"

    def filename(self, now: Optional[datetime] = None) -> str:
        return migration_filename(self.table_name, now)


def table_name_for(entity: str) -> str:
    return f"{entity.lower()}s"


def enum_type_name(table_name: str, field_name: str) -> str:
    return f"{table_name}_{field_name}_enum"


def sql_type_for(table_name: str, prop: PropertySchema) -> str:
    """Column type: the field's enum type if it has one, else the mapped scalar."""
    if prop.is_enum:
        return enum_type_name(table_name, prop.name)
    return TYPE_MAP.get(prop.type, DEFAULT_SQL_TYPE)


def _quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _enum_statement(table_name: str, prop: PropertySchema) -> str:
    # Postgres has no CREATE TYPE IF NOT EXISTS
    values = ", ".join(_quote_literal(v) for v in prop.enum)
    return (
        "DO $$ BEGIN\n"
        f"  CREATE TYPE {enum_type_name(table_name, prop.name)} AS ENUM ({values});\n"
        "EXCEPTION\n"
        "  WHEN duplicate_object THEN null;\n"
        "END $$;"
    )


def _create_table_statement(table_name: str) -> str:
    return (
        f'CREATE TABLE IF NOT EXISTS "{table_name}" (\n'
        f'  "{PRIMARY_KEY}" uuid PRIMARY KEY DEFAULT uuid_generate_v4()\n'
        ");"
    )


def _add_column_statement(table_name: str, prop: PropertySchema) -> str:
    return (
        f'ALTER TABLE "{table_name}" ADD COLUMN IF NOT EXISTS '
        f'"{prop.name}" {sql_type_for(table_name, prop)} NOT NULL;'
    )


def generate_migration(entity: EntityDescription) -> GeneratedMigration:
    """Build the migration statements for an entity. Pure: same input, same output."""
    table_name = table_name_for(entity.name)

    enum_stmts = [_enum_statement(table_name, p) for p in entity.properties if p.is_enum]
    alter_stmts = [
        _add_column_statement(table_name, p)
        for p in entity.properties
        if p.name != PRIMARY_KEY
    ]

    statements = (EXTENSION_STMT, *enum_stmts, _create_table_statement(table_name), *alter_stmts)
    return GeneratedMigration(table_name=table_name, statements=statements)


def migration_timestamp(now: Optional[datetime] = None) -> str:
    """14-digit UTC timestamp, YYYYMMDDHHMMSS."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y%m%d%H%M%S")


def migration_filename(table_name: str, now: Optional[datetime] = None) -> str:
    return f"{migration_timestamp(now)}_migrate_{table_name}.sql"


def write_migration(
    migration: GeneratedMigration,
    migrations_dir: Path,
    now: Optional[datetime] = None,
) -> Path:
    """Write the migration into migrations_dir (created if needed) and return its path."""
    migrations_dir = Path(migrations_dir)
    migrations_dir.mkdir(parents=True, exist_ok=True)

    file_path = migrations_dir / migration.filename(now)
    file_path.write_text(migration.to_sql(), encoding="utf-8")
    logger.info(f"Wrote {len(migration.statements)} statements to {file_path}")
    return file_path
