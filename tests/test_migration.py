"""
Tests for the Postgres migration generator and file emitter.
"""

from datetime import datetime, timezone

import pytest

from tibr.generation.migration import (
    EXTENSION_STMT,
    HEADER,
    GeneratedMigration,
    generate_migration,
    migration_filename,
    migration_timestamp,
    sql_type_for,
    write_migration,
)
from tibr.errors import MalformedInputError
from tibr.schema import PropertySchema, parse_entity_schema
from tests import statements_starting_with

FIXED_NOW = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)


def _entity(name, properties):
    return parse_entity_schema(name, {"properties": properties})


class TestStatementOrder:

    def test_scalar_only_entity(self):
        entity = _entity("Order", {
            "id": {"type": "string"},
            "total": {"type": "number"},
            "paid": {"type": "boolean"},
            "notes": {"type": "string"},
        })
        migration = generate_migration(entity)

        # extension + create table + one alter per non-id field
        assert len(migration.statements) == 1 + 1 + 3
        assert migration.statements[0] == EXTENSION_STMT
        assert migration.statements[1].startswith('CREATE TABLE IF NOT EXISTS "orders"')

        alters = statements_starting_with(migration.statements, "ALTER TABLE")
        assert [a.split('"')[3] for a in alters] == ["total", "paid", "notes"]

    def test_id_not_required_in_input(self):
        migration = generate_migration(_entity("Tag", {"label": {"type": "string"}}))
        assert len(migration.statements) == 3
        assert '"id" uuid PRIMARY KEY DEFAULT uuid_generate_v4()' in migration.statements[1]

    def test_enums_come_before_create_table(self):
        entity = _entity("Ticket", {
            "priority": {"type": "string", "enum": ["low", "high"]},
            "title": {"type": "string"},
            "status": {"type": "string", "enum": ["open", "closed"]},
        })
        statements = generate_migration(entity).statements

        assert statements[0] == EXTENSION_STMT
        assert "tickets_priority_enum" in statements[1]
        assert "tickets_status_enum" in statements[2]
        assert statements[3].startswith("CREATE TABLE")
        assert len(statements_starting_with(statements, "ALTER TABLE")) == 3

    def test_id_is_never_altered(self, user_entity):
        alters = statements_starting_with(generate_migration(user_entity).statements, "ALTER TABLE")
        assert not any('"id"' in a for a in alters)


class TestUserExample:

    @pytest.fixture
    def migration(self, user_entity) -> GeneratedMigration:
        return generate_migration(user_entity)

    def test_table_name(self, migration):
        assert migration.table_name == "users"

    def test_enum_type(self, migration):
        enum_stmt = migration.statements[1]
        assert "CREATE TYPE users_role_enum AS ENUM ('admin', 'member');" in enum_stmt
        assert "duplicate_object" in enum_stmt

    def test_alter_statements(self, migration):
        alters = statements_starting_with(migration.statements, "ALTER TABLE")
        assert alters == [
            'ALTER TABLE "users" ADD COLUMN IF NOT EXISTS "role" users_role_enum NOT NULL;',
            'ALTER TABLE "users" ADD COLUMN IF NOT EXISTS "age" integer NOT NULL;',
        ]

    def test_generation_is_deterministic(self, user_entity, migration):
        again = generate_migration(user_entity)
        assert again.statements == migration.statements
        assert again.to_sql() == migration.to_sql()


class TestTypeMapping:

    @pytest.mark.parametrize("json_type,sql_type", [
        ("string", "text"),
        ("integer", "integer"),
        ("number", "integer"),
        ("boolean", "boolean"),
        ("object", "jsonb"),
        ("array", "jsonb"),
        ("date", "text"),
        (None, "text"),
    ])
    def test_scalar_types(self, json_type, sql_type):
        assert sql_type_for("things", PropertySchema(name="x", type=json_type)) == sql_type

    def test_enum_overrides_scalar_type(self):
        prop = PropertySchema(name="level", type="integer", enum=("1", "2"))
        assert sql_type_for("things", prop) == "things_level_enum"

    def test_enum_values_keep_order_and_escape_quotes(self):
        entity = _entity("Shop", {"kind": {"type": "string", "enum": ["z", "o'neil", "a"]}})
        enum_stmt = generate_migration(entity).statements[1]
        assert "('z', 'o''neil', 'a')" in enum_stmt

    def test_non_identifier_field_never_reaches_sql(self):
        with pytest.raises(MalformedInputError):
            _entity("User", {"first-name": {"type": "string", "enum": ["a"]}})


class TestEmitter:

    def test_timestamp_is_fourteen_digits(self):
        assert migration_timestamp(FIXED_NOW) == "20240305140709"

    def test_filename(self):
        assert migration_filename("users", FIXED_NOW) == "20240305140709_migrate_users.sql"

    def test_write_migration(self, tmp_path, user_entity):
        migration = generate_migration(user_entity)
        migrations_dir = tmp_path / "libs" / "data" / "migrations"

        path = write_migration(migration, migrations_dir, now=FIXED_NOW)

        assert path == migrations_dir / "20240305140709_migrate_users.sql"
        body = path.read_text()
        assert body.startswith(HEADER + "\n\n" + EXTENSION_STMT)
        # statements separated by blank lines
        assert body.split("\n\n")[-1].strip() == migration.statements[-1]
