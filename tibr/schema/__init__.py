"""Entity schema loading."""

from .entity_schema import (
    EntityDescription,
    PropertySchema,
    load_entity_schema,
    parse_entity_schema,
    schema_path_for,
)

__all__ = [
    "EntityDescription",
    "PropertySchema",
    "load_entity_schema",
    "parse_entity_schema",
    "schema_path_for",
]
