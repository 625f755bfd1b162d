"""
Entity Schema Reader

Loads the JSON-Schema-like entity descriptions kept under
libs/domain/src/lib/<entity>.schema.json. These files drive the migration,
form and page generators and are written by entity inference.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tibr.errors import MalformedInputError, MissingInputError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path("libs") / "domain" / "src" / "lib"

# Property names end up in SQL identifiers; enum type names are unquoted
IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class PropertySchema:
    """One field of an entity."""
    name: str
    type: Optional[str] = None
    enum: Optional[Tuple[str, ...]] = None
    description: Optional[str] = None

    @property
    def is_enum(self) -> bool:
        return self.enum is not None


@dataclass(frozen=True)
class EntityDescription:
    """A named entity and its fields in declaration order."""
    name: str
    properties: Tuple[PropertySchema, ...]
    title: Optional[str] = None
    description: Optional[str] = None

    @property
    def field_names(self) -> List[str]:
        return [p.name for p in self.properties]

    def get(self, name: str) -> Optional[PropertySchema]:
        return next((p for p in self.properties if p.name == name), None)


def schema_path_for(entity: str, project_root: Path) -> Path:
    """Location of an entity's schema file under the project root."""
    return Path(project_root) / SCHEMA_DIR / f"{entity.lower()}.schema.json"


def _reject_duplicates(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    seen = {}
    for key, value in pairs:
        if key in seen:
            raise ValueError(f"duplicate key '{key}'")
        seen[key] = value
    return seen


def parse_entity_schema(name: str, document: Any, source: Any = "<schema>") -> EntityDescription:
    """Validate a decoded schema document and build an EntityDescription."""
    if not isinstance(document, dict):
        raise MalformedInputError(source, "schema must be a JSON object")

    raw_properties = document.get("properties")
    if raw_properties is None:
        raise MalformedInputError(source, "missing 'properties'")
    if not isinstance(raw_properties, dict):
        raise MalformedInputError(source, "'properties' must be an object")
    if not raw_properties:
        raise MalformedInputError(source, "'properties' is empty")

    properties = []
    for prop_name, prop in raw_properties.items():
        if not IDENTIFIER.match(prop_name):
            raise MalformedInputError(source, f"property name '{prop_name}' is not a valid identifier")
        if not isinstance(prop, dict):
            raise MalformedInputError(source, f"property '{prop_name}' must be an object")

        prop_type = prop.get("type")
        if prop_type is not None and not isinstance(prop_type, str):
            raise MalformedInputError(source, f"property '{prop_name}' has a non-string type")

        enum = prop.get("enum")
        if enum is not None:
            if not isinstance(enum, list) or not all(isinstance(v, str) for v in enum):
                raise MalformedInputError(source, f"enum of '{prop_name}' must be a list of strings")
            enum = tuple(enum)

        properties.append(PropertySchema(
            name=prop_name,
            type=prop_type,
            enum=enum,
            description=prop.get("description"),
        ))

    required = document.get("required")
    if required is not None and (
        not isinstance(required, list) or not all(isinstance(r, str) for r in required)
    ):
        raise MalformedInputError(source, "'required' must be a list of strings")

    return EntityDescription(
        name=name,
        properties=tuple(properties),
        title=document.get("title"),
        description=document.get("description"),
    )


def load_entity_schema(entity: str, project_root: Path) -> EntityDescription:
    """Read and validate the schema file for an entity.

    Raises:
        MissingInputError: the schema file does not exist
        MalformedInputError: the file is not valid JSON or lacks 'properties'
    """
    path = schema_path_for(entity, project_root)
    if not path.is_file():
        raise MissingInputError(path, f"Schema not found at {path}")

    try:
        document = json.loads(path.read_text(encoding="utf-8"), object_pairs_hook=_reject_duplicates)
    except ValueError as e:
        raise MalformedInputError(path, f"invalid JSON: {e}") from e

    description = parse_entity_schema(entity, document, source=path)
    logger.debug(f"Loaded {len(description.properties)} properties for {entity} from {path}")
    return description
