"""
Domain Dictionary Loader

Reads the project's domain dictionary: one row per entity with a
free-text description. Only CSV is supported.
"""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from tibr.errors import MalformedInputError, MissingInputError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv",)


@dataclass(frozen=True)
class DomainEntry:
    """One entity from the domain dictionary."""
    entity: str
    description: str


def _find_header(headers: Sequence[str], wanted: str) -> Optional[str]:
    return next((h for h in headers if h and h.strip().lower() == wanted), None)


def load_domain_dictionary(path: Path) -> List[DomainEntry]:
    """Load entity/description rows from a CSV dictionary.

    The header row must contain 'entity' and 'description' (any case).
    A UTF-8 BOM is stripped, blank lines are skipped and cells are trimmed.
    """
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise MalformedInputError(path, "only CSV domain dictionaries are supported")
    if not path.is_file():
        raise MissingInputError(path, f"Domain dictionary not found at {path}")

    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        headers = reader.fieldnames or []

        entity_key = _find_header(headers, "entity")
        desc_key = _find_header(headers, "description")
        if not entity_key or not desc_key:
            raise MalformedInputError(path, f"invalid CSV headers. Found: {', '.join(headers)}")

        entries = []
        for row in reader:
            entity = (row.get(entity_key) or "").strip()
            description = (row.get(desc_key) or "").strip()
            if not entity and not description:
                continue
            entries.append(DomainEntry(entity=entity, description=description))

    logger.info(f"Loaded {len(entries)} domain entries from {path}")
    return entries


def filter_entries(entries: List[DomainEntry], names: Optional[Sequence[str]] = None) -> List[DomainEntry]:
    """Keep only the named entities; no names means keep everything."""
    if not names:
        return list(entries)
    wanted = set(names)
    return [e for e in entries if e.entity in wanted]
