"""Domain dictionary and entity inference."""

from .dictionary import DomainEntry, filter_entries, load_domain_dictionary
from .inference import EntityInferrer, build_schema, parse_properties

__all__ = [
    "DomainEntry",
    "filter_entries",
    "load_domain_dictionary",
    "EntityInferrer",
    "build_schema",
    "parse_properties",
]
