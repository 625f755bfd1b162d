"""Name helpers shared by the code generators."""

import re


def class_name(entity: str) -> str:
    """User -> User, user -> User, orderItem -> OrderItem."""
    return entity[:1].upper() + entity[1:]


def route_name(entity: str) -> str:
    return entity.lower()


def plural_route(entity: str) -> str:
    """URL segment / table name for an entity: user -> users."""
    return f"{entity.lower()}s"


def field_label(field_name: str) -> str:
    """firstName -> First Name"""
    spaced = re.sub(r"([A-Z])", r" \1", field_name)
    return spaced[:1].upper() + spaced[1:]
