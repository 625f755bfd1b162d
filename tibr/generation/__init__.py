"""Source and SQL generators."""

from .migration import (
    GeneratedMigration,
    generate_migration,
    migration_filename,
    write_migration,
)
from .react import render_form, render_detail_page, render_list_page, write_form, write_page
from .express import render_controller, render_route_stub, render_service, write_route_stub, write_service

__all__ = [
    "GeneratedMigration",
    "generate_migration",
    "migration_filename",
    "write_migration",
    "render_form",
    "render_list_page",
    "render_detail_page",
    "write_form",
    "write_page",
    "render_service",
    "render_controller",
    "render_route_stub",
    "write_service",
    "write_route_stub",
]
