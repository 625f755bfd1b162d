"""Workspace bootstrap and maintenance."""

from .bootstrap import WorkspaceBootstrapper, remove_existing
from .routes import find_main_ts, register_routes

__all__ = [
    "WorkspaceBootstrapper",
    "remove_existing",
    "find_main_ts",
    "register_routes",
]
