"""tibr - scaffolding and code generation for Nx/React/Express/Postgres workspaces."""

__version__ = "0.1.0"
