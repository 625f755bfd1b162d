"""
CLI Entry Point for tibr

Usage:
    tibr init <name> [--preset apps] [--pm npm]
    tibr generate migration <Entity>
    tibr generate form <Entity>
    tibr generate page list|detail <Entity>
    tibr generate service <Entity>
    tibr migrate [--dir <path>]
    tibr config show
"""

import functools
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tibr import __version__, process
from tibr.config_loader import ConfigLoader, TibrConfig
from tibr.errors import CommandFailedError, ConfigNotFoundError, TibrError
from tibr.settings import get_settings

console = Console()
err_console = Console(stderr=True)


def reports_errors(func):
    """Print TibrErrors and exit non-zero (the child's code for failed commands)."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CommandFailedError as e:
            err_console.print(f"[red]✗[/red] {escape(str(e))}")
            sys.exit(process.exit_status(e.returncode) or 1)
        except TibrError as e:
            err_console.print(f"[red]✗[/red] {escape(str(e))}")
            sys.exit(1)
    return wrapper


def load_project_config(ctx) -> TibrConfig:
    """Resolve .tibrrc / tibr.json from --config or by searching up from cwd."""
    config_file = ctx.obj.get("config_file") if ctx.obj else None
    return ConfigLoader(Path.cwd(), config_file).load_config()


def run_external(command: str, args) -> None:
    """Run a command with inherited I/O and exit with its code on failure."""
    result = process.run_command(command, args, inherit_io=True)
    if not result.success:
        sys.exit(process.exit_status(result.returncode))


@click.group()
@click.option(
    "--config", "-c", "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to .tibrrc / tibr.json (default: search up from the current directory)"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_file: str, verbose: bool):
    """tibr - workspace scaffolding and code generation.

    Bootstraps Nx workspaces, generates React/Express/SQL boilerplate from
    entity schemas, and wraps the usual nx, docker-compose and psql calls.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = Path(config_file) if config_file else None

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


# =============================================================================
# WORKSPACE COMMANDS
# =============================================================================

@cli.command()
@click.argument("name")
@click.option(
    "--preset", "-p",
    type=click.Choice(["apps", "react-monorepo", "ts"]),
    default="apps",
    help="Nx preset to use"
)
@click.option(
    "--pm", "-m", "package_manager",
    type=click.Choice(["npm", "yarn", "pnpm"]),
    default="npm",
    help="Package manager to use"
)
@click.option("--force", "-f", is_flag=True, help="Delete an existing directory without asking")
@reports_errors
def init(name: str, preset: str, package_manager: str, force: bool):
    """Bootstrap a new Nx workspace with standard apps and libs."""
    from tibr.workspace import WorkspaceBootstrapper, remove_existing

    bootstrapper = WorkspaceBootstrapper(
        name=name,
        parent_dir=Path.cwd(),
        preset=preset,
        package_manager=package_manager,
        on_step=lambda message: console.print(f"[bold blue]{message}...[/bold blue]"),
    )

    if bootstrapper.workspace_dir.exists():
        if not force and not click.confirm(f'Directory "{name}" exists. Delete?', default=False):
            console.print("Aborting.")
            sys.exit(1)
        remove_existing(bootstrapper.workspace_dir)

    workspace_dir = bootstrapper.run()
    console.print(f"[green]✓[/green] Workspace \"{name}\" scaffolded at {workspace_dir}")


@cli.command()
@click.option("--all/--no-all", "all_projects", default=True, help="Run serve against all projects")
@click.option("--projects", "-p", multiple=True, help="Projects to serve with --no-all")
def serve(all_projects: bool, projects: tuple):
    """Serve all applications (client, API, etc.)."""
    from tibr.workspace.nx import serve_args

    console.print("[bold blue]Starting dev servers...[/bold blue]")
    run_external("npx", serve_args(all_projects, projects))


@cli.command()
@click.option("--all/--no-all", "all_projects", default=True, help="Build all projects")
@click.option("--projects", "-p", multiple=True, help="Projects to build with --no-all")
def build(all_projects: bool, projects: tuple):
    """Build all projects."""
    from tibr.workspace.nx import build_args

    console.print("[bold blue]Building projects...[/bold blue]")
    run_external("npx", build_args(all_projects, projects))


@cli.command()
@click.argument("action", type=click.Choice(["up", "down"]))
def docker(action: str):
    """Manage the docker-compose stack (up, down)."""
    from tibr.workspace.nx import docker_compose_args, find_compose_file

    compose_file = find_compose_file(Path.cwd())
    console.print(f"[bold blue]docker-compose {action}[/bold blue] on {compose_file}")
    run_external("docker-compose", docker_compose_args(compose_file, action))


@cli.group()
def register():
    """Update generated wiring in the API."""
    pass


@register.command("routes")
@click.option("--file", "-f", "main_file", type=click.Path(dir_okay=False), default=None, help="API main.ts to update")
@reports_errors
def register_routes_cmd(main_file: str):
    """Rewrite the dynamic route-registration block in the API main.ts."""
    from tibr.workspace.routes import MAIN_TS_CANDIDATES, find_main_ts, register_routes

    main_path = Path(main_file) if main_file else find_main_ts(Path.cwd())
    if main_path is None:
        main_path = Path.cwd() / MAIN_TS_CANDIDATES[0]

    updated = register_routes(main_path)
    console.print(f"[green]✓[/green] Updated route registration in {updated}")


# =============================================================================
# GENERATE COMMANDS
# =============================================================================

@cli.group()
def generate():
    """Generate components, pages, services and migrations."""
    pass


@generate.command("component")
@click.argument("name")
@click.option("--project", "-p", default=None, help="Nx UI project (default: uiProject from config, else 'ui')")
@click.pass_context
def generate_component(ctx, name: str, project: str):
    """Generate a React component through the Nx generator."""
    from tibr.workspace.nx import component_args

    if project is None:
        try:
            project = load_project_config(ctx).ui_project
        except TibrError:
            project = None

    console.print(f'[bold blue]Generating React component "{name}"...[/bold blue]')
    run_external("npx", component_args(name, project))
    console.print("[green]✓[/green] Done.")


@generate.command("route")
@click.argument("name")
def generate_route(name: str):
    """Generate a plain Express route stub."""
    from tibr.generation import write_route_stub

    console.print(f'[bold blue]Generating Express route stub "{name}"...[/bold blue]')
    file_path = write_route_stub(name, Path.cwd())
    console.print(f"[green]✓[/green] Created {file_path}")


@generate.command("form")
@click.argument("entity")
@click.pass_context
@reports_errors
def generate_form(ctx, entity: str):
    """Scaffold a react-hook-form component from an entity schema."""
    from tibr.schema import load_entity_schema
    from tibr.generation import write_form

    config = load_project_config(ctx)
    description = load_entity_schema(entity, config.project_root)
    file_path = write_form(description, config.ui_lib_dir)
    console.print(f"[green]✓[/green] Generated form component at {file_path}")


@generate.command("page")
@click.argument("page_type", metavar="TYPE", type=click.Choice(["list", "detail"]))
@click.argument("entity")
@click.pass_context
@reports_errors
def generate_page(ctx, page_type: str, entity: str):
    """Generate a list or detail React page for an entity."""
    from tibr.generation import write_page

    config = load_project_config(ctx)
    file_path = write_page(entity, page_type, config.ui_lib_dir)
    console.print(f"[green]✓[/green] Generated {page_type} page at {file_path}")


@generate.command("service")
@click.argument("entity")
@click.pass_context
@reports_errors
def generate_service(ctx, entity: str):
    """Scaffold a service class and Express controller for an entity."""
    from tibr.generation import write_service
    from tibr.generation.naming import class_name

    config = load_project_config(ctx)
    for file_path in write_service(entity, config.project_root):
        console.print(f"[green]✓[/green] Wrote {file_path}")
    console.print(f'Service & routes for "{class_name(entity)}" are ready.')


@generate.command("migration")
@click.argument("entity")
@click.option("--dry-run", is_flag=True, help="Print the SQL instead of writing a file")
@click.pass_context
@reports_errors
def generate_migration_cmd(ctx, entity: str, dry_run: bool):
    """Generate a Postgres migration SQL file for an entity."""
    from tibr.schema import load_entity_schema
    from tibr.generation import generate_migration, write_migration

    config = load_project_config(ctx)
    description = load_entity_schema(entity, config.project_root)
    migration = generate_migration(description)

    if dry_run:
        click.echo(migration.to_sql())
        return

    file_path = write_migration(migration, config.migrations_dir)
    console.print(f"[green]✓[/green] Migration written to {file_path}")


# =============================================================================
# DATABASE COMMANDS
# =============================================================================

@cli.command()
@click.option("--dir", "-d", "migrations_dir", type=click.Path(), default=None, help="Migrations directory (overrides .tibrrc)")
@click.pass_context
@reports_errors
def migrate(ctx, migrations_dir: str):
    """Apply all SQL migrations to the database, in filename order."""
    from tibr.database import apply_migrations, list_migrations, resolve_database_url

    config = load_project_config(ctx)
    directory = Path(migrations_dir).resolve() if migrations_dir else config.migrations_dir

    migrations = list_migrations(directory)
    if not migrations:
        console.print("No migrations found.")
        return

    database_url = resolve_database_url(config.database_url, get_settings().database_url)
    applied = apply_migrations(
        migrations,
        database_url,
        on_apply=lambda path: console.print(f"[bold blue]Applying migration[/bold blue] {path.name}..."),
    )
    console.print(f"[green]✓[/green] All {applied} migrations applied successfully.")


# =============================================================================
# DOMAIN COMMANDS
# =============================================================================

def _dictionary_path(config: TibrConfig, override: str = None) -> Path:
    if override:
        return Path(override)
    if not config.domain_dictionary_path:
        raise ConfigNotFoundError(f'"domainDictionaryPath" is not set in {config.config_path}')
    return config.resolve(config.domain_dictionary_path)


@cli.group()
def domains():
    """Work with the domain dictionary."""
    pass


@domains.command("load")
@click.option("--file", "-f", "dictionary_file", type=click.Path(), default=None, help="Domain dictionary CSV (default: from .tibrrc)")
@click.pass_context
@reports_errors
def domains_load(ctx, dictionary_file: str):
    """Load and list the domain dictionary."""
    from tibr.domains import load_domain_dictionary

    config = load_project_config(ctx)
    path = _dictionary_path(config, dictionary_file)
    entries = load_domain_dictionary(path)

    table = Table(title=f"Domain Dictionary ({len(entries)} entries)")
    table.add_column("Entity", style="cyan")
    table.add_column("Description", max_width=60)
    for entry in entries:
        table.add_row(entry.entity, entry.description)

    console.print(table)


@cli.command("infer-entities")
@click.argument("entities", nargs=-1)
@click.option("--model", "-m", default="gpt-4", help="OpenAI model to use for inference")
@click.pass_context
@reports_errors
def infer_entities(ctx, entities: tuple, model: str):
    """Infer entity properties with an LLM and write JSON schema files.

    Defaults to every entity in the domain dictionary.
    """
    from tibr.domains import EntityInferrer, filter_entries, load_domain_dictionary
    from tibr.errors import InferenceError

    config = load_project_config(ctx)
    entries = load_domain_dictionary(_dictionary_path(config))

    targets = filter_entries(entries, entities)
    if not targets:
        raise InferenceError("No matching entities found to infer.")

    settings = get_settings()
    inferrer = EntityInferrer(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=model,
    )

    for entry in targets:
        with console.status(f"[bold green]Inferring properties for {entry.entity}..."):
            schema_path = inferrer.infer_schema(entry, config.project_root)
        console.print(f"[green]✓[/green] Wrote schema to {schema_path}")


# =============================================================================
# CONFIGURATION COMMANDS
# =============================================================================

@cli.group()
def config():
    """Inspect project configuration."""
    pass


@config.command("show")
@click.pass_context
@reports_errors
def config_show(ctx):
    """Display the resolved configuration."""
    project_config = load_project_config(ctx)

    console.print(Panel(
        f"[bold]{project_config.config_path}[/bold]",
        title="Configuration"
    ))

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in project_config.to_dict().items():
        if key == "configPath":
            continue
        table.add_row(key, "-" if value in (None, {}) else str(value))
    table.add_row("migrations dir", str(project_config.migrations_dir))
    table.add_row("ui lib dir", str(project_config.ui_lib_dir))

    console.print(table)


@config.command("validate")
@click.pass_context
def config_validate(ctx):
    """Validate the configuration file."""
    try:
        project_config = load_project_config(ctx)
    except TibrError as e:
        err_console.print(f"[red]✗[/red] Configuration error: {escape(str(e))}")
        sys.exit(1)

    console.print("[green]✓[/green] Configuration is valid")
    if not project_config.domain_dictionary_path:
        console.print("  [yellow]domainDictionaryPath is not set[/yellow]")


if __name__ == "__main__":
    cli()
