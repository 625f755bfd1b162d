"""Argument builders for the Nx and docker-compose shell-outs."""

from pathlib import Path
from typing import List, Optional, Sequence

DEFAULT_COMPONENT_PROJECT = "ui"

# init writes the first; older workspaces keep the stack under libs/data
COMPOSE_FILES = [
    Path("docker-compose.yaml"),
    Path("libs") / "data" / "docker-compose.yml",
]

DOCKER_ACTIONS = ("up", "down")


def run_many_args(target: str, all_projects: bool = True, projects: Sequence[str] = (), parallel: bool = False) -> List[str]:
    """Arguments for `npx nx run-many --target=<target> ...`."""
    args = ["nx", "run-many", f"--target={target}"]
    if all_projects:
        args.append("--all")
    elif projects:
        args.append(f"--projects={','.join(projects)}")
    if parallel:
        args.append("--parallel")
    return args


def serve_args(all_projects: bool = True, projects: Sequence[str] = ()) -> List[str]:
    return run_many_args("serve", all_projects, projects, parallel=True)


def build_args(all_projects: bool = True, projects: Sequence[str] = ()) -> List[str]:
    return run_many_args("build", all_projects, projects)


def component_args(name: str, project: Optional[str] = None) -> List[str]:
    return [
        "nx",
        "g",
        "@nx/react:component",
        f"--name={name}",
        f"--project={project or DEFAULT_COMPONENT_PROJECT}",
        "--export",
        "--style=css",
    ]


def find_compose_file(root: Path) -> Path:
    """First existing compose file under root; the workspace-root one if none exist."""
    root = Path(root)
    for candidate in COMPOSE_FILES:
        if (root / candidate).is_file():
            return root / candidate
    return root / COMPOSE_FILES[0]


def docker_compose_args(compose_file: Path, action: str) -> List[str]:
    if action not in DOCKER_ACTIONS:
        raise ValueError(f"Unknown docker-compose action: {action}")
    args = ["-f", str(compose_file), action]
    if action == "up":
        args.append("-d")
    return args
