"""
Shared test fixtures for tibr.

Provides temporary project roots with a .tibrrc, entity schema files, and a
recorder that replaces external command execution.
"""

import json
import sys
from pathlib import Path

import pytest

# Ensure the project packages are importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tibr import process
from tibr.schema import parse_entity_schema
from tibr.settings import get_settings
from tests import CommandRecorder

USER_SCHEMA = {
    "title": "User",
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "role": {"type": "string", "enum": ["admin", "member"]},
        "age": {"type": "integer"},
    },
}

TIBRRC = """\
domainDictionaryPath: docs/domain-dictionary.csv
dictionaryFormat: csv
dbLib: libs/data
uiProject: shared-ui
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment out of settings."""
    for var in ("DATABASE_URL", "OPENAI_API_KEY", "OPENAI_BASE_URL"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def project_root(tmp_path, monkeypatch) -> Path:
    """A project directory with a YAML .tibrrc, used as the working directory."""
    (tmp_path / ".tibrrc").write_text(TIBRRC)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_schema(project_root):
    """Factory: write libs/domain/src/lib/<entity>.schema.json under the project root."""
    def _write(entity: str, schema) -> Path:
        path = project_root / "libs" / "domain" / "src" / "lib" / f"{entity.lower()}.schema.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(schema if isinstance(schema, str) else json.dumps(schema, indent=2))
        return path
    return _write


@pytest.fixture
def user_entity():
    """EntityDescription for the User example schema."""
    return parse_entity_schema("User", USER_SCHEMA)


@pytest.fixture
def recorder(monkeypatch) -> CommandRecorder:
    """Replace external command execution with a recorder."""
    recorder = CommandRecorder()
    monkeypatch.setattr(process, "run_command", recorder)
    return recorder
