"""
Project Configuration Loader

Resolves the project-local tibr configuration (.tibrrc, tibr.json, ...) by
walking up from the working directory, the same search a cosmiconfig-style
tool performs. JSON files are parsed as JSON, everything else as YAML.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from tibr.errors import ConfigNotFoundError, MalformedInputError

logger = logging.getLogger(__name__)

SEARCH_PLACES = [".tibrrc", "tibr.json", ".tibrrc.yaml", ".tibrrc.yml"]

DEFAULT_DB_LIB = "libs/data"
DEFAULT_UI_PROJECT = "shared-ui"


@dataclass
class TibrConfig:
    """Resolved project configuration."""
    config_path: Path

    domain_dictionary_path: Optional[str] = None
    dictionary_format: str = "csv"
    dictionary_sheet_names: Dict[str, str] = field(default_factory=dict)

    # Paths relative to the project root
    db_lib: Optional[str] = None
    ui_project: Optional[str] = None

    database_url: Optional[str] = None

    @property
    def project_root(self) -> Path:
        """Directory holding the config file; relative paths resolve against it."""
        return self.config_path.parent

    @property
    def migrations_dir(self) -> Path:
        return self.project_root / (self.db_lib or DEFAULT_DB_LIB) / "migrations"

    @property
    def ui_lib_dir(self) -> Path:
        return self.project_root / "libs" / (self.ui_project or DEFAULT_UI_PROJECT) / "src" / "lib"

    def resolve(self, relative: str) -> Path:
        """Resolve a path from the config against the project root."""
        path = Path(relative)
        return path if path.is_absolute() else self.project_root / path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configPath": str(self.config_path),
            "domainDictionaryPath": self.domain_dictionary_path,
            "dictionaryFormat": self.dictionary_format,
            "dictionarySheetNames": self.dictionary_sheet_names,
            "dbLib": self.db_lib,
            "databaseUrl": self.database_url,
            "uiProject": self.ui_project,
        }


class ConfigLoader:
    """
    Finds and parses the tibr configuration file.
    """

    def __init__(self, start_dir: Optional[Path] = None, config_file: Optional[Path] = None):
        """Search from start_dir (default: cwd), or load config_file directly."""
        self.start_dir = Path(start_dir) if start_dir else Path.cwd()
        self.config_file = Path(config_file) if config_file else None

    def find_config_file(self) -> Optional[Path]:
        """Return the first search place found walking up from start_dir."""
        if self.config_file is not None:
            return self.config_file if self.config_file.is_file() else None

        current = self.start_dir.resolve()
        for directory in [current, *current.parents]:
            for name in SEARCH_PLACES:
                candidate = directory / name
                if candidate.is_file():
                    logger.debug(f"Found config at {candidate}")
                    return candidate
        return None

    def load_config(self) -> TibrConfig:
        """Load the configuration, failing fast when none is found."""
        config_path = self.find_config_file()
        if config_path is None:
            where = self.config_file or self.start_dir
            raise ConfigNotFoundError(
                f"Could not find a .tibrrc or tibr.json for {where}"
            )

        raw_config = self._parse(config_path)
        if not raw_config:
            raise ConfigNotFoundError(f"Configuration file is empty: {config_path}")
        if not isinstance(raw_config, dict):
            raise MalformedInputError(config_path, "configuration must be a mapping")

        return TibrConfig(
            config_path=config_path.resolve(),
            domain_dictionary_path=raw_config.get("domainDictionaryPath"),
            dictionary_format=raw_config.get("dictionaryFormat", "csv"),
            dictionary_sheet_names=raw_config.get("dictionarySheetNames") or {},
            db_lib=raw_config.get("dbLib"),
            ui_project=raw_config.get("uiProject"),
            database_url=raw_config.get("databaseUrl"),
        )

    def _parse(self, config_path: Path) -> Any:
        text = config_path.read_text(encoding="utf-8")
        try:
            if config_path.suffix == ".json":
                return json.loads(text) if text.strip() else None
            return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise MalformedInputError(config_path, f"cannot parse configuration: {e}") from e


def load_config(start_dir: Optional[Path] = None, config_file: Optional[Path] = None) -> TibrConfig:
    """Shortcut for ConfigLoader(...).load_config()."""
    return ConfigLoader(start_dir, config_file).load_config()
