"""File-backed configuration for the ``financier`` tool.

The config lives in ``<config dir>/config.json`` (default ``~/.financier``,
override with ``FINANCIER_CONFIG_DIR``)::

    {
      "databasePath": "data.db",
      "import": {"batchSize": 1000, "skipDuplicates": true}
    }

``databasePath`` is resolved against the config directory when relative.
``DATABASE_URL`` in the environment takes precedence over it.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ConfigurationError
from .logging_setup import get_logger

logger = get_logger("statement_import.config")

CONFIG_FILE_NAME = "config.json"


def default_config_dir() -> Path:
    env_dir = os.getenv("FINANCIER_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".financier"


class ImportSettings(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Progress is logged every ``batch_size`` applied transactions
    batch_size: PositiveInt = 1000
    skip_duplicates: bool = True


class Settings(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    database_path: str = "data.db"
    import_settings: ImportSettings = Field(default_factory=ImportSettings, alias="import")
    config_dir: Path = Field(default_factory=default_config_dir, exclude=True)

    @property
    def database_file(self) -> Path:
        p = Path(self.database_path).expanduser()
        return p if p.is_absolute() else self.config_dir / p

    def database_url(self) -> str:
        """Return ``DATABASE_URL`` when set, else a SQLite URL for ``database_file``."""

        env_url = os.getenv("DATABASE_URL")
        if env_url:
            return env_url
        return f"sqlite:///{self.database_file}"


def config_path(config_dir: Path | None = None) -> Path:
    return (config_dir or default_config_dir()) / CONFIG_FILE_NAME


def save_config(settings: Settings) -> Path:
    path = config_path(settings.config_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = settings.model_dump(mode="json", by_alias=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def load_config(config_dir: Path | None = None) -> Settings:
    """Load settings, writing the defaults first when no config file exists.

    Raises
    ------
    ConfigurationError
        When the file is not valid JSON or does not match the expected shape.
    """

    directory = config_dir or default_config_dir()
    path = config_path(directory)
    if not path.exists():
        settings = Settings(config_dir=directory)
        save_config(settings)
        logger.info("Wrote default config to %s", path)
        return settings

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config in {path}: expected a JSON object")

    try:
        return Settings.model_validate({**data, "config_dir": directory})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config in {path}: {exc}") from exc


__all__ = [
    "CONFIG_FILE_NAME",
    "ImportSettings",
    "Settings",
    "default_config_dir",
    "config_path",
    "load_config",
    "save_config",
]
