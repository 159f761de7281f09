from __future__ import annotations

import json
from pathlib import Path

import pytest

from statement_import.config import (
    ImportSettings,
    Settings,
    config_path,
    default_config_dir,
    load_config,
    save_config,
)
from statement_import.errors import ConfigurationError


def test_default_config_dir_from_env(tmp_path: Path):
    # conftest points FINANCIER_CONFIG_DIR at tmp_path / "config"
    assert default_config_dir() == tmp_path / "config"


def test_load_writes_defaults_when_missing(tmp_path: Path):
    settings = load_config()

    assert settings.database_path == "data.db"
    assert settings.import_settings == ImportSettings(batch_size=1000, skip_duplicates=True)
    on_disk = json.loads(config_path().read_text(encoding="utf-8"))
    assert on_disk == {
        "databasePath": "data.db",
        "import": {"batchSize": 1000, "skipDuplicates": True},
    }


def test_load_reads_camel_case_keys(tmp_path: Path):
    path = config_path()
    path.write_text(
        json.dumps({"databasePath": "/srv/ledger.db", "import": {"batchSize": 50, "skipDuplicates": False}}),
        encoding="utf-8",
    )

    settings = load_config()

    assert settings.import_settings.batch_size == 50
    assert settings.import_settings.skip_duplicates is False
    assert settings.database_file == Path("/srv/ledger.db")


def test_partial_config_keeps_defaults():
    config_path().write_text(json.dumps({"import": {"batchSize": 10}}), encoding="utf-8")
    settings = load_config()
    assert settings.import_settings.skip_duplicates is True
    assert settings.database_path == "data.db"


def test_relative_database_path_resolves_against_config_dir(tmp_path: Path):
    settings = Settings(config_dir=tmp_path / "cfg", database_path="ledger.db")
    assert settings.database_file == tmp_path / "cfg" / "ledger.db"
    assert settings.database_url() == f"sqlite:///{tmp_path / 'cfg' / 'ledger.db'}"


def test_database_url_env_wins(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://ledger@localhost/ledger")
    assert Settings().database_url() == "postgresql://ledger@localhost/ledger"


def test_save_round_trip_omits_config_dir(tmp_path: Path):
    settings = Settings(config_dir=tmp_path / "cfg", database_path="x.db")
    settings.import_settings.batch_size = 5
    path = save_config(settings)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert "configDir" not in data
    assert load_config(tmp_path / "cfg").import_settings.batch_size == 5


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2]",
        json.dumps({"import": {"batchSize": 0}}),
        json.dumps({"import": {"skipDuplicates": "sometimes"}}),
    ],
)
def test_invalid_config_raises(content: str):
    config_path().write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config()
