"""Pytest configuration for test isolation.

Every test gets its own config directory (``FINANCIER_CONFIG_DIR``) and no
ambient ``DATABASE_URL``, so nothing touches ``~/.financier`` or a developer
database. The shared engine singleton and the package logger are reset after
each test.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import dispose_engine, get_session
from sqlalchemy.orm import Session

from tests.helpers.db import bootstrap_sqlite_db


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    config_dir = tmp_path / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("FINANCIER_CONFIG_DIR", os.fspath(config_dir))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("STATEMENT_IMPORT_LOG_LEVEL", raising=False)
    yield
    dispose_engine()
    logger = logging.getLogger("statement_import")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "db" / "ledger.db")


@pytest.fixture
def session(db_url: str) -> Iterator[Session]:
    s = get_session(database_url=db_url)
    try:
        yield s
    finally:
        s.close()
