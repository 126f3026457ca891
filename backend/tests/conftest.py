from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Ensure `backend/` is on sys.path so `import cards_api.*` works in tests.
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

# Settings are read once at import; keep tests off production rules.
os.environ["NODE_ENV"] = "test"
os.environ["DB_CREATE_TABLES"] = "false"


@pytest.fixture()
def db_engine(monkeypatch):
    """In-memory SQLite engine standing in for the MySQL pool."""
    from cards_api.db import mysql
    from cards_api.db.schema import metadata

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    monkeypatch.setattr(mysql, "get_engine", lambda: engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def broken_engine(monkeypatch, tmp_path):
    """Engine whose every connection attempt fails at the driver."""
    from cards_api.db import mysql

    engine = create_engine(f"sqlite:///{tmp_path}/missing-dir/cards.db")
    monkeypatch.setattr(mysql, "get_engine", lambda: engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def client(db_engine):
    from fastapi.testclient import TestClient

    from cards_api.main import create_app

    return TestClient(create_app())
