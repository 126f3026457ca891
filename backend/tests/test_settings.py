from __future__ import annotations

import pytest

from cards_api.settings import Settings


@pytest.fixture(autouse=True)
def _clean_db_env(monkeypatch):
    for name in ("DATABASE_URL", "DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_PORT", "PORT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = Settings(NODE_ENV="development")
    assert s.port == 3000
    assert s.db_port == 3306
    assert s.db_create_tables is False
    assert s.is_development


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "3307")
    monkeypatch.setenv("PORT", "8080")
    s = Settings()
    assert s.db_host == "db.internal"
    assert s.db_port == 3307
    assert s.port == 8080


def test_sqlalchemy_url_from_parts():
    s = Settings(DB_HOST="db", DB_USER="app", DB_PASSWORD="s3cret", DB_NAME="education_db", DB_PORT=3307)
    url = s.sqlalchemy_url()
    assert url.drivername == "mysql+pymysql"
    assert url.host == "db"
    assert url.port == 3307
    assert url.username == "app"
    assert url.password == "s3cret"
    assert url.database == "education_db"


def test_database_url_overrides_parts():
    s = Settings(DATABASE_URL="sqlite:///cards.db", DB_HOST="ignored")
    assert s.sqlalchemy_url().drivername == "sqlite"


def test_log_safe_dict_hides_password():
    s = Settings(DB_HOST="db", DB_USER="app", DB_PASSWORD="s3cret", DB_NAME="education_db")
    d = s.to_log_safe_dict()
    assert "s3cret" not in repr(d)
    assert d["db"]["password_configured"] is True


@pytest.mark.parametrize("raw,expected", [("prod", "production"), ("Staging", "staging"), ("", "development")])
def test_normalized_environment(raw, expected):
    assert Settings(NODE_ENV=raw).normalized_environment == expected


def test_production_requires_database_settings():
    with pytest.raises(RuntimeError) as ei:
        Settings(NODE_ENV="production").require_in_production()
    assert "DB_HOST" in str(ei.value)
    assert "DB_NAME" in str(ei.value)

    Settings(NODE_ENV="production", DB_HOST="db", DB_USER="app", DB_NAME="education_db").require_in_production()
    Settings(NODE_ENV="production", DATABASE_URL="mysql+pymysql://app@db/x").require_in_production()


def test_settings_are_immutable():
    s = Settings()
    with pytest.raises(Exception):
        s.port = 1
