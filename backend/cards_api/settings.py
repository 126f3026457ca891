from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore", frozen=True)

    # Runtime
    environment: str = Field(default="development", validation_alias="NODE_ENV")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # MySQL
    db_host: str | None = Field(default=None, validation_alias="DB_HOST")
    db_user: str | None = Field(default=None, validation_alias="DB_USER")
    db_password: str | None = Field(default=None, validation_alias="DB_PASSWORD")
    db_name: str | None = Field(default=None, validation_alias="DB_NAME")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    # Full SQLAlchemy URL; wins over the DB_* parts when set.
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

    # Pool
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")
    db_pool_recycle_seconds: int = Field(default=3600, validation_alias="DB_POOL_RECYCLE_SECONDS")
    db_connect_timeout_seconds: int = Field(default=10, validation_alias="DB_CONNECT_TIMEOUT_SECONDS")
    db_create_tables: bool = Field(default=False, validation_alias="DB_CREATE_TABLES")

    # CORS / Frontend
    frontend_urls: str | None = Field(default=None, validation_alias="FRONTEND_URLS")
    # e.g. "vercel.app,onrender.com" allows https://<anything>.vercel.app
    cors_allowed_origin_suffixes: str | None = Field(
        default=None, validation_alias="CORS_ALLOWED_ORIGIN_SUFFIXES"
    )

    # ---- helpers / derived flags ----
    @property
    def normalized_environment(self) -> str:
        v = (self.environment or "").strip().lower()
        if v in ("prod", "production"):
            return "production"
        if v in ("stage", "staging"):
            return "staging"
        if v in ("dev", "development"):
            return "development"
        return v or "development"

    @property
    def is_production(self) -> bool:
        return self.normalized_environment == "production"

    @property
    def is_development(self) -> bool:
        return self.normalized_environment == "development"

    def sqlalchemy_url(self) -> URL:
        if self.database_url and self.database_url.strip():
            return make_url(self.database_url.strip())
        return URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"charset": "utf8mb4"},
        )

    def require_in_production(self) -> None:
        """
        Enforce required settings in production.

        Development may run without a database configured (the health endpoint
        still answers), but production must be able to reach MySQL.
        """
        if not self.is_production:
            return
        if self.database_url and self.database_url.strip():
            return

        missing: list[str] = []
        if not self.db_host:
            missing.append("DB_HOST")
        if not self.db_user:
            missing.append("DB_USER")
        if not self.db_name:
            missing.append("DB_NAME")

        if missing:
            raise RuntimeError(
                "Missing required production environment variables: "
                + ", ".join(missing)
            )

    def to_log_safe_dict(self) -> dict[str, object]:
        """
        A redacted representation safe for structured logs / diagnostics.
        """
        def _has(v: object) -> bool:
            return v is not None and str(v).strip() != ""

        return {
            "environment": self.normalized_environment,
            "host": self.host,
            "port": self.port,
            "db": {
                "url": self.sqlalchemy_url().render_as_string(hide_password=True),
                "password_configured": _has(self.db_password),
                "pool_size": self.db_pool_size,
                "max_overflow": self.db_max_overflow,
                "pool_recycle_seconds": self.db_pool_recycle_seconds,
                "create_tables": bool(self.db_create_tables),
            },
            "cors": {
                "frontend_urls": self.frontend_urls,
                "allowed_origin_suffixes": self.cors_allowed_origin_suffixes,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    s = Settings()
    s.require_in_production()
    return s


# Module-level singleton.
settings = get_settings()
