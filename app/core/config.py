from __future__ import annotations

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration for products-api.

    The database can be given either as a full DATABASE_URL or as the DB_* pieces.
    Without DATABASE_URL every DB_* piece is mandatory: the service refuses to start
    with a partial configuration instead of failing on the first query.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Service ---
    app_name: str = Field(default="products-api", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    environment: str = Field(default="local", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CSV allowlist, e.g. "http://localhost:5173,http://127.0.0.1:5173"
    cors_allowed_origins: str = Field(default="http://localhost:5173", validation_alias="CORS_ALLOWED_ORIGINS")

    # Create the products table on startup if it does not exist.
    auto_migrate: bool = Field(default=True, validation_alias="AUTO_MIGRATE")

    # -------------------------
    # Database
    # -------------------------
    # Option A: full URL (used as-is when set).
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    # Option B: pieces.
    db_dialect: str = Field(default="postgresql+psycopg", validation_alias="DB_DIALECT")
    db_host: Optional[str] = Field(default=None, validation_alias="DB_HOST")
    db_port: Optional[int] = Field(default=None, validation_alias="DB_PORT")
    db_name: Optional[str] = Field(default=None, validation_alias="DB_NAME")
    db_user: Optional[str] = Field(default=None, validation_alias="DB_USER")
    db_password: Optional[str] = Field(default=None, validation_alias="DB_PASSWORD")

    @model_validator(mode="after")
    def _require_database_config(self) -> "Settings":
        if self.database_url and self.database_url.strip():
            return self

        pieces = {
            "DB_HOST": self.db_host,
            "DB_PORT": self.db_port,
            "DB_NAME": self.db_name,
            "DB_USER": self.db_user,
            "DB_PASSWORD": self.db_password,
        }
        missing = [name for name, value in pieces.items() if value is None or str(value).strip() == ""]
        if missing:
            raise ValueError(f"Database configuration is incomplete, missing: {', '.join(missing)}")
        return self

    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    @property
    def database_url_resolved(self) -> str:
        """
        DATABASE_URL when set, otherwise built from the DB_* pieces.

        Never log this value: it carries the password.
        """
        if self.database_url and self.database_url.strip():
            return self.database_url.strip()

        return (
            f"{self.db_dialect}://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
