"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal, Sequence

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .. import __version__ as package_version

REPOSITORY_ROOT = Path(__file__).resolve().parents[3]

EnvironmentName = Literal["development", "test", "ci"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "reload": True,
        "db_echo": False,
    },
    "test": {
        "log_level": "WARNING",
        "reload": False,
        "db_echo": False,
    },
    "ci": {
        "log_level": "INFO",
        "reload": False,
        "db_echo": False,
    },
}

SESSION_COOKIE_NAME = "sessionId"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 7  # 7 days


class Settings(BaseSettings):
    """Runtime configuration for the ledger service."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=(REPOSITORY_ROOT / ".env",),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "Session Ledger"
    environment: EnvironmentName = Field(default="development", alias="ENVIRONMENT")
    api_prefix: str = Field(default="", alias="API_PREFIX")
    version: str = Field(default=package_version, alias="VERSION")
    database_url: str = Field(
        default="sqlite+aiosqlite:///./ledger.db",
        alias="DATABASE_URL",
    )
    db_echo: bool = Field(default=False, alias="DB_ECHO")
    db_create_all: bool = Field(default=True, alias="DB_CREATE_ALL")

    session_cookie_name: str = Field(default=SESSION_COOKIE_NAME, alias="SESSION_COOKIE_NAME")
    session_cookie_max_age: int = Field(
        default=SESSION_COOKIE_MAX_AGE,
        alias="SESSION_COOKIE_MAX_AGE",
    )
    session_cookie_path: str = Field(default="/", alias="SESSION_COOKIE_PATH")
    session_cookie_httponly: bool = Field(default=False, alias="SESSION_COOKIE_HTTPONLY")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")
    session_cookie_same_site: str = Field(default="lax", alias="SESSION_COOKIE_SAME_SITE")

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="ALLOWED_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="ALLOW_CREDENTIALS")
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"], alias="ALLOW_METHODS")
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"], alias="ALLOW_HEADERS")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=3333, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    reload: bool = Field(default=True, alias="RELOAD")

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        if not normalized:
            normalized = "development"
        mapped = _ENVIRONMENT_ALIASES.get(normalized)
        if mapped is not None:
            return mapped
        return "development"

    @field_validator("session_cookie_max_age", mode="before")
    @classmethod
    def _ensure_positive_max_age(cls, value: object) -> int:
        try:
            max_age = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return SESSION_COOKIE_MAX_AGE
        return max(max_age, 1)

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _coerce_comma_separated(cls, value: object) -> list[str]:
        """Allow comma separated strings for CORS configuration."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Sequence):
            return [str(item) for item in value if str(item).strip()]
        return []

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @field_validator("session_cookie_same_site", mode="before")
    @classmethod
    def _normalize_same_site(cls, value: object) -> str:
        if not isinstance(value, str):
            return "lax"
        normalized = value.lower()
        if normalized not in {"lax", "strict", "none"}:
            return "lax"
        return normalized

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self

    @property
    def router_prefix(self) -> str:
        """Return ``api_prefix`` normalised to ``/segment`` form or ``""``."""

        prefix = self.api_prefix.strip()
        if prefix and not prefix.startswith("/"):
            prefix = f"/{prefix}"
        prefix = prefix.rstrip("/")
        if prefix == "/":
            return ""
        return prefix


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()


__all__ = [
    "SESSION_COOKIE_MAX_AGE",
    "SESSION_COOKIE_NAME",
    "EnvironmentName",
    "Settings",
    "get_settings",
]
