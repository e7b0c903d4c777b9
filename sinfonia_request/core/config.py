"""
Configuration for the Sinfonia clients.

The access token comes from config/.env or SINFONIA_ACCESS_TOKEN. The
server address, request timeout, default theme file and TUI poll interval
come from config/settings/application.yaml; logging from logging.yaml.
Both YAML files are validated against config_schema on first use.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from sinfonia_request.core.config_schema import ApplicationSchema, LoggingSchema


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """Entry scripts call this first; exits with a message outside the project."""
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Only the server access token."""

    access_token: str = "totallynotsecure"

    model_config = SettingsConfigDict(
        env_prefix="SINFONIA_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load one settings file into its schema."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """Validated contents of application.yaml and logging.yaml."""

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Token settings, reading config/.env under the project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_server_base_url() -> tuple[str, float]:
    """Return (base_url, timeout_seconds) for the configured sound server."""
    app = get_app_config().application
    server = app.server
    base_url = f"{server.scheme}://{server.host}:{server.port}"
    return base_url, float(app.timeouts.request)


def get_theme_path() -> Path:
    """Default theme file for uploads, relative to the working directory."""
    return Path(get_app_config().application.theme.path)
