"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the real project files (YAML configs, .env).
Failure scenarios use tmp_path to create controlled filesystems.
"""

from pathlib import Path

import pytest

from sinfonia_request.core.config import (
    AppConfig,
    Settings,
    find_project_root,
    get_app_config,
    get_server_base_url,
    get_settings,
    get_theme_path,
    load_yaml_config,
    validate_project_root,
)
from sinfonia_request.core.config_schema import ApplicationSchema, LoggingSchema


# =============================================================================
# find_project_root
# =============================================================================


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert root.is_dir()
        assert (root / ".project_root").exists()

    def test_config_directory_exists_at_root(self):
        root = find_project_root()
        assert (root / "config" / "settings").is_dir()
        assert (root / "config" / ".env").is_file()

    def test_raises_when_no_marker_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()


class TestValidateProjectRoot:
    """Tests for the SystemExit wrapper around find_project_root."""

    def test_returns_path_when_marker_exists(self):
        root = validate_project_root()
        assert (root / ".project_root").exists()

    def test_exits_when_marker_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit):
            validate_project_root()


# =============================================================================
# YAML loading
# =============================================================================


class TestLoadYamlConfig:
    """Tests for loading config/settings/*.yaml."""

    def test_loads_application_yaml(self):
        data = load_yaml_config("application.yaml")
        assert data["server"]["port"] == 9090

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError, match="nonexistent.yaml"):
            load_yaml_config("nonexistent.yaml")

    def test_empty_file_returns_empty_dict(self, tmp_path, monkeypatch):
        (tmp_path / ".project_root").touch()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        (settings_dir / "empty.yaml").write_text("")
        monkeypatch.chdir(tmp_path)

        assert load_yaml_config("empty.yaml") == {}


class TestAppConfig:
    """Tests for schema-validated application configuration."""

    def test_sections_are_typed(self):
        config = AppConfig()
        assert isinstance(config.application, ApplicationSchema)
        assert isinstance(config.logging, LoggingSchema)

    def test_get_app_config_is_cached(self):
        assert get_app_config() is get_app_config()

    def test_unknown_keys_are_rejected(self, tmp_path, monkeypatch):
        root = Path.cwd()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        (tmp_path / ".project_root").touch()
        (settings_dir / "logging.yaml").write_text((root / "config" / "settings" / "logging.yaml").read_text())
        application = (root / "config" / "settings" / "application.yaml").read_text()
        (settings_dir / "application.yaml").write_text(application + "\nretries: 3\n")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="Invalid configuration in application.yaml"):
            AppConfig()


class TestServerBaseUrl:
    """Tests for get_server_base_url and get_theme_path."""

    def test_builds_url_from_server_section(self):
        base_url, timeout = get_server_base_url()
        assert base_url == "http://127.0.0.1:9090"
        assert timeout == 30.0

    def test_theme_path_default(self):
        assert get_theme_path() == Path("theme.json")


class TestSettings:
    """Tests for secrets loaded from config/.env."""

    def test_token_from_env_file(self):
        assert get_settings().access_token == "totallynotsecure"

    def test_environment_overrides_env_file(self, monkeypatch):
        monkeypatch.setenv("SINFONIA_ACCESS_TOKEN", "from-environment")
        assert get_settings().access_token == "from-environment"

    def test_default_without_env_file(self, tmp_path):
        settings = Settings(_env_file=str(tmp_path / "missing.env"))
        assert settings.access_token == "totallynotsecure"
