"""
Unit Tests for Configuration
============================

Settings loading, environment overrides, the dotted-key repository and
settings validation.
"""

import logging

import pytest

from multitenant.config.config_manager import (
    ConfigManager, ConfigRepository, Environment, Settings, configure_logging
)
from multitenant.config.validation import ConfigValidator, get_validation_errors, validate_config
from multitenant.error_handling import ConfigFileError, ConfigurationError
from multitenant.tenancy.directory import resolve_tenant_root

SETTINGS_YAML = """
environment: testing
app_name: tenants
app:
  locale: nl
  fallback_locale: en
  storage_path: /var/storage
cache:
  prefix: shop
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for env_var in list(ConfigManager.ENV_OVERRIDES.values()) + ["ENVIRONMENT"]:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "settings.yaml").write_text(SETTINGS_YAML)
    return tmp_path


class TestConfigManager:
    """Test settings loading."""

    def test_load_settings_file(self, config_dir):
        """Test loading settings.yaml."""
        settings = ConfigManager(config_dir=str(config_dir)).settings

        assert settings.environment == Environment.TESTING
        assert settings.app_name == "tenants"
        assert settings.app.locale == "nl"
        assert settings.cache.prefix == "shop"
        assert settings.multi_tenant.tenant_directory is None

    def test_environment_specific_file(self, config_dir, monkeypatch):
        """Test the environment-specific file wins."""
        (config_dir / "settings.staging.yaml").write_text("environment: staging\n")
        monkeypatch.setenv("ENVIRONMENT", "staging")

        manager = ConfigManager(config_dir=str(config_dir))

        assert manager.config_path.endswith("settings.staging.yaml")
        assert manager.settings.environment == Environment.STAGING

    def test_defaults_without_file(self, tmp_path):
        """Test defaults when no settings file exists."""
        manager = ConfigManager(config_dir=str(tmp_path))

        assert manager.config_path is None
        assert manager.settings == Settings()

    def test_environment_overrides(self, config_dir, monkeypatch):
        """Test environment variables override the file."""
        monkeypatch.setenv("MULTI_TENANT_DIRECTORY", "/srv/tenants")
        monkeypatch.setenv("CACHE_PREFIX", "env")

        settings = ConfigManager(config_dir=str(config_dir)).settings

        assert settings.multi_tenant.tenant_directory == "/srv/tenants"
        assert settings.cache.prefix == "env"

    def test_missing_explicit_file(self, tmp_path):
        """Test a missing explicit settings file."""
        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=str(tmp_path / "nope.yaml"))

    def test_unparseable_file(self, tmp_path):
        """Test a settings file that does not parse."""
        path = tmp_path / "settings.yaml"
        path.write_text("app: [unclosed\n")
        with pytest.raises(ConfigFileError):
            ConfigManager(config_path=str(path))

    def test_unknown_setting(self, tmp_path):
        """Test an unknown settings key."""
        path = tmp_path / "settings.yaml"
        path.write_text("cache:\n  ttl: 5\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=str(path))

    def test_repository(self, config_dir):
        """Test the repository built from settings."""
        repository = ConfigManager(config_dir=str(config_dir)).repository()

        assert repository.get("app.locale") == "nl"
        assert repository.get("app.env") == "testing"
        assert repository.get("cache.prefix") == "shop"
        assert resolve_tenant_root(repository) == "/var/storage/multi-tenant"


class TestConfigRepository:
    """Test the dotted-key repository."""

    def test_dotted_get_set(self):
        """Test dotted key access."""
        repository = ConfigRepository()
        repository.set("cache.prefix", "app")
        repository.set("app.mail.driver", "smtp")

        assert repository.get("cache.prefix") == "app"
        assert repository["app.mail.driver"] == "smtp"
        assert repository.get("app.mail.missing", "x") == "x"
        assert "app.mail" in repository
        assert "app.other" not in repository

    def test_namespace_copies(self):
        """Test namespaces are copied in and out."""
        items = {"app": {"env": "prod"}}
        repository = ConfigRepository(items)
        items["app"]["env"] = "changed"

        namespace = repository.namespace("app")
        namespace["debug"] = True

        assert repository.namespace("app") == {"env": "prod"}
        repository.set_namespace("app", namespace)
        assert repository.get("app.debug") is True

    def test_set_replaces_scalar_parent(self):
        """Test setting below a scalar replaces it."""
        repository = ConfigRepository({"cache": "file"})
        repository.set("cache.prefix", "app")
        assert repository.all() == {"cache": {"prefix": "app"}}


class TestValidation:
    """Test settings validation."""

    def test_default_settings_warn_about_root(self):
        """Test default settings only warn about the tenant root."""
        result = validate_config(Settings())

        assert result.is_valid
        assert [w.field_path for w in result.warnings] == ["multi_tenant.tenant_directory"]

    def test_invalid_values(self):
        """Test invalid locale, cache prefix and log level."""
        settings = Settings()
        settings.app.locale = "not a locale"
        settings.cache.prefix = ""
        settings.observability.log_level = "LOUD"

        errors = get_validation_errors(settings)

        assert len(errors) == 3
        assert any(e.startswith("app.locale") for e in errors)
        assert any(e.startswith("cache.prefix") for e in errors)
        assert any(e.startswith("observability.log_level") for e in errors)

    def test_invalid_environment(self):
        """Test an unknown environment."""
        result = ConfigValidator.validate_settings({"environment": "moon"})
        assert not result.is_valid
        assert result.errors[0].field_path == "environment"

    def test_existing_tenant_directory(self, tmp_path):
        """Test no warnings with an existing tenant directory."""
        settings = Settings()
        settings.multi_tenant.tenant_directory = str(tmp_path)
        assert validate_config(settings).warnings == []


def test_configure_logging_file(tmp_path):
    """Test logging to a configured file."""
    log_file = tmp_path / "tenancy.log"
    settings = Settings()
    settings.observability.log_file = str(log_file)
    settings.observability.log_level = "debug"

    configure_logging(settings)
    logging.getLogger("multitenant.test").debug("tenant registered")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "tenant registered" in log_file.read_text()
