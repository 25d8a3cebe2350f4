"""
Configuration Manager
=====================

Environment-based settings for the multi-tenant layer, loaded from YAML with
environment variable overrides, plus the dotted-key configuration repository
that host applications expose to tenants.
"""

import copy
import json
import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field, asdict
from enum import Enum

import yaml

from ..error_handling import ConfigurationError, ConfigFileError

logger = logging.getLogger(__name__)

MAPPING_FILE_EXTENSIONS = (".yaml", ".yml", ".json")


class Environment(Enum):
    """Environment types for configuration."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


@dataclass
class AppConfig:
    """Application-wide defaults that tenants inherit."""
    locale: str = "en"
    fallback_locale: str = "en"
    storage_path: Optional[str] = None
    lang_path: Optional[str] = None


@dataclass
class MultiTenantConfig:
    """Tenant directory settings."""
    tenant_directory: Optional[str] = None
    create_directories: bool = True


@dataclass
class CacheConfig:
    """Cache namespace settings."""
    prefix: str = "app"


@dataclass
class ObservabilityConfig:
    """Logging configuration."""
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None


@dataclass
class Settings:
    """Application settings with environment-specific configuration."""
    environment: Environment = Environment.DEVELOPMENT
    app_name: str = "multitenant"

    app: AppConfig = field(default_factory=AppConfig)
    multi_tenant: MultiTenantConfig = field(default_factory=MultiTenantConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        data = asdict(self)
        data["environment"] = self.environment.value
        return data

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION


def read_mapping_file(path: str) -> Dict[str, Any]:
    """
    Read a YAML or JSON file that must evaluate to a mapping.

    An empty file reads as an empty mapping. OS errors propagate.
    """
    with open(path, "rb") as f:
        content = f.read()

    try:
        raw = content.decode("utf-8")
        if path.endswith(".json"):
            data = json.loads(raw) if raw.strip() else {}
        else:
            data = yaml.safe_load(raw)
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigFileError(f"Unable to parse {path}", path=path, original_error=e)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            f"{path} must contain a mapping, got {type(data).__name__}", path=path
        )
    return data


class ConfigRepository:
    """
    Nested configuration store addressed with dotted keys.

    The first segment of a key is its namespace: ``cache.prefix`` lives in the
    ``cache`` namespace.
    """

    def __init__(self, items: Optional[Dict[str, Any]] = None):
        self._items: Dict[str, Any] = copy.deepcopy(items) if items else {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfigRepository":
        """Build a repository from loaded settings."""
        data = settings.to_dict()
        return cls({
            "app": dict(data["app"], name=settings.app_name, env=data["environment"]),
            "multi-tenant": {
                "tenant-directory": settings.multi_tenant.tenant_directory,
                "create-directories": settings.multi_tenant.create_directories,
            },
            "cache": data["cache"],
            "logging": data["observability"],
        })

    def get(self, key: str, default: Any = None) -> Any:
        current: Any = self._items
        for segment in key.split("."):
            if not isinstance(current, dict) or segment not in current:
                return default
            current = current[segment]
        return current

    def has(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def set(self, key: str, value: Any):
        keys = key.split(".")
        current = self._items

        for segment in keys[:-1]:
            if not isinstance(current.get(segment), dict):
                current[segment] = {}
            current = current[segment]

        current[keys[-1]] = value

    def namespace(self, name: str) -> Dict[str, Any]:
        """Get a copy of a whole namespace."""
        value = self._items.get(name, {})
        return copy.deepcopy(value) if isinstance(value, dict) else {}

    def set_namespace(self, name: str, values: Dict[str, Any]):
        """Replace a whole namespace."""
        self._items[name] = copy.deepcopy(values)

    def all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._items)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key: str) -> bool:
        return self.has(key)


class ConfigManager:
    """
    Settings loader with environment overrides.

    Looks for ``settings.{ENVIRONMENT}.yaml`` then ``settings.yaml`` in the
    configuration directory unless an explicit path is given.
    """

    ENV_OVERRIDES = {
        'app.storage_path': 'STORAGE_PATH',
        'app.locale': 'APP_LOCALE',
        'app.fallback_locale': 'APP_FALLBACK_LOCALE',
        'multi_tenant.tenant_directory': 'MULTI_TENANT_DIRECTORY',
        'cache.prefix': 'CACHE_PREFIX',
        'observability.log_level': 'LOG_LEVEL',
    }

    def __init__(self, config_path: Optional[str] = None, config_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else Path(os.getcwd())
        self.config_path = config_path or self._find_config_path()
        self._settings: Optional[Settings] = None

        self.load_config()

    def _find_config_path(self) -> Optional[str]:
        """Find configuration file path based on environment."""
        env = os.environ.get("ENVIRONMENT", "development")

        env_config = self.config_dir / f"settings.{env}.yaml"
        if env_config.exists():
            return str(env_config)

        default_config = self.config_dir / "settings.yaml"
        if default_config.exists():
            return str(default_config)

        return None

    def load_config(self) -> Settings:
        """Load configuration from file, or defaults when no file exists."""
        if self.config_path is None:
            config_data: Dict[str, Any] = {}
            logger.info("No settings file found, using defaults")
        else:
            try:
                config_data = read_mapping_file(self.config_path)
            except FileNotFoundError as e:
                raise ConfigurationError(
                    f"Settings file not found: {self.config_path}", original_error=e
                )
            logger.info(f"Configuration loaded from {self.config_path}")

        config_data = self._merge_environment_variables(config_data)
        self._settings = self._create_settings_from_dict(config_data)
        return self._settings

    def _merge_environment_variables(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge environment variables with configuration data."""
        for config_path, env_var in self.ENV_OVERRIDES.items():
            env_value = os.environ.get(env_var)
            if env_value:
                self._set_nested_value(config_data, config_path, env_value)

        return config_data

    def _set_nested_value(self, data: Dict[str, Any], path: str, value: Any):
        """Set nested dictionary value using dot notation."""
        keys = path.split('.')
        current = data

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _create_settings_from_dict(self, config_data: Dict[str, Any]) -> Settings:
        """Create Settings object from configuration dictionary."""
        settings_dict: Dict[str, Any] = {}

        try:
            settings_dict['environment'] = Environment(config_data.get('environment', 'development'))
            settings_dict['app_name'] = config_data.get('app_name', 'multitenant')

            if 'app' in config_data:
                settings_dict['app'] = AppConfig(**config_data['app'])
            if 'multi_tenant' in config_data:
                settings_dict['multi_tenant'] = MultiTenantConfig(**config_data['multi_tenant'])
            if 'cache' in config_data:
                settings_dict['cache'] = CacheConfig(**config_data['cache'])
            if 'observability' in config_data:
                settings_dict['observability'] = ObservabilityConfig(**config_data['observability'])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid settings: {e}", original_error=e)

        return Settings(**settings_dict)

    @property
    def settings(self) -> Settings:
        """Get current settings."""
        if self._settings is None:
            self.load_config()
        return self._settings

    def repository(self) -> ConfigRepository:
        """Get a fresh configuration repository for the current settings."""
        return ConfigRepository.from_settings(self.settings)


def configure_logging(settings: Settings) -> None:
    """Apply the observability settings to the root logger."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.observability.log_file:
        handlers.append(logging.FileHandler(settings.observability.log_file))

    logging.basicConfig(
        level=getattr(logging, settings.observability.log_level.upper(), logging.INFO),
        format=settings.observability.log_format,
        handlers=handlers,
        force=True
    )


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reload_config() -> Settings:
    """Reload settings of the global configuration manager."""
    return get_config_manager().load_config()


def get_settings() -> Settings:
    """Get current application settings."""
    return get_config_manager().settings
