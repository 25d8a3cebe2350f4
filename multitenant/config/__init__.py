"""
Configuration Management Module
===============================

This module provides:
- Environment-specific settings loading from YAML
- Dotted-key configuration repository for host applications
- Settings validation
- Logging setup
"""

from .config_manager import (
    Settings, ConfigManager, ConfigRepository, Environment,
    AppConfig, MultiTenantConfig, CacheConfig, ObservabilityConfig,
    read_mapping_file, configure_logging,
    get_config_manager, get_settings, reload_config
)

from .validation import (
    ConfigValidator, ValidationError, ValidationResult,
    validate_config, get_validation_errors
)

__all__ = [
    # Configuration Management
    "Settings", "ConfigManager", "ConfigRepository", "Environment",
    "AppConfig", "MultiTenantConfig", "CacheConfig", "ObservabilityConfig",
    "read_mapping_file", "configure_logging",
    "get_config_manager", "get_settings", "reload_config",

    # Validation
    "ConfigValidator", "ValidationError", "ValidationResult",
    "validate_config", "get_validation_errors"
]
