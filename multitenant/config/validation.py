"""
Configuration Validation
========================

Validation of loaded settings with detailed error reporting.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass
import re
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

LOCALE_PATTERN = re.compile(r'^[a-z]{2,3}([_-][A-Za-z]{2,4})?$')
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_ENVIRONMENTS = ["development", "staging", "production", "testing"]


@dataclass
class ValidationError:
    """Validation error details."""
    field_path: str
    message: str
    severity: str = "error"  # error, warning
    suggested_value: Optional[Any] = None


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self):
        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationError] = []
        self.is_valid = True

    def add_error(self, field_path: str, message: str, suggested_value: Optional[Any] = None):
        """Add validation error."""
        self.errors.append(ValidationError(field_path, message, "error", suggested_value))
        self.is_valid = False

    def add_warning(self, field_path: str, message: str):
        """Add validation warning."""
        self.warnings.append(ValidationError(field_path, message, "warning"))

    def get_summary(self) -> str:
        """Get validation summary."""
        if self.is_valid:
            return f"Configuration valid. {len(self.warnings)} warnings."
        return f"Configuration invalid. {len(self.errors)} errors, {len(self.warnings)} warnings."


class ConfigValidator:
    """Settings validator."""

    @staticmethod
    def validate_locale(locale: Any, field_path: str, result: ValidationResult):
        """Validate a locale code such as ``en`` or ``pt_BR``."""
        if not isinstance(locale, str) or not LOCALE_PATTERN.match(locale):
            result.add_error(field_path, f"Invalid locale: {locale}", suggested_value="en")

    @staticmethod
    def validate_app_config(config: Dict[str, Any], result: ValidationResult):
        prefix = "app"

        ConfigValidator.validate_locale(config.get("locale"), f"{prefix}.locale", result)
        ConfigValidator.validate_locale(config.get("fallback_locale"), f"{prefix}.fallback_locale", result)

        lang_path = config.get("lang_path")
        if lang_path and not Path(lang_path).is_dir():
            result.add_warning(f"{prefix}.lang_path", f"Language directory does not exist: {lang_path}")

    @staticmethod
    def validate_multi_tenant_config(config: Dict[str, Any], storage_path: Optional[str],
                                     result: ValidationResult):
        prefix = "multi_tenant"

        tenant_directory = config.get("tenant_directory")
        if not tenant_directory and not storage_path:
            result.add_warning(
                f"{prefix}.tenant_directory",
                "No tenant directory or storage path configured, tenant paths will not resolve"
            )
        elif tenant_directory and not Path(tenant_directory).is_dir():
            result.add_warning(f"{prefix}.tenant_directory", f"Tenant directory does not exist: {tenant_directory}")

    @staticmethod
    def validate_cache_config(config: Dict[str, Any], result: ValidationResult):
        prefix = config.get("prefix")
        if not isinstance(prefix, str) or not prefix:
            result.add_error("cache.prefix", "Cache prefix must be a non-empty string", suggested_value="app")

    @staticmethod
    def validate_observability_config(config: Dict[str, Any], result: ValidationResult):
        log_level = str(config.get("log_level", "INFO")).upper()
        if log_level not in VALID_LOG_LEVELS:
            result.add_error("observability.log_level", f"Invalid log level. Must be one of: {VALID_LOG_LEVELS}")

        log_file = config.get("log_file")
        if log_file and not Path(log_file).parent.exists():
            result.add_error("observability.log_file", f"Parent directory does not exist: {log_file}")

    @classmethod
    def validate_settings(cls, settings_dict: Dict[str, Any]) -> ValidationResult:
        """Validate a settings dictionary as produced by ``Settings.to_dict``."""
        result = ValidationResult()

        environment = settings_dict.get("environment", "")
        if environment not in VALID_ENVIRONMENTS:
            result.add_error("environment", f"Invalid environment. Must be one of: {VALID_ENVIRONMENTS}")

        app_config = settings_dict.get("app", {})
        cls.validate_app_config(app_config, result)
        cls.validate_multi_tenant_config(
            settings_dict.get("multi_tenant", {}), app_config.get("storage_path"), result
        )
        cls.validate_cache_config(settings_dict.get("cache", {}), result)
        cls.validate_observability_config(settings_dict.get("observability", {}), result)

        logger.info(f"Configuration validation completed: {result.get_summary()}")
        return result


def validate_config(settings) -> ValidationResult:
    """Validate a ``Settings`` instance."""
    return ConfigValidator.validate_settings(settings.to_dict())


def get_validation_errors(settings) -> List[str]:
    """Get validation error messages for a ``Settings`` instance."""
    result = validate_config(settings)
    return [f"{error.field_path}: {error.message}" for error in result.errors]
