"""
Tenancy Error Handling
======================

Exception hierarchy for tenant directory resolution and configuration.

Absence of a resource (no tenant root configured, no routes file, no old
directory after a rename) is never an error: those lookups return ``None``.
Exceptions are reserved for content that exists but cannot be used.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification."""
    CONFIGURATION = "configuration"
    FILESYSTEM = "filesystem"
    REPOSITORY = "repository"
    UNKNOWN = "unknown"


class TenancyError(Exception):
    """Base exception for multi-tenancy operations."""

    category = ErrorCategory.UNKNOWN

    def __init__(self, message: str, original_error: Optional[Exception] = None, **kwargs):
        super().__init__(message)
        self.original_error = original_error
        self.metadata = kwargs

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_type": type(self).__name__,
            "error_message": str(self),
            "category": self.category.value,
            "original_error": repr(self.original_error) if self.original_error else None,
            "metadata": self.metadata
        }


class ConfigurationError(TenancyError):
    """Exception raised when settings cannot be found or loaded."""
    category = ErrorCategory.CONFIGURATION


class ConfigFileError(ConfigurationError):
    """Exception raised for tenant config or language files that are not a mapping."""

    def __init__(self, message: str, path: str, original_error: Optional[Exception] = None, **kwargs):
        super().__init__(message, original_error, path=path, **kwargs)
        self.path = path


class DirectoryError(TenancyError):
    """Exception raised when a tenant directory cannot be migrated."""
    category = ErrorCategory.FILESYSTEM


class RepositoryError(TenancyError):
    """Exception raised for customer repository issues."""
    category = ErrorCategory.REPOSITORY


__all__ = [
    "ErrorCategory",
    "TenancyError",
    "ConfigurationError",
    "ConfigFileError",
    "DirectoryError",
    "RepositoryError"
]
