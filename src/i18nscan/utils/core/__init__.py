"""Core utilities shared by every layer of i18nscan."""

from .exceptions import (
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    I18nScanError,
    OutputError,
    ScanCancelledError,
)

__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "ErrorSeverity",
    "I18nScanError",
    "OutputError",
    "ScanCancelledError",
]
