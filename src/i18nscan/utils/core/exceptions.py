"""
Basic exception classes for i18nscan.

This module contains fundamental exception classes that are used throughout
the codebase without creating import cycles. Problems found while scanning
source files are reported as diagnostics, not raised; the exceptions here
cover configuration, output and cancellation.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    CONFIGURATION = "configuration"
    OUTPUT = "output"
    CANCELLATION = "cancellation"
    UNKNOWN = "unknown"


class I18nScanError(Exception):
    """Base exception class for i18nscan specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class ConfigurationError(I18nScanError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class OutputError(I18nScanError):
    """Errors raised while writing catalogs or reading translation files."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.OUTPUT,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class ScanCancelledError(I18nScanError):
    """Raised inside a worker when the scan was cancelled mid-file."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Scan cancelled while processing {path}",
            category=ErrorCategory.CANCELLATION,
            severity=ErrorSeverity.LOW,
            context=path,
        )
        self.path: str = path
