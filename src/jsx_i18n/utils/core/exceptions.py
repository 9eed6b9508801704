"""
Basic exception classes for the i18n extractor.

This module contains the exception hierarchy shared by the scanner,
transformer, dictionary reconciler and configuration layer. It has no
internal imports so that every module can depend on it without cycles.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    PARSE = "parse"
    DICTIONARY = "dictionary"
    FILESYSTEM = "filesystem"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class I18nToolError(Exception):
    """Base exception class for i18n extractor specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.context: object | None = context
        self.recoverable: bool = recoverable


class ParseFailureError(I18nToolError):
    """A single source file could not be parsed."""

    def __init__(self, file: Path | str, reason: str) -> None:
        super().__init__(
            f"Failed to parse {file}: {reason}",
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.LOW,
            context={"file": str(file)},
            recoverable=True,
        )
        self.file: str = str(file)
        self.reason: str = reason


class DictionaryCorruptError(I18nToolError):
    """An existing locale dictionary is not a valid JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            f"Locale dictionary {path} is corrupt: {reason}",
            category=ErrorCategory.DICTIONARY,
            severity=ErrorSeverity.MEDIUM,
            context={"path": str(path)},
            recoverable=True,
        )
        self.path: Path = path
        self.reason: str = reason


class DictionaryWriteError(I18nToolError):
    """Writing a locale dictionary to disk failed."""

    def __init__(self, locale: str, path: Path, reason: str) -> None:
        super().__init__(
            f"Failed to write {locale} dictionary to {path}: {reason}",
            category=ErrorCategory.FILESYSTEM,
            severity=ErrorSeverity.HIGH,
            context={"locale": locale, "path": str(path)},
            recoverable=True,
        )
        self.locale: str = locale
        self.path: Path = path
        self.reason: str = reason


class ValidationError(I18nToolError):
    """Input validation errors."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            context=context,
            recoverable=False,
        )


class ConfigurationError(I18nToolError):
    """Configuration-related errors."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=False,
        )
