"""Core utilities: exceptions and file helpers."""

from .exceptions import (
    ConfigurationError,
    DictionaryCorruptError,
    DictionaryWriteError,
    ErrorCategory,
    ErrorSeverity,
    I18nToolError,
    ParseFailureError,
    ValidationError,
)
from .file_utils import atomic_write_json, atomic_write_text, dump_json

__all__ = [
    "ConfigurationError",
    "DictionaryCorruptError",
    "DictionaryWriteError",
    "ErrorCategory",
    "ErrorSeverity",
    "I18nToolError",
    "ParseFailureError",
    "ValidationError",
    "atomic_write_json",
    "atomic_write_text",
    "dump_json",
]
