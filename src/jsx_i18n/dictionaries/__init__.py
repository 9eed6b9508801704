"""Per-locale dictionary storage, reconciliation and key analysis."""

from .analyzer import CleanResult, KeyAnalyzer, LocaleStatus
from .reconciler import DictionaryReconciler, ReconcileResult, find_key_collisions, reconcile
from .store import (
    backup_dictionaries,
    expand_dictionary,
    flatten_dictionary,
    locale_file_path,
    read_dictionary,
    write_dictionary,
)

__all__ = [
    "CleanResult",
    "DictionaryReconciler",
    "KeyAnalyzer",
    "LocaleStatus",
    "ReconcileResult",
    "backup_dictionaries",
    "expand_dictionary",
    "find_key_collisions",
    "flatten_dictionary",
    "locale_file_path",
    "read_dictionary",
    "reconcile",
    "write_dictionary",
]
