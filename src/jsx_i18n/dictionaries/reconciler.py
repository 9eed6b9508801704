"""
Merging extracted entries into the per-locale dictionaries.

The merge never destroys human work: the default locale always receives the
latest source text, other locales only gain empty placeholders for keys they
do not have yet, and keys that disappeared from the source are kept until
they are removed explicitly (see ``KeyAnalyzer.remove_unused``).

Usage Examples:
    Pure merge:
        >>> updated = reconcile(entries, {"en": {}, "ko": {"HELLO": "안녕"}}, config)

    Full pass against the files on disk:
        >>> result = DictionaryReconciler(config).sync(entries)
        >>> print(result)
        Reconcile Results: 2 locale(s) written, 0 failed, 3 new key(s)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import override

from ..config.schema import I18nConfig
from ..extraction.keys import qualify_key
from ..extraction.scanner import CandidateEntry
from ..utils.core.exceptions import DictionaryCorruptError, DictionaryWriteError
from .store import (
    FlatDictionary,
    backup_dictionaries,
    expand_dictionary,
    locale_file_path,
    read_dictionary,
    write_dictionary,
)

logger = logging.getLogger(__name__)


class ReconcileResult:
    """Result of a reconciliation pass over all locales."""

    def __init__(self) -> None:
        self.written_locales: list[str] = []
        self.failed_locales: list[tuple[str, DictionaryWriteError]] = []
        self.warnings: list[str] = []
        self.collisions: dict[str, list[str]] = {}
        self.backups: list[Path] = []
        self.added_keys: dict[str, list[str]] = {}
        self.dictionaries: dict[str, FlatDictionary] = {}

    @property
    def failure_count(self) -> int:
        return len(self.failed_locales)

    @property
    def new_key_count(self) -> int:
        """Keys added to the default locale (or to any locale when it has none)."""
        if not self.added_keys:
            return 0
        return max(len(keys) for keys in self.added_keys.values())

    @override
    def __str__(self) -> str:
        return (
            f"Reconcile Results: "
            f"{len(self.written_locales)} locale(s) written, "
            f"{self.failure_count} failed, "
            f"{self.new_key_count} new key(s)"
        )


def canonical_values(entries: Iterable[CandidateEntry], config: I18nConfig) -> dict[str, str]:
    """
    Map each qualified key to its default value.

    The last entry seen for a key wins. Order follows first appearance.
    """
    values: dict[str, str] = {}
    for entry in entries:
        namespace = entry.namespace if entry.namespace is not None else config.namespace
        values[qualify_key(entry.key, namespace, config.namespace_separator)] = entry.default_value
    return values


def find_key_collisions(entries: Iterable[CandidateEntry]) -> dict[str, list[str]]:
    """
    Keys produced by more than one distinct text.

    In text mode "Save" and "Save!" both become ``SAVE`` and the later one
    overwrites the earlier in the default dictionary. This is reported, not
    resolved.
    """
    texts: dict[str, list[str]] = {}
    for entry in entries:
        seen = texts.setdefault(entry.key, [])
        if entry.default_value not in seen:
            seen.append(entry.default_value)
    return {key: values for key, values in texts.items() if len(values) > 1}


def reconcile(
    entries: Iterable[CandidateEntry],
    existing: Mapping[str, FlatDictionary],
    config: I18nConfig,
) -> dict[str, FlatDictionary]:
    """
    Compute the updated flat dictionary of every supported locale.

    Args:
        entries: Candidates from the scanner
        existing: Current flat dictionaries by locale; missing locales start empty
        config: Supplies the locales, default locale and namespace settings

    Returns:
        New dictionaries by locale; the inputs are not modified
    """
    values = canonical_values(entries, config)
    updated: dict[str, FlatDictionary] = {}

    for locale in config.supported_locales:
        translations: FlatDictionary = dict(existing.get(locale, {}))
        is_default = locale == config.default_locale

        for key, default_value in values.items():
            if is_default:
                translations[key] = default_value
            elif key not in translations:
                translations[key] = ""

        updated[locale] = translations

    return updated


class DictionaryReconciler:
    """Reads, merges and writes the locale dictionaries of a project."""

    def __init__(self, config: I18nConfig) -> None:
        self.config: I18nConfig = config

    def locale_path(self, locale: str) -> Path:
        return locale_file_path(self.config.locales_dir, locale)

    def load_existing(self) -> tuple[dict[str, FlatDictionary], list[str]]:
        """
        Read every supported locale's dictionary.

        Corrupt files are treated as empty and reported as warnings.
        """
        existing: dict[str, FlatDictionary] = {}
        warnings: list[str] = []

        for locale in self.config.supported_locales:
            path = self.locale_path(locale)
            try:
                existing[locale] = read_dictionary(path, self.config.namespace_separator)
            except DictionaryCorruptError as e:
                message = f"{e}; treating the {locale} dictionary as empty"
                logger.warning(message)
                warnings.append(message)
                existing[locale] = {}

        return existing, warnings

    def serialize(self, translations: FlatDictionary) -> dict[str, object] | FlatDictionary:
        """Shape a flat dictionary for disk according to the output format."""
        if self.config.output_format == "nested":
            return expand_dictionary(translations, self.config.namespace_separator)
        return translations

    def sync(self, entries: list[CandidateEntry], dry_run: bool = False) -> ReconcileResult:
        """
        Merge entries into the locale files on disk.

        Each locale file is read completely, merged in memory and rewritten
        as a whole. A locale whose file cannot be written is recorded and the
        remaining locales are still written.

        Args:
            entries: Candidates from the scanner
            dry_run: Compute the result without touching the file system
        """
        result = ReconcileResult()
        existing, result.warnings = self.load_existing()

        result.collisions = find_key_collisions(entries) if self.config.key_generation == "text" else {}
        for key, texts in result.collisions.items():
            message = f"Key {key} is generated by {len(texts)} different texts: {texts!r}"
            logger.warning(message)
            result.warnings.append(message)

        updated = reconcile(entries, existing, self.config)
        result.dictionaries = updated
        for locale, translations in updated.items():
            before = existing.get(locale, {})
            result.added_keys[locale] = [key for key in translations if key not in before]

        if dry_run:
            logger.info("Dry run: no dictionary files written")
            return result

        self.config.locales_dir.mkdir(parents=True, exist_ok=True)

        if self.config.backup_path is not None:
            result.backups = backup_dictionaries(
                self.config.locales_dir, self.config.supported_locales, self.config.backup_path
            )

        for locale, translations in updated.items():
            path = self.locale_path(locale)
            try:
                write_dictionary(path, self.serialize(translations), locale)
                result.written_locales.append(locale)
                logger.info(f"Updated {path} ({len(result.added_keys[locale])} new key(s))")
            except DictionaryWriteError as e:
                logger.error(str(e))
                result.failed_locales.append((locale, e))

        logger.info(str(result))
        return result
