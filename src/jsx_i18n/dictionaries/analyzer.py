"""
Cross-referencing dictionary keys with their use in source code.

The analyzer reads sources as plain text and looks for runtime calls with a
literal key, ``i18n.t("KEY")`` or ``i18n.t('KEY', {...})``. It reports keys
used from several places, keys the default dictionary declares but nothing
uses, and keys used but never declared.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import override

from ..config.schema import I18nConfig
from ..extraction.scanner import find_source_files
from ..utils.core.exceptions import DictionaryCorruptError, DictionaryWriteError
from .store import FlatDictionary, expand_dictionary, locale_file_path, read_dictionary, write_dictionary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocaleStatus:
    """Translation progress of one locale."""

    locale: str
    total: int
    empty: int

    @property
    def completed(self) -> int:
        return self.total - self.empty

    @property
    def percentage(self) -> int:
        if self.total == 0:
            return 0
        return round(self.completed / self.total * 100)


class CleanResult:
    """Result of removing unused keys from the locale files."""

    def __init__(self) -> None:
        self.unused_keys: list[str] = []
        self.updated_locales: list[str] = []
        self.failed_locales: list[tuple[str, Exception]] = []
        self.dry_run: bool = False

    @override
    def __str__(self) -> str:
        action = "would be removed" if self.dry_run else "removed"
        return (
            f"Clean Results: {len(self.unused_keys)} unused key(s) {action}, "
            f"{len(self.updated_locales)} locale(s) updated, "
            f"{len(self.failed_locales)} failed"
        )


class KeyAnalyzer:
    """Reports on how dictionary keys are referenced from source files."""

    def __init__(self, config: I18nConfig) -> None:
        self.config: I18nConfig = config
        identifier = re.escape(config.runtime.identifier)
        self.call_pattern: re.Pattern[str] = re.compile(
            rf"(?<![\w$.]){identifier}\.t\(\s*(['\"])([^'\"]+)\1\s*[,)]"
        )

    def _files(self, files: list[Path] | None) -> list[Path]:
        return files if files is not None else find_source_files(self.config)

    def find_key_references(self, files: list[Path] | None = None) -> dict[str, list[str]]:
        """
        Collect every literal-key runtime call.

        Returns:
            Locations (``file:line``) by key, in file order then source order
        """
        references: dict[str, list[str]] = {}

        for path in self._files(files):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Skipping {path}: {e}")
                continue

            for match in self.call_pattern.finditer(content):
                line = content.count("\n", 0, match.start()) + 1
                references.setdefault(match.group(2), []).append(f"{path}:{line}")

        return references

    def find_duplicates(self, files: list[Path] | None = None) -> dict[str, list[str]]:
        """Keys referenced from two or more places."""
        return {
            key: locations
            for key, locations in self.find_key_references(files).items()
            if len(locations) > 1
        }

    def load_default_dictionary(self) -> FlatDictionary:
        """
        Read the default locale's dictionary, flattened.

        A corrupt file is reported and treated as empty.
        """
        path = locale_file_path(self.config.locales_dir, self.config.default_locale)
        try:
            return read_dictionary(path, self.config.namespace_separator)
        except DictionaryCorruptError as e:
            logger.error(str(e))
            return {}

    def find_unused(
        self,
        files: list[Path] | None = None,
        default_dictionary: FlatDictionary | None = None,
    ) -> list[str]:
        """Keys declared in the default dictionary that no source references, in declaration order."""
        declared = default_dictionary if default_dictionary is not None else self.load_default_dictionary()
        used = set(self.find_key_references(files))
        return [key for key in declared if key not in used]

    def find_missing(
        self,
        files: list[Path] | None = None,
        default_dictionary: FlatDictionary | None = None,
    ) -> list[str]:
        """Keys referenced in source that the default dictionary does not declare."""
        declared = default_dictionary if default_dictionary is not None else self.load_default_dictionary()
        return [key for key in self.find_key_references(files) if key not in declared]

    def remove_unused(self, dry_run: bool = False, files: list[Path] | None = None) -> CleanResult:
        """
        Delete unused keys from every locale file.

        Args:
            dry_run: Only report what would be removed
            files: Source files to check, defaults to every source file
        """
        result = CleanResult()
        result.dry_run = dry_run
        result.unused_keys = self.find_unused(files)

        if not result.unused_keys or dry_run:
            return result

        unused = set(result.unused_keys)
        separator = self.config.namespace_separator

        for locale in self.config.supported_locales:
            path = locale_file_path(self.config.locales_dir, locale)
            if not path.exists():
                continue
            try:
                translations = read_dictionary(path, separator)
                remaining = {key: value for key, value in translations.items() if key not in unused}
                if len(remaining) == len(translations):
                    continue
                data = expand_dictionary(remaining, separator) if self.config.output_format == "nested" else remaining
                write_dictionary(path, data, locale)
                result.updated_locales.append(locale)
                logger.info(f"Removed {len(translations) - len(remaining)} key(s) from {path}")
            except (DictionaryCorruptError, DictionaryWriteError) as e:
                logger.error(str(e))
                result.failed_locales.append((locale, e))

        return result

    def translation_status(self) -> dict[str, LocaleStatus]:
        """Total and untranslated key counts for each locale that has a file."""
        status: dict[str, LocaleStatus] = {}
        for locale in self.config.supported_locales:
            path = locale_file_path(self.config.locales_dir, locale)
            if not path.exists():
                continue
            try:
                translations = read_dictionary(path, self.config.namespace_separator)
            except DictionaryCorruptError as e:
                logger.error(str(e))
                continue
            empty = sum(1 for value in translations.values() if not value)
            status[locale] = LocaleStatus(locale=locale, total=len(translations), empty=empty)
        return status
