"""
Extraction of translatable text from JSX/TSX component sources.

This module walks parsed source files, collects JSX text and translatable
attribute values, and turns them into ``CandidateEntry`` records for the
dictionary reconciler. Source files are never modified here.

Usage Examples:
    Scan a whole project:
        >>> scanner = Scanner(config, ExclusionPolicy(config.exclusions_file))
        >>> result = scanner.scan_directory()
        >>> print(result)
        Scan Results: 12 file(s) scanned, 0 failed, 48 entries

    Scan a single file:
        >>> entries = scanner.scan_file(Path("src/App.tsx"))
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import override

from tree_sitter import Node

from ..config.schema import I18nConfig
from ..utils.core.exceptions import ParseFailureError
from .exclusions import ExclusionPolicy
from .matching import TextMatch, TranslationMatcher
from .syntax import SourceTree

logger = logging.getLogger(__name__)

# Directories and file patterns that never hold component sources
EXCLUDED_DIRS = {
    "node_modules",
    "dist",
    "build",
    ".git",
}

EXCLUDED_FILE_PATTERNS = (
    "*.test.*",
    "*.spec.*",
    "*.d.ts",
)


@dataclass(frozen=True)
class CandidateEntry:
    """A piece of text found in source, with the key it will be stored under."""

    key: str
    default_value: str
    file: str
    line: int
    is_template: bool = False
    namespace: str | None = None

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}"


class ScanResult:
    """Result of scanning a source tree."""

    def __init__(self) -> None:
        self.entries: list[CandidateEntry] = []
        self.scanned_files: list[Path] = []
        self.failed_files: list[tuple[Path, ParseFailureError]] = []

    @property
    def failure_count(self) -> int:
        """Number of files that could not be parsed."""
        return len(self.failed_files)

    @property
    def total_files(self) -> int:
        return len(self.scanned_files) + len(self.failed_files)

    @property
    def success_rate(self) -> float:
        """Parsed files as a percentage of all files."""
        if self.total_files == 0:
            return 100.0
        return (len(self.scanned_files) / self.total_files) * 100.0

    @property
    def keys(self) -> list[str]:
        """Distinct keys in first-seen order."""
        return list(dict.fromkeys(entry.key for entry in self.entries))

    @override
    def __str__(self) -> str:
        return (
            f"Scan Results: "
            f"{len(self.scanned_files)} file(s) scanned, "
            f"{self.failure_count} failed, "
            f"{len(self.entries)} entries"
        )


def _is_ignored(relative: Path, ignore_patterns: list[str]) -> bool:
    if any(part in EXCLUDED_DIRS for part in relative.parts[:-1]):
        return True
    if any(fnmatch.fnmatch(relative.name, pattern) for pattern in EXCLUDED_FILE_PATTERNS):
        return True
    posix = relative.as_posix()
    for pattern in ignore_patterns:
        pattern = pattern.removeprefix("./")
        if fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(relative.name, pattern):
            return True
        # "**/x/**" style patterns should also match at the top level
        if pattern.startswith("**/") and fnmatch.fnmatch(posix, pattern[3:]):
            return True
    return False


def find_source_files(config: I18nConfig, directory: Path | None = None) -> list[Path]:
    """
    Find component source files under the source directory.

    Args:
        config: Configuration supplying extensions and ignore patterns
        directory: Directory to search, defaults to ``config.source_dir``

    Returns:
        Matching files sorted by path so repeated runs see the same order
    """
    root = directory if directory is not None else config.source_dir
    if not root.exists():
        logger.warning(f"Source directory does not exist: {root}")
        return []

    extensions = {ext.lower() for ext in config.file_extensions}
    files: list[Path] = []
    for path in root.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in extensions:
            continue
        if _is_ignored(path.relative_to(root), config.ignore_patterns):
            continue
        files.append(path)

    return sorted(files)


class Scanner:
    """Collects translation candidates from parsed source trees."""

    def __init__(self, config: I18nConfig, exclusions: ExclusionPolicy | None = None) -> None:
        """
        Initialize the scanner.

        Args:
            config: Extraction configuration
            exclusions: User exclusion rules; an empty policy when omitted
        """
        self.config: I18nConfig = config
        self.matcher: TranslationMatcher = TranslationMatcher(config, exclusions)

    def extract(self, tree: SourceTree) -> list[CandidateEntry]:
        """
        Extract candidates from one parsed file in document order.

        Identical text at different locations yields one entry per location;
        only repeats of the same key on the same line are dropped.
        """
        entries: list[CandidateEntry] = []
        seen: set[tuple[str, int]] = set()

        def emit(match: TextMatch | None) -> None:
            if match is None or (match.key, match.line) in seen:
                return
            seen.add((match.key, match.line))
            entries.append(
                CandidateEntry(
                    key=match.key,
                    default_value=match.text,
                    file=str(tree.path),
                    line=match.line,
                    is_template=match.is_template,
                    namespace=self.config.namespace,
                )
            )
            logger.debug(f"Found translatable text {match.text!r} at {tree.path}:{match.line}")

        def on_text(node: Node) -> None:
            emit(self.matcher.match_text(tree, node))

        def on_attribute(node: Node) -> None:
            emit(self.matcher.match_attribute(tree, node))

        tree.visit({"jsx_text": on_text, "html_character_reference": on_text, "jsx_attribute": on_attribute})
        return entries

    def scan_source(self, source: str | bytes, path: Path | str) -> list[CandidateEntry]:
        """
        Parse and scan in-memory source.

        Raises:
            ParseFailureError: If the source cannot be parsed
        """
        return self.extract(SourceTree.parse(source, path))

    def scan_file(self, path: Path) -> list[CandidateEntry]:
        """
        Parse and scan one file.

        Raises:
            ParseFailureError: If the file cannot be read or parsed
        """
        entries = self.extract(SourceTree.from_file(path))
        logger.debug(f"Extracted {len(entries)} entries from {path}")
        return entries

    def scan_directory(self, directory: Path | None = None) -> ScanResult:
        """
        Scan every source file under the source directory.

        A file that fails to parse is logged and recorded in the result; the
        remaining files are still scanned.
        """
        result = ScanResult()
        files = find_source_files(self.config, directory)
        logger.info(f"Scanning {len(files)} source file(s)")

        for path in files:
            try:
                result.entries.extend(self.scan_file(path))
                result.scanned_files.append(path)
            except ParseFailureError as e:
                logger.error(f"Skipping {path}: {e.reason}")
                result.failed_files.append((path, e))

        logger.info(str(result))
        return result
