"""
Extraction pipeline: scan the sources, then merge into the locale files.
"""

from __future__ import annotations

import logging

from .config.schema import I18nConfig
from .dictionaries.reconciler import DictionaryReconciler, ReconcileResult
from .extraction.exclusions import ExclusionPolicy
from .extraction.scanner import Scanner, ScanResult

logger = logging.getLogger(__name__)


class TranslationManager:
    """Runs a complete extraction pass for one configuration."""

    def __init__(self, config: I18nConfig, exclusions: ExclusionPolicy | None = None) -> None:
        self.config: I18nConfig = config
        self.exclusions: ExclusionPolicy = (
            exclusions if exclusions is not None else ExclusionPolicy(config.exclusions_file)
        )
        self.scanner: Scanner = Scanner(config, self.exclusions)
        self.reconciler: DictionaryReconciler = DictionaryReconciler(config)

    def extract_and_update(self, dry_run: bool = False) -> tuple[ScanResult, ReconcileResult]:
        """
        Scan every source file and update the locale dictionaries.

        Files that fail to parse are skipped. Their text is absent from this
        pass, but their existing dictionary entries are kept.
        """
        scan = self.scanner.scan_directory()
        reconcile = self.reconciler.sync(scan.entries, dry_run=dry_run)
        return scan, reconcile
