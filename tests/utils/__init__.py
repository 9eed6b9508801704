"""Shared helpers for the i18n extractor test suite."""
