"""Utility helpers for the i18n extractor."""
