"""
Test helper utilities for the i18n extractor tests.

This module provides small builders for source files, locale dictionaries
and configurations so individual tests stay focused on behavior.
"""

from __future__ import annotations

import json
from pathlib import Path

from jsx_i18n.config.schema import I18nConfig

__all__ = [
    "config_with",
    "read_json",
    "write_json",
    "write_source",
]


def write_source(root: Path, relative: str, content: str) -> Path:
    """
    Write a source file below ``root``, creating parent directories.

    Args:
        root: Directory the relative path is resolved against
        relative: File path such as ``"components/App.tsx"``
        content: Source text

    Returns:
        Path: The written file
    """
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(content, encoding="utf-8")
    return path


def write_json(path: Path, data: object) -> Path:
    """Write data as UTF-8 JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


def read_json(path: Path) -> object:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)  # pyright: ignore[reportAny]


def config_with(config: I18nConfig, **updates: object) -> I18nConfig:
    """Return a validated copy of ``config`` with some fields replaced."""
    data = config.model_dump()
    data.update(updates)
    return I18nConfig.model_validate(data)
