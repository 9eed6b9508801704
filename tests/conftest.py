"""
Global test configuration fixtures for the i18n extractor tests.

Every fixture builds its project inside ``tmp_path`` so tests never touch
the working directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from jsx_i18n.config.schema import I18nConfig
from jsx_i18n.extraction.exclusions import ExclusionPolicy


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create an empty project with ``src/`` and ``src/locales/`` directories."""
    (tmp_path / "src" / "locales").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def base_config(project_dir: Path) -> I18nConfig:
    """
    Create a minimal valid configuration rooted at the project directory.

    Returns:
        I18nConfig: English default locale with Korean as the second locale
    """
    return I18nConfig(
        source_dir=project_dir / "src",
        locales_dir=project_dir / "src" / "locales",
        default_locale="en",
        supported_locales=["en", "ko"],
        exclusions_file=project_dir / "config" / "i18n-exclusions.json",
    )


@pytest.fixture
def empty_policy() -> ExclusionPolicy:
    """Exclusion policy without rules or backing file."""
    return ExclusionPolicy()
