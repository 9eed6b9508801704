"""Configuration loading and validation."""

from .manager import ConfigManager
from .schema import I18nConfig, InterpolationConfig, RuntimeConfig

__all__ = ["ConfigManager", "I18nConfig", "InterpolationConfig", "RuntimeConfig"]
