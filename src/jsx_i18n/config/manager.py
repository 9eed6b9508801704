"""Configuration manager for the i18n extractor.

This module provides functionality for loading, validating, and saving
configuration files with Pydantic model validation. YAML is the native
format; JSON files load through the same path since JSON is a YAML subset.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..config.schema import I18nConfig
from ..utils.core.exceptions import ConfigurationError
from ..utils.core.file_utils import atomic_write_text, dump_json


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager for handling YAML/JSON config files.

    Loading validates the whole configuration up front so that an invalid
    configuration fails the command before any source or locale file is
    touched.
    """

    @staticmethod
    def load_config(config_path: Path) -> I18nConfig:
        """
        Load and validate configuration from a YAML or JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            I18nConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ConfigurationError: If the file is not parseable or fails validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid syntax in {config_path}: {e}", context={"path": str(config_path)}
            ) from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ConfigurationError(
                f"Configuration file must contain a mapping, got {type(raw_config_data).__name__}",
                context={"path": str(config_path)},
            )

        return ConfigManager.validate_config(config_data, source=str(config_path))

    @staticmethod
    def validate_config(config_data: dict[str, object], source: str = "<memory>") -> I18nConfig:
        """
        Validate raw configuration data.

        Args:
            config_data: Mapping read from a config file or built in code
            source: Where the data came from, for error messages

        Raises:
            ConfigurationError: If a required field is missing or a value is invalid
        """
        try:
            return I18nConfig.model_validate(config_data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigurationError(
                f"Invalid configuration in {source}: {problems}", context={"path": source}
            ) from e

    @staticmethod
    def save_config(config: I18nConfig, config_path: Path) -> None:
        """
        Save configuration with an atomic operation.

        The file is written as JSON when the path ends in ``.json`` and as
        YAML otherwise. Keys use the camelCase aliases.

        Raises:
            OSError: If file operations fail
        """
        config_dict = config.model_dump(mode="json", by_alias=True, exclude_none=True)

        if config_path.suffix.lower() == ".json":
            content_to_write = dump_json(config_dict)
        else:
            content_to_write = yaml.dump(
                config_dict,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                indent=2,
            )

        config_path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_text(config_path, content_to_write)
        logger.info(f"Configuration saved to {config_path}")

    @staticmethod
    def with_overrides(config: I18nConfig, **overrides: object) -> I18nConfig:
        """
        Return a copy of the configuration with some fields replaced.

        ``None`` overrides are ignored so optional CLI flags can be passed
        straight through. The result is re-validated.

        Raises:
            ConfigurationError: If the overridden configuration is invalid
        """
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return config

        merged = config.model_dump()
        merged.update(updates)
        return ConfigManager.validate_config(merged, source="command-line overrides")

    @staticmethod
    def default_config() -> I18nConfig:
        """Configuration written by ``init`` when no answers are supplied."""
        return I18nConfig(
            source_dir=Path("./src"),
            locales_dir=Path("./src/locales"),
            default_locale="en",
            supported_locales=["en", "ko"],
        )
