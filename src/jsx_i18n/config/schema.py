"""Configuration schema for the i18n extractor using nested Pydantic models."""

import re
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_TRANSLATABLE_ATTRIBUTES: tuple[str, ...] = (
    "placeholder",
    "title",
    "label",
    "helperText",
    "description",
    "alt",
)

DEFAULT_FILE_EXTENSIONS: tuple[str, ...] = (".jsx", ".tsx", ".js", ".ts")


class _CamelModel(BaseModel):
    """Base model accepting both camelCase (config file) and snake_case names."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class RuntimeConfig(_CamelModel):
    """Runtime translation object referenced by rewritten sources."""

    identifier: str = Field(
        default="i18n",
        description="Identifier of the runtime translation object in generated code",
    )
    module: str = Field(
        default="react-i18n-autoextractor",
        description="Module specifier the runtime object is imported from",
        min_length=1,
    )
    import_style: Literal["import", "require"] = Field(
        default="import",
        description="Whether to inject an ES import or a CommonJS require",
    )

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Validate that the identifier is a plain JavaScript identifier."""
        if not re.fullmatch(r"[A-Za-z_$][A-Za-z0-9_$]*", v):
            raise ValueError(f"'{v}' is not a valid JavaScript identifier")
        return v


class InterpolationConfig(_CamelModel):
    """Placeholder delimiters used by the runtime translator."""

    prefix: str = Field(default="{", min_length=1)
    suffix: str = Field(default="}", min_length=1)


class I18nConfig(_CamelModel):
    """
    Root configuration consumed by every component of the extractor.

    Field names follow Python conventions; the camelCase aliases match the
    keys of an existing ``config/i18n.json`` file.
    """

    source_dir: Path = Field(..., description="Directory scanned for component sources")
    locales_dir: Path = Field(..., description="Directory holding one JSON file per locale")
    default_locale: str = Field(..., min_length=1)
    supported_locales: list[str] = Field(..., min_length=1)
    key_generation: Literal["text", "hash"] = Field(
        default="text",
        description="Key derivation: slugified text or 8-character content hash",
    )
    output_format: Literal["flat", "nested"] = Field(default="flat")
    namespace: str | None = Field(default=None)
    namespace_separator: str = Field(default=".", min_length=1)
    ignore_patterns: list[str] = Field(
        default_factory=list,
        description="Glob patterns (relative to the source directory) to skip",
    )
    backup_path: Path | None = Field(default=None)
    attributes_to_translate: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TRANSLATABLE_ATTRIBUTES),
    )
    file_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS),
    )
    exclusions_file: Path = Field(default=Path("config/i18n-exclusions.json"))
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    interpolation: InterpolationConfig = Field(default_factory=InterpolationConfig)

    @field_validator("supported_locales")
    @classmethod
    def deduplicate_locales(cls, v: list[str]) -> list[str]:
        """Drop repeated locales while keeping their first position."""
        return list(dict.fromkeys(locale.strip() for locale in v if locale.strip()))

    @field_validator("file_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Ensure every extension starts with a dot."""
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

    @field_validator("namespace")
    @classmethod
    def empty_namespace_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_default_locale(self) -> "I18nConfig":
        """The default locale has to be one of the supported locales."""
        if self.default_locale not in self.supported_locales:
            raise ValueError(
                f"defaultLocale '{self.default_locale}' is not listed in supportedLocales"
            )
        return self

    @property
    def translation_locales(self) -> list[str]:
        """Supported locales other than the default one."""
        return [locale for locale in self.supported_locales if locale != self.default_locale]
