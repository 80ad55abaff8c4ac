"""
Pydantic configuration models for ArticleScope.

These models provide type-safe configuration with validation for:
- Per-source extractor definitions (selector rules per field)
- Application settings (logging, extraction defaults)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Union

import pytz
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..errors import SelectorConfigError
from ..mutate import parse_transform
from ..selectors import parse_selector


# =============================================================================
# Enums
# =============================================================================


class FieldType(str, Enum):
    """Fields of an extracted article."""

    TITLE = "title"
    CONTENT = "content"
    AUTHOR = "author"
    DATE_PUBLISHED = "date_published"
    NEXT_PAGE_URL = "next_page_url"
    LEAD_IMAGE_URL = "lead_image_url"
    EXCERPT = "excerpt"
    DEK = "dek"
    WORD_COUNT = "word_count"
    DIRECTION = "direction"
    URL_AND_DOMAIN = "url_and_domain"


class ContentType(str, Enum):
    """Output representations for html fields."""

    HTML = "html"
    TEXT = "text"
    MARKDOWN = "markdown"


# Fields whose matched region is extracted as html rather than text
HTML_FIELDS = frozenset({FieldType.CONTENT})


# =============================================================================
# Extractor Definitions
# =============================================================================


class FieldExtractionSpec(BaseModel):
    """Selector rules for a single field.

    Selectors are resolved into their variants during validation. Pass
    ``context={"extract_html": True}`` to validate rules for an html
    field, where selector lists are multi-selectors.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    selectors: list[Any] = Field(
        ...,
        min_length=1,
        description="Candidate selectors in priority order (first match wins)",
    )
    clean: list[str] = Field(
        default_factory=list,
        description="Selectors of elements to remove from the matched region",
    )
    transforms: dict[str, Any] = Field(
        default_factory=dict,
        description="Selector -> replacement tag name or callback",
    )
    default_cleaner: bool = Field(
        default=True,
        alias="defaultCleaner",
        description="Run the field's default cleaner on the result",
    )
    allow_multiple: bool = Field(
        default=False,
        alias="allowMultiple",
        description="Collect every matched element (extended fields only)",
    )
    timezone: str | None = Field(
        default=None,
        description="Timezone of naive dates on this source (e.g., America/New_York)",
    )
    format: str | None = Field(
        default=None,
        description="strptime format of dates on this source (e.g., %d/%m/%Y)",
    )

    @field_validator("selectors", mode="before")
    @classmethod
    def resolve_selectors(cls, v: Any, info: ValidationInfo) -> list[Any]:
        """Resolve raw selectors into TextSelector/AttributeSelector/MultiSelector."""
        if not isinstance(v, (list, tuple)):
            raise ValueError("selectors must be a list")
        extract_html = bool(info.context and info.context.get("extract_html"))
        try:
            return [parse_selector(raw, extract_html=extract_html) for raw in v]
        except SelectorConfigError as e:
            raise ValueError(str(e)) from e

    @field_validator("clean")
    @classmethod
    def check_clean_selectors(cls, v: list[str]) -> list[str]:
        """Ensure clean selectors are valid CSS."""
        try:
            for selector in v:
                parse_selector(selector)
        except SelectorConfigError as e:
            raise ValueError(str(e)) from e
        return v

    @field_validator("transforms", mode="before")
    @classmethod
    def resolve_transforms(cls, v: Any) -> dict[str, Any]:
        """Resolve transform values into RenameTo/Mutate, keeping key order."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("transforms must be a mapping of selector to tag or callable")
        resolved: dict[str, Any] = {}
        for selector, raw in v.items():
            try:
                parse_selector(selector)
            except SelectorConfigError as e:
                raise ValueError(str(e)) from e
            resolved[selector] = parse_transform(raw)
        return resolved

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                pytz.timezone(v)
            except pytz.UnknownTimeZoneError as e:
                raise ValueError(f"Unknown timezone: {v}") from e
        return v


FieldRule = Union[FieldExtractionSpec, str, None]


class ExtractorDefinition(BaseModel):
    """Per-source bundle of field rules.

    Each field maps to a FieldExtractionSpec, to a literal string that is
    always returned as-is, or to nothing (generic fallback applies).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    domain: str = Field(
        ...,
        min_length=1,
        description="Hostname this definition applies to ('*' is the generic extractor)",
    )
    supported_domains: list[str] = Field(
        default_factory=list,
        alias="supportedDomains",
        description="Additional hostnames served by this definition",
    )

    title: FieldRule = None
    content: FieldRule = None
    author: FieldRule = None
    date_published: FieldRule = None
    next_page_url: FieldRule = None
    lead_image_url: FieldRule = None
    excerpt: FieldRule = None
    dek: FieldRule = None
    word_count: FieldRule = None
    direction: FieldRule = None
    url_and_domain: FieldRule = None

    extend: dict[str, FieldExtractionSpec] = Field(
        default_factory=dict,
        description="Custom extra fields, resolved in text/attribute mode",
    )

    @field_validator("content", mode="before")
    @classmethod
    def resolve_html_field(cls, v: Any) -> Any:
        """Validate html-field rules so selector lists become multi-selectors."""
        if isinstance(v, dict):
            return FieldExtractionSpec.model_validate(v, context={"extract_html": True})
        return v

    @field_validator("domain", "supported_domains")
    @classmethod
    def normalize_domains(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return [domain.strip().lower() for domain in v]

    @property
    def domains(self) -> list[str]:
        """All hostnames served by this definition."""
        return [self.domain, *self.supported_domains]

    def rule_for(self, field_type: FieldType | str) -> FieldRule:
        """Return the rule declared for a field type."""
        return getattr(self, FieldType(field_type).value)


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )

    @field_validator("level")
    @classmethod
    def check_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# =============================================================================
# Application Configuration
# =============================================================================


class ExtractionDefaults(BaseModel):
    """Default extraction options used by the CLI."""

    content_type: ContentType = Field(
        default=ContentType.HTML,
        description="Representation of extracted content",
    )
    fallback: bool = Field(
        default=True,
        description="Use generic extraction when custom rules don't match",
    )


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    extractors_dir: Path = Field(
        default=Path("configs/extractors"),
        description="Directory of per-source extractor definitions",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionDefaults = Field(default_factory=ExtractionDefaults)
