"""Configuration loading and validation."""

from .models import (
    # Enums
    FieldType,
    ContentType,
    HTML_FIELDS,
    # Rule models
    FieldExtractionSpec,
    ExtractorDefinition,
    # App models
    AppConfig,
    ExtractionDefaults,
    LoggingConfig,
)
from .loader import (
    load_all_extractor_definitions,
    load_app_config,
    load_extractor_definition,
    validate_extractor_file,
)

__all__ = [
    # Enums
    "FieldType",
    "ContentType",
    "HTML_FIELDS",
    # Rule models
    "FieldExtractionSpec",
    "ExtractorDefinition",
    # App models
    "AppConfig",
    "ExtractionDefaults",
    "LoggingConfig",
    # Loaders
    "load_app_config",
    "load_extractor_definition",
    "load_all_extractor_definitions",
    "validate_extractor_file",
]
