"""Field resolution, orchestration and generic fallback extraction."""

from .base import (
    FIELD_DEPENDENCIES,
    ContentOnlyResult,
    ExtractionResult,
    ExtractOptions,
    UrlAndDomain,
)
from .generic import GenericExtractor
from .registry import ExtractorRegistry
from .resolver import select, select_extended
from .root import RootExtractor

__all__ = [
    "FIELD_DEPENDENCIES",
    "ContentOnlyResult",
    "ExtractionResult",
    "ExtractOptions",
    "UrlAndDomain",
    "GenericExtractor",
    "ExtractorRegistry",
    "RootExtractor",
    "select",
    "select_extended",
]
