"""
Exception hierarchy for ArticleScope.

Expected "no data" conditions never raise; these exceptions cover
configuration mistakes and genuinely broken input.
"""

from __future__ import annotations

from pathlib import Path


class ArticleScopeError(Exception):
    """Base class for all ArticleScope errors."""


class ConfigError(ArticleScopeError):
    """Configuration loading or validation error."""

    def __init__(self, message: str, path: Path | None = None, details: str | None = None):
        self.path = path
        self.details = details
        super().__init__(message)


class SelectorConfigError(ConfigError):
    """A selector or rule shape that is invalid for the field it is used on."""


class DocumentError(ArticleScopeError):
    """HTML input could not be turned into a queryable document."""
