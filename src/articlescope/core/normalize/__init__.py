"""Normalization of extracted values: parsing helpers and per-field cleaners."""

from .cleaners import CLEANERS, clean_content, get_cleaner
from .parsing import (
    hostname,
    normalize_whitespace,
    parse_date,
    resolve_url,
    text_direction,
)

__all__ = [
    # Cleaners
    "CLEANERS",
    "clean_content",
    "get_cleaner",
    # Parsing
    "parse_date",
    "normalize_whitespace",
    "resolve_url",
    "hostname",
    "text_direction",
]
