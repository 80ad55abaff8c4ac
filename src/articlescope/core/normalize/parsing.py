"""
Parsing utilities for normalizing extracted values.

Handles publish dates, whitespace, URLs and text direction.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime, time, timezone
from urllib.parse import urljoin, urlparse

import dateparser
import pytz


# =============================================================================
# Date Parsing
# =============================================================================


def parse_date(
    value: str | datetime | date | None,
    *,
    timezone_name: str | None = None,
    date_format: str | None = None,
) -> datetime | None:
    """Parse a publish date from various formats.

    Handles:
    - An explicit strptime format, tried first when given
    - ISO 8601 formats
    - Unix timestamps in seconds or milliseconds
    - US formats (MM/DD/YYYY)
    - Natural language and relative dates ("2 days ago")

    Args:
        value: String or datetime to parse
        timezone_name: Timezone to assume for naive values (e.g., "America/New_York")
        date_format: strptime format the source is known to use (e.g., "%d/%m/%Y")

    Returns:
        Parsed datetime, or None if the value can't be read as a date
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return _localize(value, timezone_name)

    if isinstance(value, date):
        return _localize(datetime.combine(value, time.min), timezone_name)

    text = _clean_date_string(str(value))

    if not text:
        return None

    settings = {
        "PREFER_DAY_OF_MONTH": "first",
        "PREFER_DATES_FROM": "past",  # Articles are published before they're read
        "RETURN_AS_TIMEZONE_AWARE": False,
        "STRICT_PARSING": False,
    }

    if timezone_name:
        settings["TIMEZONE"] = timezone_name

    if date_format:
        parsed = dateparser.parse(text, date_formats=[date_format], settings=settings)
        if parsed:
            return _localize(parsed, timezone_name)

    if re.fullmatch(r"\d{10}|\d{13}", text):
        seconds = int(text) / (1000 if len(text) == 13 else 1)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    parsed = _try_common_patterns(text) or dateparser.parse(text, settings=settings)
    if parsed:
        return _localize(parsed, timezone_name)

    return None


def _localize(value: datetime, timezone_name: str | None) -> datetime:
    """Attach the source timezone to a naive datetime."""
    if timezone_name and value.tzinfo is None:
        return pytz.timezone(timezone_name).localize(value)
    return value


def _clean_date_string(text: str) -> str:
    """Clean and normalize a date string for parsing."""
    prefixes = [
        r"^published(\s+on)?:?\s*",
        r"^posted(\s+on)?:?\s*",
        r"^updated(\s+on)?:?\s*",
        r"^date:\s*",
        r"^on\s+",
    ]
    for prefix in prefixes:
        text = re.sub(prefix, "", text.strip(), flags=re.IGNORECASE)

    text = " ".join(text.split())

    return text.strip()


def _try_common_patterns(text: str) -> datetime | None:
    """Try to parse using common date patterns (fast path)."""
    # Full ISO 8601, including offsets and fractional seconds
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    patterns = [
        (r"^(\d{4})-(\d{2})-(\d{2})", "iso_date"),
        (r"^(\d{1,2})/(\d{1,2})/(\d{4})$", "us_date"),
    ]

    for pattern, name in patterns:
        match = re.match(pattern, text)
        if not match:
            continue
        groups = [int(g) for g in match.groups()]
        if name == "iso_date":
            year, month, day = groups
        else:
            month, day, year = groups
        try:
            return datetime(year, month, day)
        except ValueError:
            continue

    return None


# =============================================================================
# Text and URL Utilities
# =============================================================================


def normalize_whitespace(text: str | None) -> str:
    """Normalize whitespace in text."""
    if text is None:
        return ""
    return " ".join(text.split())


def resolve_url(value: str | None, base_url: str | None = None) -> str | None:
    """Resolve a possibly relative URL and keep it only if it is http(s)."""
    if not value:
        return None

    value = value.strip()
    if base_url:
        value = urljoin(base_url, value)

    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return value


def hostname(url: str | None) -> str | None:
    """Return the lowercase hostname of a URL."""
    if not url:
        return None
    host = urlparse(url).hostname
    return host.lower() if host else None


def text_direction(text: str | None) -> str | None:
    """Detect the dominant direction of the letters in a string.

    Returns:
        "rtl", "ltr", or None when the text has no directional letters
    """
    if not text:
        return None

    rtl = ltr = 0
    for char in text:
        bidi = unicodedata.bidirectional(char)
        if bidi in ("R", "AL"):
            rtl += 1
        elif bidi == "L":
            ltr += 1

    if not rtl and not ltr:
        return None
    return "rtl" if rtl > ltr else "ltr"
