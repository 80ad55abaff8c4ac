"""
Per-field cleaners.

Every field type has one cleaner with the signature
``cleaner(value, options, **kwargs)``. The content cleaner receives the
matched region (an element) and a ``default_cleaner`` flag; all others
receive the trimmed string the resolver read, plus the field rule as
``rule`` when a custom rule produced the value. Cleaners return the
normalized value, or None when nothing usable is left.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Callable

from lxml.html import HtmlElement

from ..config.models import FieldExtractionSpec, FieldType
from ..dom import remove, rename
from .parsing import hostname, normalize_whitespace, parse_date, resolve_url

if TYPE_CHECKING:
    from ..extract.base import ExtractOptions, UrlAndDomain


EXCERPT_MAX_LENGTH = 200
DEK_MIN_LENGTH = 5
DEK_MAX_LENGTH = 1000
TITLE_MAX_LENGTH = 150

AUTHOR_PREFIX_RE = re.compile(r"^\s*(posted\s+|written\s+)?by\s*:?\s*", re.IGNORECASE)
TITLE_SPLIT_RE = re.compile(r"\s+(?:\||-|–|—|::|»|·)\s+")
WORD_COUNT_RE = re.compile(r"\d[\d,.\s]*")

JUNK_TAGS = ("title", "script", "noscript", "link", "style", "meta", "hr", "embed", "object")
KEEP_IFRAME_RE = re.compile(r"youtube(-nocookie)?\.com|player\.vimeo\.com|w\.soundcloud\.com", re.IGNORECASE)
KEEP_ATTRIBUTES = frozenset({
    "src", "srcset", "sizes", "type", "href", "class", "id", "alt",
    "title", "width", "height", "colspan", "rowspan", "datetime",
})


# =============================================================================
# Text fields
# =============================================================================


def clean_title(title: str, options: ExtractOptions, **_: Any) -> str | None:
    """Normalize a title and drop a site-name segment matching the domain."""
    title = normalize_whitespace(title)
    if not title:
        return None

    segments = TITLE_SPLIT_RE.split(title)
    host = hostname(options.url)
    if len(segments) > 1 and host:
        site = _squash(re.sub(r"^www\.", "", host).split(".")[0])
        kept = [s for s in segments if _squash(s) != site]
        if kept and len(kept) < len(segments):
            title = " | ".join(kept)

    if len(title) > TITLE_MAX_LENGTH:
        heading = options.document.first("h1")
        if heading is not None:
            candidate = normalize_whitespace(heading.text_content())
            if candidate:
                return candidate

    return title


def _squash(text: str) -> str:
    return re.sub(r"[\W_]", "", text).lower()


def clean_author(author: str, options: ExtractOptions, **_: Any) -> str | None:
    """Strip a leading byline marker ("By", "Posted by")."""
    author = normalize_whitespace(AUTHOR_PREFIX_RE.sub("", author))
    return author or None


def clean_date_published(
    value: str,
    options: ExtractOptions,
    *,
    rule: FieldExtractionSpec | None = None,
    **_: Any,
) -> str | None:
    """Parse a publish date into an ISO-8601 string.

    A rule may declare the source's ``timezone`` (applied to naive dates)
    and its strptime ``format``.
    """
    parsed = parse_date(
        value,
        timezone_name=rule.timezone if rule else None,
        date_format=rule.format if rule else None,
    )
    if parsed is None:
        return None
    return parsed.isoformat()


def clean_dek(dek: str, options: ExtractOptions, **_: Any) -> str | None:
    """Reject deks that are implausibly short/long or repeat the excerpt."""
    dek = normalize_whitespace(dek)
    if not DEK_MIN_LENGTH <= len(dek) <= DEK_MAX_LENGTH:
        return None

    excerpt = normalize_whitespace(options.excerpt)
    if excerpt and excerpt.rstrip("…").startswith(dek[:50]):
        return None

    return dek


def clean_excerpt(excerpt: str, options: ExtractOptions, **_: Any) -> str | None:
    """Normalize an excerpt and truncate it on a word boundary."""
    excerpt = normalize_whitespace(excerpt)
    if not excerpt:
        return None
    if len(excerpt) <= EXCERPT_MAX_LENGTH:
        return excerpt

    truncated = excerpt[:EXCERPT_MAX_LENGTH].rsplit(" ", 1)[0]
    return truncated.rstrip(" ,;:.") + "…"


def clean_lead_image_url(url: str, options: ExtractOptions, **_: Any) -> str | None:
    return resolve_url(url, options.url)


def clean_next_page_url(url: str, options: ExtractOptions, **_: Any) -> str | None:
    """Resolve the next-page link; a link back to the page itself is dropped."""
    resolved = resolve_url(url, options.url)
    if resolved and options.url and resolved.rstrip("/") == options.url.rstrip("/"):
        return None
    return resolved


def clean_word_count(value: Any, options: ExtractOptions, **_: Any) -> int | None:
    """Coerce "1,234 words" style text to an integer."""
    if isinstance(value, int):
        return value
    match = WORD_COUNT_RE.search(str(value))
    if not match:
        return None
    digits = re.sub(r"\D", "", match.group(0))
    return int(digits) if digits else None


def clean_direction(value: str, options: ExtractOptions, **_: Any) -> str | None:
    direction = value.strip().lower()
    return direction if direction in ("ltr", "rtl") else None


def clean_url_and_domain(value: Any, options: ExtractOptions, **_: Any) -> UrlAndDomain | None:
    """Turn a canonical URL string into a (url, domain) pair."""
    from ..extract.base import UrlAndDomain

    if isinstance(value, tuple):
        return UrlAndDomain(*value)

    url = resolve_url(value, options.url)
    if not url:
        return None
    return UrlAndDomain(url, hostname(url))


# =============================================================================
# Content
# =============================================================================


def clean_content(
    region: HtmlElement,
    options: ExtractOptions,
    *,
    default_cleaner: bool = True,
    **_: Any,
) -> HtmlElement:
    """Clean an extracted content region in place.

    Junk tags are always stripped and links made absolute. With
    ``default_cleaner`` the region also loses headings that repeat the
    title, top-level h1s, empty paragraphs and non-whitelisted attributes.
    """
    _strip_junk_tags(region)

    if options.url:
        region.make_links_absolute(options.url, resolve_base_href=False, handle_failures="ignore")

    if not default_cleaner:
        return region

    _clean_headers(region, options.title)
    _clean_h1s(region)
    _remove_empty_paragraphs(region)
    _clean_attributes(region)

    return region


def _strip_junk_tags(region: HtmlElement) -> None:
    for element in list(region.iterdescendants(*JUNK_TAGS)):
        remove(element)

    for iframe in list(region.iterdescendants("iframe")):
        if not KEEP_IFRAME_RE.search(iframe.get("src", "")):
            remove(iframe)


def _clean_headers(region: HtmlElement, title: str | None) -> None:
    """Remove headings that just repeat the article title."""
    if not title:
        return
    title = normalize_whitespace(title).lower()
    for heading in list(region.iterdescendants("h1", "h2", "h3", "h4", "h5", "h6")):
        if normalize_whitespace(heading.text_content()).lower() == title:
            remove(heading)


def _clean_h1s(region: HtmlElement) -> None:
    """A few h1s inside content are duplicates of the title; many are structure."""
    h1s = list(region.iterdescendants("h1"))
    if len(h1s) < 3:
        for h1 in h1s:
            remove(h1)
    else:
        for h1 in h1s:
            rename(h1, "h2")


def _remove_empty_paragraphs(region: HtmlElement) -> None:
    for paragraph in list(region.iterdescendants("p")):
        if paragraph.text_content().strip():
            continue
        if any(True for _ in paragraph.iterdescendants("img", "iframe", "video", "picture")):
            continue
        remove(paragraph)


def _clean_attributes(region: HtmlElement) -> None:
    for element in region.iter():
        if not isinstance(element.tag, str):
            continue
        for attribute in list(element.attrib):
            if attribute not in KEEP_ATTRIBUTES:
                del element.attrib[attribute]


# =============================================================================
# Registry
# =============================================================================

Cleaner = Callable[..., Any]

CLEANERS: dict[FieldType, Cleaner] = {
    FieldType.TITLE: clean_title,
    FieldType.CONTENT: clean_content,
    FieldType.AUTHOR: clean_author,
    FieldType.DATE_PUBLISHED: clean_date_published,
    FieldType.NEXT_PAGE_URL: clean_next_page_url,
    FieldType.LEAD_IMAGE_URL: clean_lead_image_url,
    FieldType.EXCERPT: clean_excerpt,
    FieldType.DEK: clean_dek,
    FieldType.WORD_COUNT: clean_word_count,
    FieldType.DIRECTION: clean_direction,
    FieldType.URL_AND_DOMAIN: clean_url_and_domain,
}


def get_cleaner(field_type: FieldType | str) -> Cleaner:
    """Return the cleaner registered for a field type."""
    return CLEANERS[FieldType(field_type)]
