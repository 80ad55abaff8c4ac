"""
Generic, rule-free extraction used as the fallback for every field.

Looks for article data in:
1. Meta tags (Open Graph, Twitter cards, article:*, name=author/description)
2. JSON-LD schema.org markup
3. Semantic elements (article, main, itemprop=articleBody)
4. Paragraph density, for content when nothing semantic is found
"""

from __future__ import annotations

import copy
import json
from typing import Any, Callable

from lxml.html import HtmlElement

from ..config.models import ContentType, FieldType
from ..dom import Document, parse_fragment
from ..logging import get_logger
from ..normalize.cleaners import CLEANERS
from ..normalize.parsing import normalize_whitespace, text_direction
from ..render import render
from .base import FIELD_DEPENDENCIES, ContentOnlyResult, ExtractionResult, ExtractOptions, UrlAndDomain

logger = get_logger("generic")


TITLE_META = ("og:title", "twitter:title", "title")
AUTHOR_META = ("author", "article:author", "byl", "dc.creator", "sailthru.author")
DATE_META = (
    "article:published_time",
    "og:published_time",
    "datepublished",
    "pubdate",
    "publishdate",
    "date",
    "dc.date.issued",
    "sailthru.date",
)
IMAGE_META = ("og:image", "og:image:url", "og:image:secure_url", "twitter:image", "twitter:image:src")
EXCERPT_META = ("og:description", "twitter:description", "description")
URL_META = ("og:url",)

AUTHOR_SELECTORS = (
    "[rel='author']",
    "[itemprop='author'] [itemprop='name']",
    "[itemprop='author']",
    ".byline .author",
    ".byline",
    ".author",
)
DATE_SELECTORS = ("time[datetime]", "[itemprop='datePublished']")
CONTENT_SELECTORS = (
    "[itemprop='articleBody']",
    "article .entry-content",
    "article .post-content",
    ".article-body",
    ".article-content",
    "article",
    "main",
    "[role='main']",
    "#content",
)

MIN_CONTENT_LENGTH = 140
MIN_PARAGRAPH_LENGTH = 25
ARTICLE_SCHEMA_TYPES = {"Article", "NewsArticle", "BlogPosting", "Report", "ScholarlyArticle", "TechArticle"}


class GenericExtractor:
    """Fallback extractor with one strategy per field type.

    Every strategy takes the call's ExtractOptions and returns a value or
    None. Strategies tolerate partial context: one called before
    ``content`` exists simply has less to work with.
    """

    domain = "*"

    def __init__(self, *, min_content_length: int = MIN_CONTENT_LENGTH) -> None:
        self.min_content_length = min_content_length

    def for_field(self, field_type: FieldType | str) -> Callable[[ExtractOptions], Any]:
        """Return the strategy for a field type."""
        return getattr(self, FieldType(field_type).value)

    # =========================================================================
    # Whole-document extraction
    # =========================================================================

    def extract(self, options: ExtractOptions) -> ExtractionResult | ContentOnlyResult:
        """Extract every field with generic strategies only."""
        if options.content_only:
            content_options = options.with_context(title=options.extracted_title)
            return ContentOnlyResult(content=self.content(content_options))

        values: dict[str, Any] = {}
        for field_type, dependencies in FIELD_DEPENDENCIES:
            field_options = options.with_context(**{dep: values.get(dep) for dep in dependencies})
            values[field_type.value] = self.for_field(field_type)(field_options)

        url, domain = values.pop(FieldType.URL_AND_DOMAIN.value) or (None, None)
        return ExtractionResult(url=url, domain=domain, **values)

    # =========================================================================
    # Field strategies
    # =========================================================================

    def title(self, options: ExtractOptions) -> str | None:
        document = options.document
        raw = (
            _meta(document, TITLE_META)
            or _jsonld_value(document, "headline")
            or _single_text(document, "h1")
            or _single_text(document, "title")
        )
        return CLEANERS[FieldType.TITLE](raw, options) if raw else None

    def author(self, options: ExtractOptions) -> str | None:
        document = options.document
        raw = _meta(document, AUTHOR_META)
        if raw and raw.startswith(("http://", "https://")):
            raw = None
        raw = raw or _jsonld_value(document, "author")
        if not raw:
            for selector in AUTHOR_SELECTORS:
                raw = _single_text(document, selector)
                if raw:
                    break
        return CLEANERS[FieldType.AUTHOR](raw, options) if raw else None

    def date_published(self, options: ExtractOptions) -> str | None:
        document = options.document
        candidates = [_meta(document, DATE_META), _jsonld_value(document, "datePublished")]
        for selector in DATE_SELECTORS:
            element = document.first(selector)
            if element is not None:
                candidates.append(element.get("datetime") or element.get("content") or element.text_content())

        for raw in candidates:
            if raw:
                cleaned = CLEANERS[FieldType.DATE_PUBLISHED](raw, options)
                if cleaned:
                    return cleaned
        return None

    def dek(self, options: ExtractOptions) -> str | None:
        # Deks have no reliable generic signal
        return None

    def lead_image_url(self, options: ExtractOptions) -> str | None:
        document = options.document
        raw = _meta(document, IMAGE_META) or _jsonld_value(document, "image")
        if not raw:
            link = document.first("link[rel='image_src']")
            raw = link.get("href") if link is not None else None
        if not raw and options.content and options.content_type is ContentType.HTML:
            for image in parse_fragment(options.content).iterdescendants("img"):
                if image.get("src"):
                    raw = image.get("src")
                    break
        return CLEANERS[FieldType.LEAD_IMAGE_URL](raw, options) if raw else None

    def content(self, options: ExtractOptions) -> str | None:
        node = self._find_content_node(options.document)
        if node is None:
            logger.debug("No content candidate found")
            return None

        # Work on a copy so the live document stays intact for other fields
        region = copy.deepcopy(node)
        region = CLEANERS[FieldType.CONTENT](region, options, default_cleaner=True)
        rendered = render(region, options.content_type)
        return rendered if normalize_whitespace(region.text_content()) else None

    def next_page_url(self, options: ExtractOptions) -> str | None:
        document = options.document
        for selector in ("link[rel='next']", "a[rel='next']"):
            element = document.first(selector)
            if element is not None and element.get("href"):
                return CLEANERS[FieldType.NEXT_PAGE_URL](element.get("href"), options)
        return None

    def excerpt(self, options: ExtractOptions) -> str | None:
        raw = _meta(options.document, EXCERPT_META)
        if not raw and options.content:
            raw = _content_text(options)
        return CLEANERS[FieldType.EXCERPT](raw, options) if raw else None

    def word_count(self, options: ExtractOptions) -> int | None:
        if not options.content:
            return None
        return len(_content_text(options).split())

    def direction(self, options: ExtractOptions) -> str | None:
        return text_direction(options.title)

    def url_and_domain(self, options: ExtractOptions) -> UrlAndDomain | None:
        document = options.document
        canonical = document.first("link[rel='canonical']")
        raw = canonical.get("href") if canonical is not None else None
        raw = raw or _meta(document, URL_META) or options.url
        return CLEANERS[FieldType.URL_AND_DOMAIN](raw, options) if raw else None

    # =========================================================================
    # Content discovery
    # =========================================================================

    def _find_content_node(self, document: Document) -> HtmlElement | None:
        """Pick a semantic container, or the densest paragraph parent."""
        for selector in CONTENT_SELECTORS:
            for element in document.select(selector):
                if len(normalize_whitespace(element.text_content())) >= self.min_content_length:
                    return element

        scores: dict[HtmlElement, int] = {}
        for paragraph in document.select("p"):
            length = len(normalize_whitespace(paragraph.text_content()))
            parent = paragraph.getparent()
            if length >= MIN_PARAGRAPH_LENGTH and parent is not None:
                scores[parent] = scores.get(parent, 0) + length

        if not scores:
            return None

        best, score = max(scores.items(), key=lambda item: item[1])
        return best if score >= self.min_content_length else None


# =============================================================================
# Helpers
# =============================================================================


def _meta(document: Document, names: tuple[str, ...]) -> str | None:
    """First non-empty meta value among names, checked in priority order."""
    values: dict[str, str] = {}
    for meta in document.select("meta[content]"):
        key = (meta.get("property") or meta.get("name") or meta.get("itemprop") or "").strip().lower()
        content = meta.get("content", "").strip()
        if key and content and key not in values:
            values[key] = content

    for name in names:
        if values.get(name):
            return values[name]
    return None


def _single_text(document: Document, selector: str) -> str | None:
    """Trimmed text of the only element matching a selector."""
    elements = document.select(selector)
    if len(elements) != 1:
        return None
    text = normalize_whitespace(elements[0].text_content())
    return text or None


def _jsonld_items(document: Document) -> list[dict[str, Any]]:
    """Article objects from JSON-LD script tags."""
    items: list[dict[str, Any]] = []

    for script in document.select('script[type="application/ld+json"]'):
        text = script.text_content()
        if not text:
            continue
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            continue

        if isinstance(data, dict) and "@graph" in data:
            candidates = data["@graph"]
        elif isinstance(data, list):
            candidates = data
        else:
            candidates = [data]

        for item in candidates:
            if not isinstance(item, dict):
                continue
            schema_type = item.get("@type", "")
            types = set(schema_type) if isinstance(schema_type, list) else {schema_type}
            if types & ARTICLE_SCHEMA_TYPES:
                items.append(item)

    return items


def _jsonld_value(document: Document, prop: str) -> str | None:
    """A property of the first JSON-LD article, flattened to a string."""
    for item in _jsonld_items(document):
        value = item.get(prop)
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, dict):
            value = value.get("name") or value.get("url") or value.get("@value")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _content_text(options: ExtractOptions) -> str:
    """Plain text of the already-extracted content."""
    if options.content_type is ContentType.HTML:
        return normalize_whitespace(parse_fragment(options.content).text_content())
    return normalize_whitespace(options.content)
