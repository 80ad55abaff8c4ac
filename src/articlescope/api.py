"""
Public entry point: parse an HTML document into an article record.
"""

from __future__ import annotations

from articlescope.core.config.models import ContentType, ExtractorDefinition
from articlescope.core.dom import Document
from articlescope.core.extract.base import ContentOnlyResult, ExtractionResult, ExtractOptions
from articlescope.core.extract.generic import GenericExtractor
from articlescope.core.extract.registry import ExtractorRegistry
from articlescope.core.extract.root import RootExtractor


def parse(
    html: str | bytes,
    url: str | None = None,
    *,
    extractor: ExtractorDefinition | GenericExtractor | None = None,
    registry: ExtractorRegistry | None = None,
    content_type: ContentType | str = ContentType.HTML,
    content_only: bool = False,
    extracted_title: str | None = None,
    fallback: bool = True,
) -> ExtractionResult | ContentOnlyResult:
    """Extract an article from raw HTML.

    A fresh document is parsed for every call, so independent calls can
    run in parallel.

    Args:
        html: Page markup
        url: Page URL, used for link resolution and extractor lookup
        extractor: Explicit definition; takes precedence over the registry
        registry: Definitions to look the URL up in
        content_type: Representation of content (html, text, markdown)
        content_only: Extract only the content field
        extracted_title: Known title, used as context in content-only mode
        fallback: Use generic extraction when custom rules don't match

    Returns:
        ExtractionResult, or ContentOnlyResult in content-only mode
    """
    document = Document(html, url=url)

    generic = registry.generic if registry is not None else GenericExtractor()
    if extractor is None:
        extractor = registry.get(url) if registry is not None else generic

    options = ExtractOptions(
        document=document,
        url=url,
        content_only=content_only,
        content_type=ContentType(content_type),
        fallback=fallback,
        extracted_title=extracted_title,
    )

    return RootExtractor(generic).extract(extractor, options)
