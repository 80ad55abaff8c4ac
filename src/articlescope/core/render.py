"""
Renderers turning a matched region into its output representation.

- html: raw markup serialization of the region
- text: concatenated text content
- markdown: markup converted to Markdown with markdownify
"""

from __future__ import annotations

from lxml.html import HtmlElement
from markdownify import markdownify

from .config.models import ContentType
from .dom import Document


def render_html(region: HtmlElement) -> str:
    """Serialize a region to HTML markup (without trailing tail text)."""
    return Document.html(region)


def render_text(region: HtmlElement) -> str:
    """Extract the plain text of a region."""
    return region.text_content()


def render_markdown(markup: str) -> str:
    """Convert HTML markup to Markdown."""
    return markdownify(markup, heading_style="ATX", bullets="-").strip()


def render(region: HtmlElement, content_type: ContentType | str = ContentType.HTML) -> str:
    """Render a region in the requested representation.

    Args:
        region: Element to render
        content_type: html, text or markdown

    Returns:
        Rendered string

    Raises:
        ValueError: If the content type is unknown
    """
    content_type = ContentType(content_type)

    if content_type is ContentType.HTML:
        return render_html(region)
    if content_type is ContentType.TEXT:
        return render_text(region)
    return render_markdown(render_html(region))
