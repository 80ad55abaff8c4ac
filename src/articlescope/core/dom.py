"""
DOM substrate over lxml.

Wraps a parsed HTML tree and answers CSS queries. The module-level
helpers perform the in-place mutations the extraction engine needs
(renaming, removal, detaching, wrapping) while keeping the text that
follows an element (lxml's ``tail``) in its original position.
"""

from __future__ import annotations

from functools import lru_cache

from lxml import etree
from lxml import html as lxml_html
from lxml.cssselect import CSSSelector, SelectorError
from lxml.html import HtmlElement

from .errors import DocumentError, SelectorConfigError


_UTF8_PARSER = lxml_html.HTMLParser(encoding="utf-8", remove_comments=True)
_DEFAULT_PARSER = lxml_html.HTMLParser(remove_comments=True)


@lru_cache(maxsize=512)
def compile_selector(selector: str) -> CSSSelector:
    """Compile a CSS selector, raising SelectorConfigError on bad syntax."""
    try:
        return CSSSelector(selector, translator="html")
    except SelectorError as e:
        raise SelectorConfigError(f"Invalid CSS selector: {selector!r}", details=str(e)) from e


def parse_fragment(markup: str) -> HtmlElement:
    """Parse an HTML fragment into a single container element."""
    return lxml_html.fragment_fromstring(markup or "", create_parent="div")


class Document:
    """A parsed HTML document answering CSS queries.

    Queries always run against the live tree, so mutations made by one
    step are visible to the next. A document must not be shared between
    concurrent extractions.
    """

    def __init__(self, html: str | bytes, url: str | None = None) -> None:
        if html is None or not html.strip():
            raise DocumentError("Cannot build a document from empty HTML")

        # str input is re-encoded so declared encodings inside the markup
        # don't conflict with the already-decoded text
        if isinstance(html, str):
            data, parser = html.encode("utf-8"), _UTF8_PARSER
        else:
            data, parser = html, _DEFAULT_PARSER

        try:
            self.root: HtmlElement = lxml_html.document_fromstring(data, parser=parser)
        except (etree.ParserError, ValueError) as e:
            raise DocumentError(f"Failed to parse HTML: {e}") from e

        self.url = url

    def select(self, selector: str, within: HtmlElement | None = None) -> list[HtmlElement]:
        """Select elements matching a CSS selector.

        Args:
            selector: CSS selector (comma-separated groups allowed)
            within: Restrict matches to descendants of this element

        Returns:
            Matching elements in document order
        """
        context = self.root if within is None else within
        matches = compile_selector(selector)(context)
        if within is not None:
            return [element for element in matches if element is not within]
        return list(matches)

    def count(self, selector: str) -> int:
        return len(self.select(selector))

    def exists(self, selector: str) -> bool:
        return bool(self.select(selector))

    def first(self, selector: str) -> HtmlElement | None:
        matches = self.select(selector)
        return matches[0] if matches else None

    def new_element(self, tag: str = "div") -> HtmlElement:
        return self.root.makeelement(tag)

    @staticmethod
    def text(element: HtmlElement) -> str:
        return element.text_content()

    @staticmethod
    def html(element: HtmlElement) -> str:
        return lxml_html.tostring(element, encoding="unicode", method="html", with_tail=False)


# =============================================================================
# Mutation helpers
# =============================================================================


def rename(element: HtmlElement, tag: str) -> HtmlElement:
    """Convert an element to another tag, keeping children and attributes."""
    element.tag = tag
    return element


def _hand_off_tail(element: HtmlElement) -> None:
    """Move an element's tail text onto whatever precedes it in its parent."""
    parent = element.getparent()
    tail, element.tail = element.tail, None
    if not tail or parent is None:
        return

    previous = element.getprevious()
    if previous is not None:
        previous.tail = (previous.tail or "") + tail
    else:
        parent.text = (parent.text or "") + tail


def remove(element: HtmlElement) -> None:
    """Remove an element and its subtree from the tree."""
    parent = element.getparent()
    if parent is None:
        return
    _hand_off_tail(element)
    parent.remove(element)


def detach(element: HtmlElement) -> HtmlElement:
    """Take an element out of its parent so it can be re-inserted elsewhere."""
    remove(element)
    return element


def wrap(element: HtmlElement, tag: str = "div") -> HtmlElement:
    """Wrap an element in a new container placed where the element was.

    Returns:
        The new container element
    """
    wrapper = element.makeelement(tag)
    parent = element.getparent()

    if parent is not None:
        wrapper.tail, element.tail = element.tail, None
        parent.insert(parent.index(element), wrapper)

    wrapper.append(element)
    return wrapper
