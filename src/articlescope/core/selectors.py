"""
Selector variants and the selector resolution engine.

Rule files describe selectors in three raw shapes (a string, a
``[selector, attribute]`` pair, a list of strings). They are resolved
once, at load time, into one of three variants:

- TextSelector: one element whose trimmed text is non-empty
- AttributeSelector: one element whose named attribute is non-empty
- MultiSelector: every member matches something (html fields only)

``find_matching_selector`` walks the candidates in declared order and
returns the first one whose predicate holds. Order strictly dominates;
there is no scoring.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from .dom import Document, compile_selector
from .errors import SelectorConfigError
from .logging import get_logger

logger = get_logger("selectors")


@dataclass(frozen=True)
class TextSelector:
    """Matches a single element with non-empty text."""

    selector: str

    @property
    def members(self) -> tuple[str, ...]:
        return (self.selector,)

    def matches(self, document: Document, extract_html: bool, allow_multiple: bool = False) -> bool:
        elements = document.select(self.selector)
        if allow_multiple:
            return bool(elements)
        return len(elements) == 1 and elements[0].text_content().strip() != ""


@dataclass(frozen=True)
class AttributeSelector:
    """Matches a single element carrying a non-empty attribute.

    In html mode the pair is read as two selectors that must both
    exist somewhere in the document. Rule files never produce this
    case, since a pair in an html field resolves to a MultiSelector;
    it applies only to selectors built by hand.
    """

    selector: str
    attribute: str

    @property
    def members(self) -> tuple[str, ...]:
        return (self.selector, self.attribute)

    def matches(self, document: Document, extract_html: bool, allow_multiple: bool = False) -> bool:
        if extract_html:
            return all(document.exists(member) for member in self.members)

        elements = document.select(self.selector)
        if allow_multiple:
            return bool(elements)
        if len(elements) != 1:
            return False
        value = elements[0].get(self.attribute)
        return bool(value and value.strip())


@dataclass(frozen=True)
class MultiSelector:
    """Matches when every member selector matches at least one element."""

    selectors: tuple[str, ...]

    @property
    def members(self) -> tuple[str, ...]:
        return self.selectors

    def matches(self, document: Document, extract_html: bool, allow_multiple: bool = False) -> bool:
        if not extract_html:
            raise SelectorConfigError(
                f"Multi-selector {list(self.selectors)!r} is only valid for html fields"
            )
        return all(document.exists(member) for member in self.selectors)


Selector = Union[TextSelector, AttributeSelector, MultiSelector]
SELECTOR_TYPES = (TextSelector, AttributeSelector, MultiSelector)


def parse_selector(raw: Any, *, extract_html: bool = False) -> Selector:
    """Resolve a raw selector into its variant.

    Args:
        raw: A string, a list/tuple of strings, or an existing variant
        extract_html: Whether the owning field is extracted as html

    Returns:
        The selector variant

    Raises:
        SelectorConfigError: If the shape is invalid for the field
    """
    if isinstance(raw, SELECTOR_TYPES):
        return raw

    if isinstance(raw, str):
        _check_css(raw)
        return TextSelector(raw)

    if isinstance(raw, (list, tuple)) and raw and all(isinstance(item, str) for item in raw):
        if extract_html:
            for member in raw:
                _check_css(member)
            return MultiSelector(tuple(raw))

        if len(raw) == 2:
            selector, attribute = raw
            _check_css(selector)
            if not attribute.strip():
                raise SelectorConfigError(f"Empty attribute name in selector {list(raw)!r}")
            return AttributeSelector(selector, attribute)

        raise SelectorConfigError(
            f"Selector list {list(raw)!r} must be a [selector, attribute] pair "
            "outside html fields"
        )

    raise SelectorConfigError(f"Unsupported selector shape: {raw!r}")


def _check_css(selector: str) -> None:
    if not selector.strip():
        raise SelectorConfigError("Empty CSS selector")
    compile_selector(selector)


def find_matching_selector(
    document: Document,
    selectors: Sequence[Selector],
    extract_html: bool = False,
    allow_multiple: bool = False,
) -> Selector | None:
    """Return the first selector whose predicate holds, or None.

    Args:
        document: Document to query
        selectors: Candidates in priority order
        extract_html: Html-extraction mode (pairs become existence checks)
        allow_multiple: Accept any number of matched elements (extended fields)

    Returns:
        The first matching selector, or None when nothing matches
    """
    for selector in selectors:
        if selector.matches(document, extract_html, allow_multiple):
            logger.debug("Selector matched: %s", selector, extra={"selector": list(selector.members)})
            return selector
    return None
