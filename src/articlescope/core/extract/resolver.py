"""
Field resolver: custom rules -> matched region -> cleaned value.

``select`` resolves one field from its rule. It never falls back on its
own; a None result tells the orchestrator to try the generic strategy.
"""

from __future__ import annotations

from typing import Any

from lxml.html import HtmlElement

from ..config.models import ContentType, FieldExtractionSpec, FieldRule, FieldType
from ..dom import Document, detach, wrap
from ..logging import get_logger
from ..mutate import TransformHandle, clean_by_selectors, transform_elements
from ..normalize.cleaners import CLEANERS
from ..render import render
from ..selectors import AttributeSelector, Selector, TextSelector, find_matching_selector
from .base import ExtractOptions

logger = get_logger("resolver")


def select(
    field_type: FieldType | str,
    rules: FieldRule,
    options: ExtractOptions,
    *,
    extract_html: bool = False,
    content_type: ContentType | str = ContentType.HTML,
) -> Any:
    """Resolve a single field from its custom rule.

    Args:
        field_type: Field being extracted (selects the cleaner)
        rules: FieldExtractionSpec, a literal string, or None
        options: Extraction options and context
        extract_html: Extract the matched region as html
        content_type: Output representation in html mode

    Returns:
        The cleaned value, the literal string rule, or None when the rule
        is absent or no selector matches. Empty values from cleaners and
        renderers are returned as-is.
    """
    if rules is None:
        return None

    # A literal string is the field's fixed value for this source
    if isinstance(rules, str):
        return rules

    field_type = FieldType(field_type)
    document = options.document

    selector = find_matching_selector(document, rules.selectors, extract_html)
    if selector is None:
        logger.debug("No selector matched for %s", field_type.value, extra={"field": field_type.value})
        return None

    if extract_html:
        return _select_html(field_type, rules, selector, options, content_type)

    if isinstance(selector, AttributeSelector):
        node = document.select(selector.selector)[0]
        result = node.get(selector.attribute).strip()
    else:
        node = document.select(selector.selector)[0]
        _prepare_text_node(node, document, rules)
        result = node.text_content().strip()

    if rules.default_cleaner:
        return CLEANERS[field_type](result, options, rule=rules)

    return result


def _select_html(
    field_type: FieldType,
    rules: FieldExtractionSpec,
    selector: Selector,
    options: ExtractOptions,
    content_type: ContentType | str,
) -> str:
    """Build, mutate, clean and render the region for an html field."""
    document = options.document

    region = _build_region(document, selector)

    # Wrap so transforms and cleaning can reach the region's own root
    region = wrap(region)

    handle = TransformHandle(document)
    transform_elements(region, handle, rules.transforms)
    clean_by_selectors(region, document, rules.clean)

    region = CLEANERS[field_type](region, options, default_cleaner=rules.default_cleaner)

    return render(region, content_type)


def _build_region(document: Document, selector: Selector) -> HtmlElement:
    """The matched element, or a container unioning every member's matches."""
    if isinstance(selector, TextSelector):
        return document.select(selector.selector)[0]

    container = document.new_element("div")
    seen: set[HtmlElement] = set()
    for member in selector.members:
        for element in document.select(member):
            if element in seen:
                continue
            seen.add(element)
            container.append(detach(element))

    return container


def _prepare_text_node(node: HtmlElement, document: Document, rules: FieldExtractionSpec) -> None:
    """Clean, then transform, a node matched in text mode."""
    clean_by_selectors(node, document, rules.clean)
    transform_elements(node, TransformHandle(document), rules.transforms)


def select_extended(
    name: str,
    rules: FieldRule,
    options: ExtractOptions,
) -> Any:
    """Resolve a custom extended field (no cleaner, no fallback).

    With ``allow_multiple`` every element matched by the first matching
    selector contributes a value and a list is returned.
    """
    if rules is None or isinstance(rules, str):
        return rules

    document = options.document
    selector = find_matching_selector(
        document,
        rules.selectors,
        extract_html=False,
        allow_multiple=rules.allow_multiple,
    )
    if selector is None:
        logger.debug("No selector matched for extended field %s", name, extra={"field": name})
        return None

    nodes = document.select(selector.selector)
    if not rules.allow_multiple:
        nodes = nodes[:1]

    values: list[str] = []
    for node in nodes:
        if isinstance(selector, AttributeSelector):
            value = (node.get(selector.attribute) or "").strip()
        else:
            _prepare_text_node(node, document, rules)
            value = node.text_content().strip()
        if value:
            values.append(value)

    if rules.allow_multiple:
        return values
    return values[0] if values else None
