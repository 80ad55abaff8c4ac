"""
Root orchestrator sequencing field extraction for a document.

Walks the field dependency table in order, resolving each field from
the extractor definition and falling back to the generic strategy when
custom rules produce nothing usable.
"""

from __future__ import annotations

from typing import Any

from ..config.models import HTML_FIELDS, ExtractorDefinition, FieldType
from ..logging import get_contextual_logger, get_logger
from ..normalize.parsing import hostname
from .base import FIELD_DEPENDENCIES, ContentOnlyResult, ExtractionResult, ExtractOptions
from .generic import GenericExtractor
from .resolver import select, select_extended

logger = get_logger("root")


class RootExtractor:
    """Orchestrates custom-rule extraction with generic fallback."""

    def __init__(self, generic: GenericExtractor | None = None) -> None:
        """Initialize the orchestrator.

        Args:
            generic: Fallback strategies (default GenericExtractor)
        """
        self.generic = generic or GenericExtractor()

    def extract(
        self,
        extractor: ExtractorDefinition | GenericExtractor | None,
        options: ExtractOptions,
    ) -> ExtractionResult | ContentOnlyResult:
        """Extract an article from the options' document.

        Args:
            extractor: Per-source definition; None or the generic
                       extractor runs generic extraction only
            options: Document, call options and context

        Returns:
            ExtractionResult, or ContentOnlyResult in content-only mode
        """
        if extractor is None:
            extractor = self.generic

        # The generic extractor runs its own extraction end to end
        if extractor.domain == "*":
            return extractor.extract(options)

        log = get_contextual_logger("root", extractor=extractor.domain, url=options.url)

        if options.content_only:
            content = self.extract_result(
                FieldType.CONTENT,
                extractor,
                options.with_context(title=options.extracted_title),
            )
            return ContentOnlyResult(content=content)

        values: dict[str, Any] = {}
        for field_type, dependencies in FIELD_DEPENDENCIES:
            field_options = options.with_context(**{dep: values.get(dep) for dep in dependencies})
            values[field_type.value] = self.extract_result(field_type, extractor, field_options)
            log.debug("Extracted %s: %s", field_type.value, "ok" if values[field_type.value] else "empty")

        url, domain = _split_url_and_domain(values.pop(FieldType.URL_AND_DOMAIN.value))

        extended = {
            name: select_extended(name, rules, options)
            for name, rules in extractor.extend.items()
        }

        return ExtractionResult(url=url, domain=domain, extended=extended, **values)

    def extract_result(
        self,
        field_type: FieldType,
        extractor: ExtractorDefinition,
        options: ExtractOptions,
    ) -> Any:
        """Resolve one field, falling back to the generic strategy.

        Args:
            field_type: Field to extract
            extractor: Definition holding the field's rule
            options: Options carrying the field's declared context

        Returns:
            The custom result when truthy, otherwise the generic result
            (or None with fallback disabled)
        """
        result = select(
            field_type,
            extractor.rule_for(field_type),
            options,
            extract_html=field_type in HTML_FIELDS,
            content_type=options.content_type,
        )

        if result:
            return result

        if options.fallback:
            logger.debug("Falling back to generic %s", field_type.value, extra={"field": field_type.value})
            return self.generic.for_field(field_type)(options)

        return None


def _split_url_and_domain(value: Any) -> tuple[str | None, str | None]:
    """Unpack a url_and_domain result; a bare URL string gets its hostname."""
    if isinstance(value, tuple):
        return value[0], value[1]
    if isinstance(value, str) and value:
        return value, hostname(value)
    return None, None
