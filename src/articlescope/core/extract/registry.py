"""
Registry mapping hostnames to extractor definitions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..config.loader import load_all_extractor_definitions
from ..config.models import ExtractorDefinition
from ..logging import get_logger
from ..normalize.parsing import hostname
from .generic import GenericExtractor

logger = get_logger("registry")


class ExtractorRegistry:
    """Look up the extractor definition serving a URL.

    Lookup order: exact hostname, then base domain (the last two
    labels), then the generic extractor.
    """

    def __init__(
        self,
        definitions: Iterable[ExtractorDefinition] = (),
        generic: GenericExtractor | None = None,
    ) -> None:
        self.generic = generic or GenericExtractor()
        self._by_domain: dict[str, ExtractorDefinition] = {}
        for definition in definitions:
            self.register(definition)

    @classmethod
    def from_directory(cls, path: Path | str, generic: GenericExtractor | None = None) -> ExtractorRegistry:
        """Build a registry from every YAML definition in a directory."""
        definitions = load_all_extractor_definitions(path)
        logger.debug("Loaded %d extractor definitions from %s", len(definitions), path)
        return cls(definitions.values(), generic=generic)

    def register(self, definition: ExtractorDefinition) -> None:
        """Register a definition under its domain and supported domains."""
        for domain in definition.domains:
            if domain in self._by_domain and self._by_domain[domain] is not definition:
                logger.warning("Extractor for %s replaced by %s", domain, definition.domain)
            self._by_domain[domain] = definition

    def get(self, url: str | None) -> ExtractorDefinition | GenericExtractor:
        """Return the definition for a URL, or the generic extractor."""
        host = hostname(url)
        if not host:
            return self.generic

        base_domain = ".".join(host.split(".")[-2:])
        return self._by_domain.get(host) or self._by_domain.get(base_domain) or self.generic

    def __contains__(self, domain: str) -> bool:
        return domain.lower() in self._by_domain

    def __len__(self) -> int:
        return len({id(definition) for definition in self._by_domain.values()})
