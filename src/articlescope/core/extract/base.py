"""
Extraction data structures.

Defines the options threaded through field resolution, the result
records, and the static table of field dependencies.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, NamedTuple

from ..config.models import ContentType, FieldType
from ..dom import Document


@dataclass(frozen=True)
class ExtractOptions:
    """Options and context for one extraction call.

    ``title``, ``content`` and ``excerpt`` carry values extracted earlier
    in the same call; the orchestrator fills in only those a field
    declares it depends on.
    """

    document: Document
    url: str | None = None

    content_only: bool = False
    content_type: ContentType = ContentType.HTML
    fallback: bool = True
    extracted_title: str | None = None

    # Context from already-extracted fields
    title: str | None = None
    content: str | None = None
    excerpt: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "content_type", ContentType(self.content_type))

    def with_context(self, **context: Any) -> ExtractOptions:
        """Return a copy carrying additional context values."""
        return replace(self, **context)


class UrlAndDomain(NamedTuple):
    """Canonical URL of the article and its hostname."""

    url: str | None
    domain: str | None


@dataclass
class ExtractionResult:
    """Structured article record."""

    title: str | None = None
    content: str | None = None
    author: str | None = None
    date_published: str | None = None
    lead_image_url: str | None = None
    dek: str | None = None
    next_page_url: str | None = None
    url: str | None = None
    domain: str | None = None
    excerpt: str | None = None
    word_count: int | None = None
    direction: str | None = None

    # Custom fields declared by an extractor's `extend` section
    extended: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if not self.extended:
            data.pop("extended")
        return data


@dataclass
class ContentOnlyResult:
    """Result of a content-only extraction."""

    content: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content}


# =============================================================================
# Field dependencies
# =============================================================================

# Evaluation order, and the context values each field may read
FIELD_DEPENDENCIES: tuple[tuple[FieldType, tuple[str, ...]], ...] = (
    (FieldType.TITLE, ()),
    (FieldType.DATE_PUBLISHED, ()),
    (FieldType.AUTHOR, ()),
    (FieldType.NEXT_PAGE_URL, ()),
    (FieldType.CONTENT, ("title",)),
    (FieldType.LEAD_IMAGE_URL, ("content",)),
    (FieldType.EXCERPT, ("content",)),
    (FieldType.DEK, ("content", "excerpt")),
    (FieldType.WORD_COUNT, ("content",)),
    (FieldType.DIRECTION, ("title",)),
    (FieldType.URL_AND_DOMAIN, ()),
)


def check_dependency_order(
    table: tuple[tuple[FieldType, tuple[str, ...]], ...] = FIELD_DEPENDENCIES,
) -> None:
    """Ensure every field comes after the fields it reads.

    Raises:
        ValueError: If a dependency is unknown or evaluated too late
    """
    seen: set[str] = set()
    for field_type, dependencies in table:
        for dependency in dependencies:
            if dependency not in seen:
                raise ValueError(
                    f"Field {field_type.value!r} depends on {dependency!r}, "
                    "which is not extracted before it"
                )
        seen.add(field_type.value)


check_dependency_order()
