"""
Content mutation applied to matched regions before rendering.

Two declarative steps:
- transforms: rename matched elements, or hand them to a callback
- clean: remove every element matching any of a list of selectors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, Union

from lxml.html import HtmlElement

from .dom import Document, remove, rename


class TransformHandle:
    """Capability-limited access handed to transform callbacks.

    Callbacks can query the document and rename elements; nothing else.
    """

    def __init__(self, document: Document) -> None:
        self._document = document

    def select(self, selector: str, within: HtmlElement | None = None) -> list[HtmlElement]:
        return self._document.select(selector, within=within)

    def rename(self, element: HtmlElement, tag: str) -> HtmlElement:
        return rename(element, tag)


TransformCallback = Callable[[HtmlElement, TransformHandle], Any]


@dataclass(frozen=True)
class RenameTo:
    """Convert matched elements to another tag."""

    tag: str

    def apply(self, element: HtmlElement, handle: TransformHandle) -> None:
        rename(element, self.tag)


@dataclass(frozen=True)
class Mutate:
    """Run a callback on each matched element.

    A string returned by the callback is treated as a tag to rename the
    element to; any other return value is ignored.
    """

    callback: TransformCallback

    def apply(self, element: HtmlElement, handle: TransformHandle) -> None:
        result = self.callback(element, handle)
        if isinstance(result, str):
            rename(element, result)


Transform = Union[RenameTo, Mutate]


def parse_transform(raw: Any) -> Transform:
    """Resolve a raw transform value (tag name or callable) into its variant."""
    if isinstance(raw, (RenameTo, Mutate)):
        return raw
    if isinstance(raw, str):
        if not raw.strip():
            raise ValueError("Transform tag name must not be empty")
        return RenameTo(raw.strip())
    if callable(raw):
        return Mutate(raw)
    raise ValueError(f"Transform must be a tag name or a callable, got {type(raw).__name__}")


def transform_elements(
    region: HtmlElement,
    handle: TransformHandle,
    transforms: Mapping[str, Transform] | None,
) -> HtmlElement:
    """Apply transforms to elements inside a region, in declaration order."""
    if not transforms:
        return region

    for selector, transform in transforms.items():
        for element in handle.select(selector, within=region):
            transform.apply(element, handle)

    return region


def clean_by_selectors(
    region: HtmlElement,
    document: Document,
    clean: Sequence[str] | None,
) -> HtmlElement:
    """Remove every element inside a region matching any clean selector."""
    if not clean:
        return region

    for element in document.select(",".join(clean), within=region):
        remove(element)

    return region
