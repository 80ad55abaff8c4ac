import pytest

from articlescope.core.dom import Document, wrap
from articlescope.core.mutate import (
    Mutate,
    RenameTo,
    TransformHandle,
    clean_by_selectors,
    parse_transform,
    transform_elements,
)


SECTION_HTML = """
<html><body>
<section id="region">
  <h2 class="sub" data-x="1">Sub <em>heading</em></h2>
  <p>First paragraph</p>
  <div class="ad">Ad</div> trailing text
  <p class="note">Note</p>
</section>
</body></html>
"""


@pytest.fixture
def document():
    return Document(SECTION_HTML)


@pytest.fixture
def region(document):
    return document.first("#region")


def test_rename_keeps_children_and_attributes(document, region):
    transform_elements(region, TransformHandle(document), {"h2": RenameTo("h3")})

    heading = document.first("h3")
    assert heading is not None
    assert heading.get("class") == "sub"
    assert heading.get("data-x") == "1"
    assert heading.find("em").text == "heading"
    assert document.first("h2") is None


def test_callback_return_value_renames(document, region):
    transform_elements(region, TransformHandle(document), {"p.note": Mutate(lambda el, handle: "aside")})

    assert document.first("aside.note") is not None


def test_callback_without_return_leaves_element(document, region):
    seen = []

    def record(element, handle):
        seen.append(element.tag)
        element.set("data-seen", "yes")

    transform_elements(region, TransformHandle(document), {"p": Mutate(record)})

    assert seen == ["p", "p"]
    assert [p.get("data-seen") for p in document.select("p")] == ["yes", "yes"]


def test_callback_can_use_handle(document, region):
    def promote_emphasis(element, handle):
        for em in handle.select("em", within=element):
            handle.rename(em, "strong")

    transform_elements(region, TransformHandle(document), {"h2": Mutate(promote_emphasis)})

    assert document.first("h2 strong") is not None


def test_transforms_run_in_declaration_order(document, region):
    # The second transform sees the output of the first
    transforms = {"h2": RenameTo("h3"), "h3": RenameTo("h4")}

    transform_elements(region, TransformHandle(document), transforms)

    assert document.first("h4.sub") is not None
    assert document.first("h3") is None


def test_region_root_is_not_transformed(document, region):
    transform_elements(region, TransformHandle(document), {"section": RenameTo("article")})

    assert region.tag == "section"


def test_wrapped_region_root_is_reachable(document, region):
    wrapper = wrap(region)

    transform_elements(wrapper, TransformHandle(document), {"section": RenameTo("article")})

    assert region.tag == "article"
    assert wrapper.getparent() is not None


def test_clean_removes_matches_and_keeps_tail_text(document, region):
    clean_by_selectors(region, document, [".ad", "p.note"])

    assert document.first(".ad") is None
    assert document.first("p.note") is None
    assert "trailing text" in region.text_content()
    assert "First paragraph" in region.text_content()


def test_clean_is_idempotent(document, region):
    clean_by_selectors(region, document, [".ad"])
    first = Document.html(region)

    clean_by_selectors(region, document, [".ad"])

    assert Document.html(region) == first


def test_clean_does_not_touch_outside_region():
    document = Document("<html><body><div id='r'><p class='x'>in</p></div><p class='x'>out</p></body></html>")

    clean_by_selectors(document.first("#r"), document, [".x"])

    assert [p.text for p in document.select("p.x")] == ["out"]


def test_empty_steps_are_noops(document, region):
    before = Document.html(region)

    transform_elements(region, TransformHandle(document), {})
    clean_by_selectors(region, document, [])

    assert Document.html(region) == before


class TestParseTransform:
    def test_tag_name(self):
        assert parse_transform("h3") == RenameTo("h3")

    def test_callable(self):
        def callback(element, handle):
            return None

        assert parse_transform(callback) == Mutate(callback)

    @pytest.mark.parametrize("raw", ["", "  ", 3, None])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_transform(raw)
