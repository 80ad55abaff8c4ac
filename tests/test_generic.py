import pytest

from articlescope.core.config.models import FieldType
from articlescope.core.extract.base import ContentOnlyResult
from articlescope.core.extract.generic import GenericExtractor

from .conftest import ARTICLE_URL


JSONLD_HTML = """
<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@graph": [
  {"@type": "WebSite", "name": "Site"},
  {"@type": "NewsArticle",
   "headline": "Linked Data Headline",
   "author": {"@type": "Person", "name": "Ann Lee"},
   "datePublished": "2023-01-02T03:04:05Z",
   "image": ["https://cdn.example.com/a.jpg"]}
]}
</script>
</head><body><p>Short.</p></body></html>
"""


@pytest.fixture
def generic():
    return GenericExtractor()


def test_meta_tags(generic, options):
    assert generic.title(options) == "Storm Hits Coast"
    assert generic.author(options) == "Jane Doe"
    assert generic.date_published(options) == "2024-03-05T10:30:00+00:00"
    assert generic.lead_image_url(options) == "https://www.example-news.com/images/storm.jpg"
    assert generic.excerpt(options) == "A powerful storm made landfall on Tuesday."


def test_links(generic, options):
    assert generic.next_page_url(options) == "https://www.example-news.com/2024/storm?page=2"
    assert generic.url_and_domain(options) == (ARTICLE_URL, "www.example-news.com")


def test_dek_has_no_generic_strategy(generic, options):
    assert generic.dek(options) is None


def test_content_by_paragraph_density(generic, options):
    content = generic.content(options)

    assert 'class="story-body"' in content
    assert "The storm arrived early" in content
    assert "Breaking News" not in content


def test_content_leaves_document_untouched(generic, options):
    generic.content(options)

    assert options.document.first("div.story-body .ad-slot") is not None


def test_semantic_container_preferred(generic, make_options):
    body = "Paragraph text that is long enough to count as real article content. " * 3
    options = make_options(
        f"<html><body><div><p>{body}</p></div><article><p>{body}</p><p>Article only</p></article></body></html>"
    )

    assert "Article only" in generic.content(options)


def test_word_count_reads_content(generic, options):
    content = generic.content(options)

    assert generic.word_count(options.with_context(content=content)) == 36
    assert generic.word_count(options) is None


def test_direction_from_title(generic, options):
    assert generic.direction(options.with_context(title="Storm Hits Coast")) == "ltr"
    assert generic.direction(options.with_context(title="שלום עולם")) == "rtl"
    assert generic.direction(options) is None


def test_jsonld_values(generic, make_options):
    options = make_options(JSONLD_HTML, url="https://example.com/a")

    assert generic.title(options) == "Linked Data Headline"
    assert generic.author(options) == "Ann Lee"
    assert generic.date_published(options) == "2023-01-02T03:04:05+00:00"
    assert generic.lead_image_url(options) == "https://cdn.example.com/a.jpg"


def test_author_meta_url_is_ignored(generic, make_options):
    options = make_options(
        "<html><head><meta name='author' content='https://social.example.com/sam'></head>"
        "<body><div class='byline'>By Sam Roe</div></body></html>"
    )

    assert generic.author(options) == "Sam Roe"


def test_lead_image_from_content(generic, make_options):
    options = make_options("<html><body><p>Hi</p></body></html>", url="https://example.com/")
    options = options.with_context(content='<div><p>x</p><img src="/pic.png"></div>')

    assert generic.lead_image_url(options) == "https://example.com/pic.png"


def test_full_extraction(generic, options):
    result = generic.extract(options)

    assert result.title == "Storm Hits Coast"
    assert result.word_count == 36
    assert result.direction == "ltr"
    assert result.url == ARTICLE_URL
    assert result.domain == "www.example-news.com"


def test_rtl_page(generic, make_options):
    result = generic.extract(make_options("<html><head><title>שלום עולם</title></head><body><p>x</p></body></html>"))

    assert result.title == "שלום עולם"
    assert result.direction == "rtl"
    assert result.content is None


def test_content_only(generic, make_options, article_html):
    options = make_options(article_html, url=ARTICLE_URL, content_only=True, content_type="markdown")

    result = generic.extract(options)

    assert isinstance(result, ContentOnlyResult)
    assert result.content.startswith("## Overview")


@pytest.mark.parametrize("field_type", list(FieldType))
def test_every_field_has_a_strategy(generic, field_type):
    assert callable(generic.for_field(field_type))
