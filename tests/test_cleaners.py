from datetime import datetime

import pytest

from articlescope.core.config.models import FieldExtractionSpec, FieldType
from articlescope.core.dom import Document
from articlescope.core.normalize.cleaners import (
    EXCERPT_MAX_LENGTH,
    clean_author,
    clean_content,
    clean_date_published,
    clean_dek,
    clean_direction,
    clean_excerpt,
    clean_next_page_url,
    clean_title,
    clean_url_and_domain,
    clean_word_count,
    get_cleaner,
)
from articlescope.core.normalize.parsing import parse_date, resolve_url, text_direction

from .conftest import ARTICLE_URL


class TestTitle:
    def test_site_name_segment_is_dropped(self, options):
        assert clean_title("Storm Hits Coast | Example News", options) == "Storm Hits Coast"

    def test_unrelated_segments_are_kept(self, options):
        assert clean_title("Weather - Storm Hits Coast", options) == "Weather - Storm Hits Coast"

    def test_whitespace_is_collapsed(self, options):
        assert clean_title("  Storm \n Hits   Coast ", options) == "Storm Hits Coast"

    def test_overlong_title_uses_h1(self, make_options):
        options = make_options("<html><body><h1>Short Heading</h1></body></html>")

        assert clean_title("word " * 40, options) == "Short Heading"


class TestTextFields:
    @pytest.mark.parametrize("raw, expected", [
        ("By Jane Doe", "Jane Doe"),
        ("Posted by Jane Doe", "Jane Doe"),
        ("by: Jane Doe", "Jane Doe"),
        ("Jane Doe", "Jane Doe"),
        ("By ", None),
    ])
    def test_author(self, options, raw, expected):
        assert clean_author(raw, options) == expected

    def test_date_published(self, options):
        assert clean_date_published("2024-03-05T10:30:00Z", options) == "2024-03-05T10:30:00+00:00"
        assert clean_date_published("Published on 03/05/2024", options) == "2024-03-05T00:00:00"
        assert clean_date_published("1709634600", options) == "2024-03-05T10:30:00+00:00"
        assert clean_date_published("   ", options) is None

    def test_date_published_uses_rule_timezone_and_format(self, options):
        rule = FieldExtractionSpec.model_validate(
            {"selectors": ["time"], "timezone": "Europe/Berlin", "format": "%d.%m.%Y %H:%M"}
        )

        assert clean_date_published("05.03.2024 10:30", options, rule=rule) == "2024-03-05T10:30:00+01:00"

    def test_dek(self, options):
        assert clean_dek("A short standfirst", options) == "A short standfirst"
        assert clean_dek("Hi", options) is None

    def test_dek_repeating_excerpt_is_dropped(self, options):
        options = options.with_context(excerpt="A short standfirst and then the story continues")

        assert clean_dek("A short standfirst", options) is None

    def test_excerpt_truncated_on_word_boundary(self, options):
        excerpt = clean_excerpt("word " * 100, options)

        assert excerpt.endswith("…")
        assert len(excerpt) <= EXCERPT_MAX_LENGTH + 1
        assert "wor…" not in excerpt

    def test_short_excerpt_untouched(self, options):
        assert clean_excerpt("  A short  excerpt ", options) == "A short excerpt"

    def test_next_page_url(self, options):
        assert clean_next_page_url("?page=2", options) == ARTICLE_URL + "?page=2"
        assert clean_next_page_url(ARTICLE_URL + "/", options) is None
        assert clean_next_page_url("javascript:void(0)", options) is None

    @pytest.mark.parametrize("raw, expected", [
        ("1,234 words", 1234),
        ("About 56 words", 56),
        (78, 78),
        ("none", None),
    ])
    def test_word_count(self, options, raw, expected):
        assert clean_word_count(raw, options) == expected

    def test_direction(self, options):
        assert clean_direction(" RTL ", options) == "rtl"
        assert clean_direction("sideways", options) is None

    def test_url_and_domain(self, options):
        assert clean_url_and_domain("/other", options) == ("https://www.example-news.com/other", "www.example-news.com")
        assert clean_url_and_domain("mailto:a@example.com", options) is None

    def test_get_cleaner(self):
        assert get_cleaner("author") is clean_author
        assert get_cleaner(FieldType.CONTENT) is clean_content


class TestContent:
    def region(self, markup):
        document = Document(f"<html><body><div id='region'>{markup}</div></body></html>")
        return document.first("#region")

    def test_junk_is_stripped(self, options):
        region = self.region(
            "<p>Text</p><script>x()</script><style>p {}</style>"
            "<iframe src='https://www.youtube.com/embed/abc'></iframe>"
            "<iframe src='https://ads.example.com/frame'></iframe>"
        )

        html = Document.html(clean_content(region, options))

        assert "<script" not in html
        assert "<style" not in html
        assert "youtube.com/embed/abc" in html
        assert "ads.example.com" not in html

    def test_links_made_absolute(self, options):
        region = self.region("<p><a href='/other'>Other</a><img src='pic.jpg'></p>")

        html = Document.html(clean_content(region, options, default_cleaner=False))

        assert 'href="https://www.example-news.com/other"' in html
        assert 'src="https://www.example-news.com/2024/pic.jpg"' in html

    def test_title_heading_removed(self, options):
        options = options.with_context(title="Storm Hits Coast")
        region = self.region("<h2>Storm  Hits Coast</h2><h2>Aftermath</h2><p>Text</p>")

        html = Document.html(clean_content(region, options))

        assert "Storm" not in html
        assert "<h2>Aftermath</h2>" in html

    def test_few_h1s_removed_many_demoted(self, options):
        few = Document.html(clean_content(self.region("<h1>One</h1><p>Text</p>"), options))
        many = Document.html(clean_content(self.region("<h1>A</h1><h1>B</h1><h1>C</h1>"), options))

        assert "One" not in few
        assert "<h1>" not in many
        assert many.count("<h2>") == 3

    def test_empty_paragraphs_removed_unless_media(self, options):
        region = self.region("<p>  </p><p><img src='/a.jpg'></p><p>Text</p>")

        html = Document.html(clean_content(region, options))

        assert html.count("<p>") == 2

    def test_attributes_whitelisted(self, options):
        region = self.region("<p class='lead' onclick='evil()' style='x'>Text</p>")

        html = Document.html(clean_content(region, options))

        assert 'class="lead"' in html
        assert "onclick" not in html
        assert "style" not in html


class TestParsing:
    def test_resolve_url(self):
        assert resolve_url("/a", "https://example.com/b/c") == "https://example.com/a"
        assert resolve_url("ftp://example.com/a") is None
        assert resolve_url(None) is None

    def test_parse_date(self):
        assert parse_date("2024-03-05") == datetime(2024, 3, 5)
        assert parse_date(None) is None

    def test_parse_date_with_format(self):
        assert parse_date("05/03/2024", date_format="%d/%m/%Y") == datetime(2024, 3, 5)
        # Without the format the US reading applies
        assert parse_date("05/03/2024") == datetime(2024, 5, 3)

    def test_parse_date_localizes_naive_values(self):
        parsed = parse_date("2020-01-02 10:00", timezone_name="America/New_York")

        assert parsed.isoformat() == "2020-01-02T10:00:00-05:00"

    def test_parse_date_keeps_explicit_offset(self):
        parsed = parse_date("2024-03-05T10:30:00Z", timezone_name="America/New_York")

        assert parsed.isoformat() == "2024-03-05T10:30:00+00:00"

    def test_text_direction(self):
        assert text_direction("مرحبا") == "rtl"
        assert text_direction("hello") == "ltr"
        assert text_direction("1234 !") is None
