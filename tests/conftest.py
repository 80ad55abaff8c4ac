"""Shared fixtures: a sample article page and option builders."""

import pytest

from articlescope.core.dom import Document
from articlescope.core.extract.base import ExtractOptions


ARTICLE_URL = "https://www.example-news.com/2024/storm"

ARTICLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Storm Hits Coast | Example News</title>
  <meta property="og:title" content="Storm Hits Coast">
  <meta name="author" content="Jane Doe">
  <meta property="article:published_time" content="2024-03-05T10:30:00Z">
  <meta property="og:image" content="/images/storm.jpg">
  <meta name="description" content="A powerful storm made landfall on Tuesday.">
  <link rel="canonical" href="https://www.example-news.com/2024/storm">
  <link rel="next" href="/2024/storm?page=2">
</head>
<body>
  <header><nav><a href="/">Home</a></nav></header>
  <h1 class="headline">  Breaking News  </h1>
  <div class="byline">By <span class="author-name">John Smith</span></div>
  <time class="published" datetime="2024-03-05">March 5</time>
  <figure class="lead"><img src="/images/lead.jpg" alt="Lead"></figure>
  <div class="story-body">
    <h2>Overview</h2>
    <p>The storm arrived early in the morning and brought heavy rain to the whole coastline, flooding several streets.</p>
    <div class="ad-slot">Buy now</div>
    <p>Officials urged residents to stay indoors until the winds subside later this week.</p>
    <ul class="related-links"><li><a href="/other">Other story</a></li></ul>
  </div>
  <ul class="tags"><li>weather</li><li>coast</li></ul>
  <a class="pagination-next" href="/2024/storm?page=2">Next</a>
</body>
</html>
"""


@pytest.fixture
def article_html():
    return ARTICLE_HTML


@pytest.fixture
def document():
    return Document(ARTICLE_HTML, url=ARTICLE_URL)


@pytest.fixture
def options(document):
    return ExtractOptions(document=document, url=ARTICLE_URL)


@pytest.fixture
def make_options():
    """Build options over a fresh document from arbitrary markup."""
    def _make(html, url=None, **kwargs):
        return ExtractOptions(document=Document(html, url=url), url=url, **kwargs)
    return _make
