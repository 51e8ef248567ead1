"""Shared fixtures for page2md tests."""

from typing import Optional, Union

import pytest
from page2md.exceptions import FetchError
from page2md.http.protocols import HttpResponse

ARTICLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>Growing Tomatoes on a Balcony | Garden Notes</title>
    <meta name="description" content="A short guide to growing tomatoes in containers.">
    <meta name="author" content="Jane Gardener">
    <meta property="og:site_name" content="Garden Notes">
    <meta property="og:image" content="/images/tomatoes.jpg">
    <meta property="article:published_time" content="2024-05-01T08:00:00Z">
</head>
<body>
    <nav class="navigation"><a href="/">Home</a> | <a href="/about">About</a> | <a href="/contact">Contact</a></nav>
    <div id="sidebar" class="sidebar">
        <a href="/ads">Buy seeds now</a>
    </div>
    <article class="post-content">
        <h1>Growing Tomatoes on a Balcony</h1>
        <p>Tomatoes are one of the most rewarding plants to grow in a small space, and a sunny balcony
        gives them nearly everything they need. With a large container, good compost, and a little
        patience, even a beginner can harvest fresh fruit from midsummer until the first frost arrives.</p>
        <p>Choose a container that holds at least twenty litres of soil, because tomato roots spread
        widely and dry out quickly in hot weather. Drainage holes are essential, and a saucer underneath
        keeps the balcony floor clean while giving the roots a small reservoir during the warmest days.</p>
        <p>Water deeply and regularly, ideally in the morning, so that the leaves dry before evening. Feed
        the plants every week once the first flowers appear, using a fertiliser rich in potassium, and
        pinch out side shoots on cordon varieties to keep the plant tidy and productive all season long.</p>
        <p>Read the <a href="/guides/compost">compost guide</a> for more advice on preparing a rich,
        well drained growing medium, and remember that a little care early in the season pays off with
        a much larger and tastier harvest later, when the first ripe tomatoes finally turn deep red.</p>
    </article>
    <footer class="footer">Copyright Garden Notes. All rights reserved.</footer>
</body>
</html>
"""


class FakeHttpClient:
    """HttpClient double serving canned responses by URL."""

    def __init__(self, pages: Optional[dict[str, Union[HttpResponse, Exception]]] = None):
        self.pages = pages or {}
        self.requested: list[str] = []

    async def get(self, url, *, timeout=None, headers=None):
        self.requested.append(url)
        result = self.pages.get(url)
        if result is None:
            raise FetchError("unexpected status code: 404", status_code=404)
        if isinstance(result, Exception):
            raise result
        return result

    def decode_content(self, response):
        return response.content.decode("utf-8", errors="replace")


def html_response(url: str, html: str, content_type: str = "text/html; charset=utf-8") -> HttpResponse:
    return HttpResponse(
        status_code=200,
        content=html.encode("utf-8"),
        content_type=content_type,
        headers={"Content-Type": content_type},
        url=url,
    )


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def article_url() -> str:
    return "https://garden.example.com/posts/tomatoes"


@pytest.fixture
def fake_client(article_url, article_html) -> FakeHttpClient:
    """Client that knows the sample article and 404s everything else."""
    return FakeHttpClient({article_url: html_response(article_url, article_html)})


@pytest.fixture
def make_response():
    """Factory for 200 HTML responses: make_response(url, html, content_type=...)."""
    return html_response
