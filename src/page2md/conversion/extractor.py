"""Main article extraction from HTML pages."""

import logging
import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from lxml.etree import ParserError
from readability import Document
from readability.readability import Unparseable

from ..exceptions import ExtractionError
from ..models.article import Article

logger = logging.getLogger(__name__)

# readability-lxml's placeholder when a document has no <title>
NO_TITLE = "[no-title]"

EXCERPT_MAX_LENGTH = 300

BYLINE_META = [
    {"name": "author"},
    {"property": "article:author"},
    {"name": "byl"},
    {"name": "dc.creator"},
    {"name": "twitter:creator"},
]

BYLINE_SELECTORS = [
    '[rel="author"]',
    '[itemprop="author"] [itemprop="name"]',
    '[itemprop="author"]',
    ".byline",
    ".author",
]

EXCERPT_META = [
    {"property": "og:description"},
    {"name": "description"},
    {"name": "twitter:description"},
]

IMAGE_META = [
    {"property": "og:image"},
    {"property": "og:image:url"},
    {"name": "twitter:image"},
    {"name": "twitter:image:src"},
]

PUBLISHED_META = [
    {"property": "article:published_time"},
    {"itemprop": "datePublished"},
    {"name": "date"},
    {"name": "dc.date"},
]

IFRAME_TAG_RE = re.compile(r"<iframe\b[^>]*>", re.IGNORECASE)

# readability-lxml keeps only iframes served from youtube.com or vimeo.com
VIDEO_EMBED_HOSTS = [
    (
        re.compile(r"(?:https?:)?//(?:www\.)?youtube(?:-nocookie)?\.com/embed/", re.IGNORECASE),
        "https://www.youtube.com/embed/",
    ),
    (
        re.compile(r"(?:https?:)?//(?:player\.|www\.)?vimeo\.com/video/", re.IGNORECASE),
        "https://vimeo.com/video/",
    ),
]


def _meta_content(soup: BeautifulSoup, candidates: list[dict]) -> Optional[str]:
    """Return the first non-empty content of the first matching meta tag."""
    for attrs in candidates:
        tag = soup.find("meta", attrs=attrs)
        if isinstance(tag, Tag):
            value = str(tag.get("content") or "").strip()
            if value:
                return value
    return None


def _clean_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _keep_video_embeds(html: str) -> str:
    """Rewrite video player iframes to a src readability will not strip."""

    def rewrite(match: re.Match) -> str:
        tag = match.group(0)
        for pattern, replacement in VIDEO_EMBED_HOSTS:
            tag = pattern.sub(replacement, tag)
        return tag

    return IFRAME_TAG_RE.sub(rewrite, html)


class ReadabilityExtractor:
    """
    Extracts the main article from an HTML document.

    Main content detection is delegated to readability-lxml; title, byline,
    excerpt, lead image and publication data come from the page metadata.

    Example:
        extractor = ReadabilityExtractor()
        article = extractor.extract(html, "https://example.com/post")
        print(article.title, article.byline)
    """

    def __init__(self, min_text_length: int = 25, retry_length: int = 250):
        """
        Initialize the extractor.

        Args:
            min_text_length: Minimum paragraph length readability scores
            retry_length: Article length below which readability retries less aggressively
        """
        self._min_text_length = min_text_length
        self._retry_length = retry_length

    def _extract_byline(self, soup: BeautifulSoup) -> Optional[str]:
        value = _meta_content(soup, BYLINE_META)
        # article:author is often a profile URL rather than a name
        if value and not value.startswith(("http://", "https://")):
            return value

        for selector in BYLINE_SELECTORS:
            element = soup.select_one(selector)
            if element is None:
                continue
            if element.name == "meta":
                text = str(element.get("content") or "")
            else:
                text = element.get_text(" ", strip=True)
            text = _clean_text(text)
            # Long matches are containers, not author lines
            if text and len(text) < 100:
                return text
        return None

    def _extract_image(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        value = _meta_content(soup, IMAGE_META)
        if value is None:
            link = soup.find("link", rel="image_src")
            if isinstance(link, Tag) and link.get("href"):
                value = str(link["href"]).strip()
        return urljoin(url, value) if value else None

    def _extract_published_time(self, soup: BeautifulSoup) -> Optional[str]:
        value = _meta_content(soup, PUBLISHED_META)
        if value:
            return value
        time_tag = soup.find("time", datetime=True)
        if isinstance(time_tag, Tag):
            return str(time_tag["datetime"]).strip() or None
        return None

    def _first_paragraph(self, content: BeautifulSoup) -> Optional[str]:
        for p in content.find_all("p"):
            text = _clean_text(p.get_text(" ", strip=True))
            if text:
                if len(text) > EXCERPT_MAX_LENGTH:
                    text = text[:EXCERPT_MAX_LENGTH].rsplit(" ", 1)[0] + "…"
                return text
        return None

    def _extract_title(self, doc: Document, soup: BeautifulSoup) -> str:
        title = doc.short_title() or ""
        if title and title != NO_TITLE:
            return title.strip()

        og_title = _meta_content(soup, [{"property": "og:title"}])
        if og_title:
            return og_title

        h1 = soup.find("h1")
        if isinstance(h1, Tag):
            return h1.get_text(strip=True)
        return ""

    def extract(self, html: str, url: str) -> Article:
        """
        Extract the main article from HTML.

        Args:
            html: Decoded HTML document
            url: Source URL, used to make links and images absolute

        Returns:
            Article with cleaned content HTML and metadata

        Raises:
            ExtractionError: If the document is empty, unparseable or has no text
        """
        if not html or not html.strip():
            raise ExtractionError("empty document")

        try:
            doc = Document(
                _keep_video_embeds(html),
                url=url,
                min_text_length=self._min_text_length,
                retry_length=self._retry_length,
            )
            content_html = doc.summary(html_partial=True)
        except (Unparseable, ParserError, ValueError) as e:
            raise ExtractionError(str(e) or "document could not be parsed") from e

        content = BeautifulSoup(content_html, "html.parser")
        text_content = content.get_text(" ", strip=True)
        if not text_content:
            raise ExtractionError("no readable content found")

        soup = BeautifulSoup(html, "html.parser")
        lang = None
        html_tag = soup.find("html")
        if isinstance(html_tag, Tag):
            lang = str(html_tag.get("lang") or "").strip() or None

        article = Article(
            url=url,
            title=self._extract_title(doc, soup),
            byline=self._extract_byline(soup),
            excerpt=_meta_content(soup, EXCERPT_META) or self._first_paragraph(content),
            image=self._extract_image(soup, url),
            site_name=_meta_content(soup, [{"property": "og:site_name"}]),
            published_time=self._extract_published_time(soup),
            lang=lang,
            content=content_html,
            text_content=text_content,
            length=len(text_content),
        )

        logger.debug(f"Extracted '{article.title}' from {url} ({article.length} chars)")
        return article
