"""Extracted article model."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Article:
    """
    Main content of a page as identified by readability extraction.

    Attributes:
        url: Final URL of the page (after redirects)
        title: Article title
        byline: Author line, if one could be found
        excerpt: Short description or first paragraph
        image: Absolute URL of the lead image
        site_name: Publisher name (og:site_name)
        published_time: Publication timestamp as found in the document
        lang: Document language from the <html lang> attribute
        content: Cleaned article HTML
        text_content: Plain text of the article
        length: Number of characters in text_content
    """

    url: str
    title: str = ""
    byline: Optional[str] = None
    excerpt: Optional[str] = None
    image: Optional[str] = None
    site_name: Optional[str] = None
    published_time: Optional[str] = None
    lang: Optional[str] = None
    content: str = ""
    text_content: str = ""
    length: int = 0

    def to_dict(self) -> dict:
        """Metadata without the HTML body, for logging and JSON output."""
        return {
            "url": self.url,
            "title": self.title,
            "byline": self.byline,
            "excerpt": self.excerpt,
            "image": self.image,
            "site_name": self.site_name,
            "published_time": self.published_time,
            "lang": self.lang,
            "length": self.length,
        }
