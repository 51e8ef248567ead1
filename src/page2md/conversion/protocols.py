"""Protocol definitions for content conversion."""

from typing import Protocol

from ..models.article import Article


class ContentExtractor(Protocol):
    """
    Protocol for extracting the main article from HTML.

    Implementations keep the article body while discarding navigation,
    headers, footers, ads, etc.
    """

    def extract(self, html: str, url: str) -> Article:
        """
        Extract the article from HTML.

        Args:
            html: Decoded HTML document
            url: Source URL (for relative link resolution)

        Returns:
            Article whose content is cleaned HTML

        Raises:
            ExtractionError if no article can be found
        """
        ...


class MarkdownConverter(Protocol):
    """Protocol for converting HTML to Markdown."""

    def convert(self, html: str, url: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string
            url: Source URL (for resolving relative links)

        Returns:
            Markdown string

        Raises:
            RenderError if conversion fails
        """
        ...
