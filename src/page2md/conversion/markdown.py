"""HTML to Markdown conversion."""

from __future__ import annotations

import logging
import re
from typing import Optional

import html2text
from bs4 import BeautifulSoup

from ..exceptions import RenderError
from ..models.config import RenderConfig
from .plugins import Snippets, apply_style, build_plugins

logger = logging.getLogger(__name__)


class HtmlToMarkdown:
    """
    Converts article HTML to Markdown.

    Uses html2text for the conversion itself; style options and extension
    plugins come from RenderConfig. A fresh html2text instance is built for
    each call, so one converter can be shared across worker threads.

    Example:
        converter = HtmlToMarkdown(RenderConfig(bullet_list_marker="*"))
        markdown = converter.convert(html_string, "https://example.com/post")
    """

    def __init__(self, options: Optional[RenderConfig] = None):
        """
        Initialize the Markdown converter.

        Args:
            options: Style rules and plugin list (defaults reproduce ATX
                headings, '-' bullets, fenced code, inline links, '**'
                strong, '_' emphasis and all plugins enabled)
        """
        self.options = options or RenderConfig()
        self._plugins = build_plugins(list(self.options.plugins))

    def _build_converter(self, url: str) -> html2text.HTML2Text:
        options = self.options
        converter = html2text.HTML2Text(baseurl=url, bodywidth=0)

        converter.inline_links = options.link_style == "inlined"
        converter.wrap_links = False
        converter.protect_links = False
        converter.skip_internal_links = False

        converter.ul_item_mark = options.bullet_list_marker
        converter.emphasis_mark = options.em_delimiter
        converter.strong_mark = options.strong_delimiter

        converter.ignore_images = False
        converter.ignore_tables = True
        converter.unicode_snob = True
        converter.default_image_alt = ""
        converter.single_line_break = False

        for plugin in self._plugins:
            plugin.configure(converter)
        return converter

    def _clean_output(self, markdown: str) -> str:
        """Collapse blank lines and trailing whitespace, keeping hard line breaks."""
        markdown = markdown.replace("\r\n", "\n")

        lines = []
        for line in markdown.split("\n"):
            stripped = line.rstrip()
            if stripped and line.endswith("  "):
                stripped += "  "
            lines.append(stripped)
        markdown = "\n".join(lines)

        markdown = re.sub(r"\n{3,}", "\n\n", markdown).strip()
        return markdown + "\n" if markdown else ""

    def convert(self, html: str, url: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string
            url: Source URL for resolving relative links

        Returns:
            Markdown string

        Raises:
            RenderError: If the HTML cannot be converted
        """
        try:
            soup = BeautifulSoup(html, "html.parser")
            snippets = Snippets()

            apply_style(soup, snippets, self.options)
            for plugin in self._plugins:
                plugin.apply(soup, snippets)

            markdown = self._build_converter(url).handle(str(soup))
            markdown = snippets.restore(markdown)
        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown for {url}: {e}")
            raise RenderError(str(e) or type(e).__name__) from e

        return self._clean_output(markdown)
