"""Content conversion for page2md (readability extraction, HTML to Markdown)."""

from .extractor import ReadabilityExtractor
from .markdown import HtmlToMarkdown
from .plugins import PLUGINS, RenderPlugin, Snippets, build_plugins
from .protocols import ContentExtractor, MarkdownConverter

__all__ = [
    # Protocols
    "ContentExtractor",
    "MarkdownConverter",
    "RenderPlugin",
    # Implementations
    "ReadabilityExtractor",
    "HtmlToMarkdown",
    "Snippets",
    "PLUGINS",
    "build_plugins",
]
