"""
page2md - Fetch a web page, extract the article and serve it as Markdown.

Usage:
    from page2md import PageConverter, ServiceConfig

    async with PageConverter(ServiceConfig()) as converter:
        ctx = await converter.convert("https://example.com/post")
        print(ctx.markdown)

Or run the HTTP service:

    page2md serve --port 8087
"""

__version__ = "1.0.0"

from .core.converter import PageConverter, convert_blocking
from .exceptions import ExtractionError, FetchError, Page2mdError, RenderError
from .models.article import Article
from .models.config import (
    NetworkConfig,
    PerformanceConfig,
    RenderConfig,
    SecurityConfig,
    ServerConfig,
    ServiceConfig,
)
from .models.events import EventType, PipelineEvent

__all__ = [
    "__version__",
    # Core
    "PageConverter",
    "convert_blocking",
    # Config
    "ServiceConfig",
    "ServerConfig",
    "NetworkConfig",
    "SecurityConfig",
    "RenderConfig",
    "PerformanceConfig",
    # Models
    "Article",
    "EventType",
    "PipelineEvent",
    # Errors
    "Page2mdError",
    "FetchError",
    "ExtractionError",
    "RenderError",
]
