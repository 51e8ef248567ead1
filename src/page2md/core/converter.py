"""PageConverter - fetch, extract and render a single page."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from ..concurrency import WorkerPool
from ..conversion import HtmlToMarkdown, ReadabilityExtractor
from ..http import AsyncHttpClient
from ..http.protocols import HttpClient
from ..models.config import ServiceConfig
from ..models.events import PipelineEvent
from ..pipeline.base import ConversionPipeline, EventEmitter, PageContext
from ..pipeline.steps import ExtractStep, FetchStep, RenderStep, ValidateStep
from ..security.url_validator import UrlValidator, normalize_url

logger = logging.getLogger(__name__)


def log_event(event: PipelineEvent) -> None:
    """Default event sink: pipeline events go to the log."""
    if event.is_error:
        logger.warning(f"{event.type.value} {event.url}: {event.error}")
    else:
        logger.debug(f"{event.type.value} {event.url}: {event.message or ''}")


class PageConverter:
    """
    Primary API: turn a URL into an extracted article and its Markdown.

    Owns the HTTP session and the worker thread pool for its lifetime, so
    one instance serves every request of the web service.

    Example:
        async with PageConverter(ServiceConfig()) as converter:
            ctx = await converter.convert("https://example.com/post")
            if ctx.ok:
                print(ctx.article.title)
                print(ctx.markdown)
            else:
                print(f"{ctx.failed_step}: {ctx.error}")
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        http_client: HttpClient | None = None,
    ):
        """
        Initialize the converter.

        Args:
            config: Service configuration (defaults if None)
            http_client: Client to fetch with; if None an AsyncHttpClient is
                created from the network config and closed on exit
        """
        self.config = config or ServiceConfig()
        self._http_client = http_client
        self._owned_client: AsyncHttpClient | None = None
        self._pool: WorkerPool | None = None
        self._pipeline: ConversionPipeline | None = None

    async def __aenter__(self) -> PageConverter:
        config = self.config

        validator = UrlValidator(
            allowed_schemes=config.security.allowed_schemes,
            allowed_domains=config.security.allowed_domains,
            block_private_ips=config.security.block_private_ips,
        )

        if self._http_client is None:
            network = config.network
            self._owned_client = AsyncHttpClient(
                max_retries=network.max_retries,
                max_content_size=network.max_content_size,
                user_agent=network.user_agent,
                proxy=network.proxy,
                default_timeout=network.timeout,
                max_redirects=network.max_redirects,
                url_validator=validator,
            )
            await self._owned_client.__aenter__()
            self._http_client = self._owned_client

        self._pool = WorkerPool(
            workers=config.performance.cpu_workers,
            max_pending=config.performance.max_pending,
        )

        self._pipeline = ConversionPipeline(
            steps=[
                ValidateStep(validator),
                FetchStep(self._http_client, validate_content_type=config.network.validate_content_type),
                ExtractStep(ReadabilityExtractor(), self._pool),
                RenderStep(HtmlToMarkdown(config.render), self._pool),
            ]
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._owned_client is not None:
            await self._owned_client.__aexit__(exc_type, exc_val, exc_tb)
            self._owned_client = None
            self._http_client = None
        if self._pool is not None:
            self._pool.close(wait=True)
            self._pool = None
        self._pipeline = None

    async def convert(self, url: str, emit: EventEmitter | None = None) -> PageContext:
        """
        Run the pipeline for a URL.

        Args:
            url: Target page; surrounding whitespace is trimmed and a
                missing scheme defaults to https
            emit: Event callback (defaults to logging)

        Returns:
            PageContext; ctx.error and ctx.failed_step are set on failure
        """
        if self._pipeline is None:
            raise RuntimeError("Converter not initialized. Use 'async with' context manager.")

        return await self._pipeline.execute(normalize_url(url), emit or log_event)


def convert_blocking(url: str, config: ServiceConfig | None = None) -> PageContext:
    """
    Blocking conversion of a single URL.

    Convenience wrapper for sync code such as the CLI. Do not call it from
    a running event loop; use ``async with PageConverter()`` there.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        raise RuntimeError("convert_blocking() called from async context. Use 'async with PageConverter()' instead.")

    async def _run() -> PageContext:
        async with PageConverter(config) as converter:
            return await converter.convert(url)

    return asyncio.run(_run())
