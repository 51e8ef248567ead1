"""FetchStep - HTTP fetching pipeline step."""

import logging
from typing import Optional

from ...exceptions import FetchError
from ...http.protocols import HttpClient
from ...models.events import EventType, PipelineEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)

# Allowed content types for HTML documents
ALLOWED_CONTENT_TYPES = frozenset(
    {
        "text/html",
        "application/xhtml+xml",
        "text/xml",
        "application/xml",
    }
)


class FetchStep:
    """
    Pipeline step that downloads the page.

    Populates:
        ctx.html: Decoded page HTML
        ctx.final_url: URL after redirects
        ctx.status_code: HTTP status code
        ctx.content_type: Content-Type header value
        ctx.bytes_downloaded: Size of downloaded content

    Raises FetchError for network errors, timeouts, non-200 replies,
    oversized bodies and (optionally) non-HTML content types.

    Example:
        async with AsyncHttpClient() as http_client:
            ctx = await FetchStep(http_client).execute(ctx)
            html = ctx.html
    """

    name = "fetch"

    def __init__(
        self,
        http_client: HttpClient,
        validate_content_type: bool = True,
    ) -> None:
        """
        Initialize the fetch step.

        Args:
            http_client: HTTP client implementing HttpClient protocol
            validate_content_type: If True, reject non-HTML content types
        """
        self._client = http_client
        self._validate_content_type = validate_content_type

    def _is_valid_content_type(self, content_type: str) -> bool:
        if not content_type:
            return True  # Allow if not specified

        base_type = content_type.lower().split(";")[0].strip()
        return base_type in ALLOWED_CONTENT_TYPES

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the fetch step.

        Args:
            ctx: Page context with URL to fetch
            emit: Optional callback to emit events

        Returns:
            PageContext with html, final_url and response details populated
        """
        url = ctx.url

        if emit:
            emit(PipelineEvent(type=EventType.FETCH_STARTED, url=url, message=f"Fetching {url}"))

        response = await self._client.get(url)

        ctx.status_code = response.status_code
        ctx.content_type = response.content_type
        ctx.bytes_downloaded = len(response.content)
        ctx.final_url = response.url or url

        if self._validate_content_type and not self._is_valid_content_type(response.content_type):
            raise FetchError(
                f"unsupported content type: {response.content_type}",
                status_code=response.status_code,
            )

        ctx.html = self._client.decode_content(response)

        logger.debug(f"Fetched {url}: {ctx.bytes_downloaded} bytes")

        if emit:
            emit(
                PipelineEvent(
                    type=EventType.FETCH_COMPLETED,
                    url=url,
                    status_code=response.status_code,
                    bytes_downloaded=ctx.bytes_downloaded,
                    content_type=response.content_type,
                    message=f"Fetched {ctx.bytes_downloaded} bytes",
                )
            )

        return ctx
