"""Async HTTP client with a total timeout, size limit and optional retries."""

from __future__ import annotations

import asyncio
import logging
import random
from types import TracebackType
from urllib.parse import urljoin

import aiohttp
from charset_normalizer import from_bytes as detect_encoding

from ..exceptions import FetchError
from ..security.url_validator import UrlValidator
from .protocols import HttpResponse

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "WebpageToMarkdown Bot/1.0"


class AsyncHttpClient:
    """
    Async HTTP client used to download the page being converted.

    Features:
    - Total timeout per request, redirects included
    - Redirects followed hop by hop, each target checked by the URL policy
    - Content size limit to prevent memory exhaustion
    - Exponential backoff retry for transient failures (off by default)
    - Encoding detection from headers, falling back to charset-normalizer

    Only a 200 reply counts as success; any other final status raises
    FetchError carrying the upstream status code.

    Example:
        async with AsyncHttpClient(user_agent="MyBot/1.0", default_timeout=10) as client:
            response = await client.get("https://example.com")
            html = client.decode_content(response)
    """

    # Status codes that warrant a retry
    RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

    REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})

    # Exceptions that warrant a retry
    RETRYABLE_EXCEPTIONS = (
        aiohttp.ClientError,
        asyncio.TimeoutError,
        ConnectionError,
    )

    def __init__(
        self,
        max_retries: int = 0,
        retry_base_delay: float = 1.0,
        max_content_size: int = 10 * 1024 * 1024,
        user_agent: str | None = None,
        proxy: str | None = None,
        default_timeout: float = 30.0,
        max_redirects: int = 10,
        url_validator: UrlValidator | None = None,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            max_retries: Retry attempts after the first request (0 = no retries)
            retry_base_delay: Base delay for exponential backoff (seconds)
            max_content_size: Maximum response size in bytes
            user_agent: User-Agent string sent with every request
            proxy: Proxy URL (http:// or https://)
            default_timeout: Total request timeout in seconds
            max_redirects: Redirect hops followed before giving up
            url_validator: Policy every redirect target must pass
        """
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._max_content_size = max_content_size
        self._proxy = proxy
        self._default_timeout = default_timeout
        self._max_redirects = max_redirects
        self._url_validator = url_validator
        self._user_agent = user_agent or DEFAULT_USER_AGENT

        self._session: aiohttp.ClientSession | None = None

    @property
    def user_agent(self) -> str:
        return self._user_agent

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        connector = aiohttp.TCPConnector(
            limit=100,
            limit_per_host=10,
            ttl_dns_cache=300,
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            headers={"User-Agent": self._user_agent},
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Calculate delay for exponential backoff with jitter.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay: float = self._retry_base_delay * (2**attempt)
        jitter: float = random.uniform(0, 1)
        return delay + jitter

    def _decode_content(self, content: bytes, content_type: str) -> str:
        """
        Decode content with encoding detection.

        Fallback chain:
        1. Content-Type header charset
        2. charset-normalizer detection
        3. UTF-8 with replacement
        """
        encoding = None
        if content_type:
            for part in content_type.split(";"):
                part = part.strip()
                if part.lower().startswith("charset="):
                    encoding = part.split("=", 1)[1].strip().strip("\"'")
                    break

        if encoding:
            try:
                return content.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Failed to decode with declared encoding: {encoding}")

        if content:
            result = detect_encoding(content)
            best_match = result.best() if result else None
            if best_match:
                logger.debug(f"Detected encoding: {best_match.encoding}")
                return str(best_match)

        return content.decode("utf-8", errors="replace")

    async def _read_body(self, response: aiohttp.ClientResponse) -> bytes:
        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
            raise FetchError(f"content too large: {content_length} bytes", status_code=response.status)

        content = b""
        async for chunk in response.content.iter_chunked(8192):
            content += chunk
            if len(content) > self._max_content_size:
                raise FetchError(
                    f"content size limit exceeded: >{self._max_content_size} bytes",
                    status_code=response.status,
                )
        return content

    def _redirect_target(self, current: str, response: aiohttp.ClientResponse) -> str:
        """Resolve a redirect Location and run it through the URL policy."""
        target = urljoin(current, response.headers.get("Location", ""))
        if self._url_validator is not None:
            result = self._url_validator.validate(target)
            if not result.is_valid:
                raise FetchError(
                    f"redirect to {target} rejected: {result.rejection_reason}",
                    status_code=response.status,
                )
        logger.debug(f"Following {response.status} redirect {current} -> {target}")
        return target

    async def _fetch_once(
        self,
        url: str,
        timeout_val: float,
        headers: dict[str, str] | None,
    ) -> HttpResponse:
        """One attempt: follow redirects hop by hop and read the final body."""
        assert self._session is not None
        current = url

        for _ in range(self._max_redirects + 1):
            async with self._session.get(
                current,
                timeout=aiohttp.ClientTimeout(total=timeout_val),
                headers=headers,
                proxy=self._proxy,
                allow_redirects=False,
            ) as response:
                if response.status in self.REDIRECT_STATUS_CODES and response.headers.get("Location"):
                    current = self._redirect_target(current, response)
                    continue

                if response.status != 200:
                    raise FetchError(
                        f"unexpected status code: {response.status}",
                        status_code=response.status,
                    )

                content = await self._read_body(response)

                return HttpResponse(
                    status_code=response.status,
                    content=content,
                    content_type=response.headers.get("Content-Type", ""),
                    headers=dict(response.headers),
                    url=str(response.url),
                )

        raise FetchError(f"error fetching webpage: more than {self._max_redirects} redirects")

    async def get(
        self,
        url: str,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP GET request.

        Redirects are followed here rather than by aiohttp so every hop is
        checked against the URL policy before it is requested.

        Args:
            url: The URL to fetch
            timeout: Total time for the request including redirects
                (uses default if None)
            headers: Optional additional headers

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            FetchError: On network errors and timeouts after retries are
                exhausted, on oversized content, on a rejected or endless
                redirect chain, and on any non-200 status
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        timeout_val = timeout or self._default_timeout

        for attempt in range(self._max_retries + 1):
            try:
                return await asyncio.wait_for(self._fetch_once(url, timeout_val, headers), timeout_val)

            except FetchError as e:
                if e.status_code in self.RETRYABLE_STATUS_CODES and attempt < self._max_retries:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"Got {e.status_code} for {url}, retrying in {delay:.1f}s "
                        f"(attempt {attempt + 1}/{self._max_retries + 1})"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise

            except self.RETRYABLE_EXCEPTIONS as e:
                if attempt < self._max_retries:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"Error fetching {url}: {e!r}, retrying in {delay:.1f}s "
                        f"(attempt {attempt + 1}/{self._max_retries + 1})"
                    )
                    await asyncio.sleep(delay)
                    continue

                if isinstance(e, asyncio.TimeoutError):
                    raise FetchError(f"error fetching webpage: timed out after {timeout_val:g}s") from e
                raise FetchError(f"error fetching webpage: {e}") from e

        raise FetchError(f"error fetching webpage: {url} failed after {self._max_retries + 1} attempts")

    def decode_content(self, response: HttpResponse) -> str:
        """
        Decode response content to string.

        Args:
            response: HttpResponse to decode

        Returns:
            Decoded string content
        """
        return self._decode_content(response.content, response.content_type)
