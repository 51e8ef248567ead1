"""Pipeline step for readability extraction."""

import logging
from typing import Optional

from ...concurrency.pool import WorkerPool
from ...conversion.protocols import ContentExtractor
from ...exceptions import ExtractionError
from ...models.events import EventType, PipelineEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ExtractStep:
    """
    Pipeline step that extracts the main article from ctx.html.

    Reads ctx.html, writes ctx.article. Extraction runs in the thread pool
    when a WorkerPool is given.
    """

    name = "extract"

    def __init__(
        self,
        extractor: ContentExtractor,
        pool: Optional[WorkerPool] = None,
    ) -> None:
        self._extractor = extractor
        self._pool = pool

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        if ctx.html is None:
            raise ExtractionError("no HTML content to extract from")

        if self._pool is not None:
            article = await self._pool.run(self._extractor.extract, ctx.html, ctx.base_url)
        else:
            article = self._extractor.extract(ctx.html, ctx.base_url)

        ctx.article = article

        if emit:
            emit(
                PipelineEvent(
                    type=EventType.CONTENT_EXTRACTED,
                    url=ctx.url,
                    message=f"Extracted '{article.title}' ({article.length} chars)",
                )
            )

        logger.debug(f"Extracted article from {ctx.url}: title='{article.title}'")
        return ctx
