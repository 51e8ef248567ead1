"""Pipeline step for HTML to Markdown conversion."""

import logging
from typing import Optional

from ...concurrency.pool import WorkerPool
from ...conversion.protocols import MarkdownConverter
from ...exceptions import RenderError
from ...models.events import EventType, PipelineEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class RenderStep:
    """
    Pipeline step that converts the article content to Markdown.

    Reads ctx.article.content, writes ctx.markdown.

    Example:
        step = RenderStep(HtmlToMarkdown())
        ctx = await step.execute(ctx, emit=callback)
        # ctx.markdown now contains the converted content
    """

    name = "render"

    def __init__(
        self,
        converter: MarkdownConverter,
        pool: Optional[WorkerPool] = None,
    ) -> None:
        self._converter = converter
        self._pool = pool

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        if ctx.article is None:
            raise RenderError("no article to render")

        if self._pool is not None:
            markdown = await self._pool.run(
                self._converter.convert, ctx.article.content, ctx.base_url
            )
        else:
            markdown = self._converter.convert(ctx.article.content, ctx.base_url)

        ctx.markdown = markdown

        if emit:
            emit(
                PipelineEvent(
                    type=EventType.PAGE_CONVERTED,
                    url=ctx.url,
                    message=f"Converted to {len(markdown)} bytes of Markdown",
                )
            )

        logger.debug(f"Converted {ctx.url} to {len(markdown)} bytes of Markdown")
        return ctx
