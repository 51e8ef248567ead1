"""Base classes for the conversion pipeline."""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, runtime_checkable

from ..models.article import Article
from ..models.events import EventType, PipelineEvent

# Type alias for event emitter function
EventEmitter = Callable[[PipelineEvent], None]

# Event emitted when a step raises, by step name
FAILURE_EVENTS: dict[str, EventType] = {
    "validate": EventType.URL_REJECTED,
    "fetch": EventType.FETCH_FAILED,
    "extract": EventType.EXTRACT_FAILED,
    "render": EventType.RENDER_FAILED,
}


@dataclass
class PageContext:
    """
    Context object passed through pipeline steps.

    Contains all state for converting a single page, accumulated as it
    moves through the pipeline.

    Attributes:
        url: The URL requested by the client
        final_url: URL after redirects (base for relative links)
        html: Decoded HTML of the fetched page
        article: Extracted article
        markdown: Rendered Markdown of the article content
        error: Error message if a step failed
        failed_step: Name of the step that failed
    """

    url: str

    # Fetch results
    final_url: Optional[str] = None
    html: Optional[str] = None
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    bytes_downloaded: int = 0

    # Conversion results
    article: Optional[Article] = None
    markdown: Optional[str] = None

    # Status
    error: Optional[str] = None
    failed_step: Optional[str] = None
    exception: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def base_url(self) -> str:
        return self.final_url or self.url


@runtime_checkable
class PipelineStep(Protocol):
    """
    Protocol for pipeline steps.

    Each step receives a PageContext, fills in its part, and returns it.

    Error Handling Contract:
    - A step that cannot do its job raises (FetchError, ExtractionError, ...)
    - The pipeline catches the exception, records ctx.error and
      ctx.failed_step, and stops
    """

    name: str

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute this pipeline step.

        Args:
            ctx: The page context with accumulated state
            emit: Optional callback to emit events

        Returns:
            The (possibly modified) page context
        """
        ...


@dataclass
class ConversionPipeline:
    """
    Pipeline for converting a single page through multiple steps.

    Steps are executed in order. If a step raises an exception, the error
    is captured in ctx.error, a failure event for that step is emitted and
    processing stops.

    Example:
        pipeline = ConversionPipeline(steps=[
            ValidateStep(validator),
            FetchStep(http_client),
            ExtractStep(extractor),
            RenderStep(converter),
        ])

        ctx = await pipeline.execute(url, emit=log_event)
        if ctx.error:
            logger.error(f"{ctx.failed_step} failed: {ctx.error}")
        else:
            print(ctx.markdown)
    """

    steps: list[PipelineStep]

    async def execute(
        self,
        url: str,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the pipeline for a URL.

        Args:
            url: The URL to process
            emit: Optional callback for emitting events

        Returns:
            PageContext with final state (check ctx.error for status)
        """
        ctx = PageContext(url=url)

        for step in self.steps:
            try:
                ctx = await step.execute(ctx, emit)
            except Exception as e:
                ctx.error = str(e) or type(e).__name__
                ctx.failed_step = step.name
                ctx.exception = e

                if emit:
                    emit(
                        PipelineEvent(
                            type=FAILURE_EVENTS.get(step.name, EventType.STEP_FAILED),
                            url=url,
                            error=ctx.error,
                            status_code=getattr(e, "status_code", None),
                            message=f"{step.name} failed",
                        )
                    )
                break

        return ctx

    def add_step(self, step: PipelineStep) -> "ConversionPipeline":
        """
        Add a step to the pipeline (fluent API).

        Returns:
            Self for chaining
        """
        self.steps.append(step)
        return self
