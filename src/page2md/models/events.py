"""Event types emitted while a page moves through the pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during a conversion."""

    URL_REJECTED = "url_rejected"

    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"

    CONTENT_EXTRACTED = "content_extracted"
    EXTRACT_FAILED = "extract_failed"

    PAGE_CONVERTED = "page_converted"
    RENDER_FAILED = "render_failed"

    # Failure of a step without a dedicated type
    STEP_FAILED = "step_failed"


@dataclass
class PipelineEvent:
    """
    Event emitted by a pipeline step.

    Example:
        def on_event(event: PipelineEvent) -> None:
            if event.is_error:
                print(f"Error: {event.url} - {event.error}")

        ctx = await pipeline.execute(url, emit=on_event)
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    status_code: Optional[int] = None
    bytes_downloaded: Optional[int] = None
    content_type: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type in ERROR_EVENTS


ERROR_EVENTS = frozenset(
    {
        EventType.URL_REJECTED,
        EventType.FETCH_FAILED,
        EventType.EXTRACT_FAILED,
        EventType.RENDER_FAILED,
        EventType.STEP_FAILED,
    }
)
