"""Exception hierarchy for page2md."""

from __future__ import annotations


class Page2mdError(Exception):
    """Base class for all page2md errors."""


class FetchError(Page2mdError):
    """
    Raised when the target page cannot be downloaded.

    Attributes:
        status_code: Upstream HTTP status, if a response was received
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(Page2mdError):
    """Raised when no readable article can be extracted from a page."""


class RenderError(Page2mdError):
    """Raised when extracted HTML cannot be converted to Markdown."""


class InvalidUrlError(Page2mdError):
    """Raised when a URL is rejected by the URL policy."""
