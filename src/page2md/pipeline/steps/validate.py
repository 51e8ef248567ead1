"""ValidateStep - URL policy check before anything is fetched."""

import logging
from typing import Optional

from ...exceptions import InvalidUrlError
from ...security.url_validator import UrlValidator
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ValidateStep:
    """
    Pipeline step that rejects URLs the service must not fetch.

    Raises InvalidUrlError with the validator's rejection reason; the
    pipeline reports it as a URL_REJECTED event.
    """

    name = "validate"

    def __init__(self, url_validator: UrlValidator) -> None:
        self._validator = url_validator

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        result = self._validator.validate(ctx.url)
        if result.is_valid:
            return ctx

        reason = result.rejection_reason or "URL rejected"
        logger.info(f"Rejected {ctx.url}: {reason}")
        raise InvalidUrlError(reason)
