"""HTTP surface of page2md.

Two endpoints share one pipeline:

- ``POST /convert`` takes ``{"url": ...}`` and answers ``{"markdown": ..., "error": ...}``
- ``GET /?r=<url>`` answers a plain-text document (title, excerpt, byline,
  image, Markdown body)
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional
from urllib.parse import unquote

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .. import __version__
from ..core.converter import PageConverter
from ..formatting import error_message, format_text_document
from ..models.api import ConvertRequest, ConvertResponse
from ..models.config import ServiceConfig

logger = logging.getLogger(__name__)


def _json_response(body: ConvertResponse, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_body())


def _set_process_time(request: Request, response: Response) -> None:
    start_time = getattr(request.state, "start_time", None)
    elapsed = time.perf_counter() - start_time if start_time is not None else 0.0
    response.headers["X-Process-Time"] = str(elapsed)


def target_from_query(request: Request) -> Optional[str]:
    """
    Read the target URL of ``GET /?r=<url>``.

    When ``r`` is the first parameter everything after ``r=`` is taken, so
    a target with its own unescaped query string survives intact.
    """
    raw_query = request.url.query
    if raw_query.startswith("r="):
        return unquote(raw_query[2:])
    return request.query_params.get("r")


def create_app(
    config: Optional[ServiceConfig] = None,
    converter: Optional[PageConverter] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Service configuration (defaults if None)
        converter: Converter to serve with; one is built from config when None.
            It is entered and closed by the application lifespan either way.
    """
    config = config or ServiceConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = converter or PageConverter(config)
        logger.info("Initializing converter...")
        async with active:
            app.state.converter = active
            yield
            logger.info("Shutting down converter...")

    app = FastAPI(
        title="page2md",
        description="Fetch a web page, extract the article and return it as Markdown",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def add_timing_header(request: Request, call_next):
        request.state.start_time = time.perf_counter()
        response = await call_next(request)
        _set_process_time(request, response)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Failed to decode request body: {exc.errors()}")
        return _json_response(ConvertResponse(error="Invalid request body"), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        response = _json_response(
            ConvertResponse(error="An unexpected error occurred"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        # Runs outside the http middleware, so time the response here
        _set_process_time(request, response)
        return response

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "timestamp": time.time()}

    @app.post("/convert")
    async def convert(body: ConvertRequest, request: Request) -> JSONResponse:
        url = body.url.strip()
        if not url:
            return _json_response(ConvertResponse(error="URL is required"), status.HTTP_400_BAD_REQUEST)

        logger.info(f"Processing request for {url}")
        ctx = await request.app.state.converter.convert(url)

        if not ctx.ok:
            message, status_code = error_message(ctx)
            logger.error(f"{message} (url={url})")
            return _json_response(ConvertResponse(error=message), status_code)

        logger.info(f"Successfully processed {url}")
        return _json_response(ConvertResponse(markdown=ctx.markdown or ""))

    @app.get("/", response_class=PlainTextResponse)
    async def read(request: Request) -> PlainTextResponse:
        url = (target_from_query(request) or "").strip()
        if not url:
            return PlainTextResponse("URL is required\n", status_code=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Processing request for {url}")
        ctx = await request.app.state.converter.convert(url)

        if not ctx.ok:
            message, status_code = error_message(ctx)
            logger.error(f"{message} (url={url})")
            return PlainTextResponse(message + "\n", status_code=status_code)

        logger.info(f"Successfully processed {url}")
        return PlainTextResponse(format_text_document(ctx.article, ctx.markdown or ""))

    return app
