"""Response bodies for the JSON and plain-text endpoints."""

from typing import Optional

from .models.article import Article
from .pipeline.base import PageContext

# failed step -> (message prefix, HTTP status)
STEP_ERRORS: dict[str, tuple[str, int]] = {
    "validate": ("Invalid URL", 400),
    "fetch": ("Failed to fetch webpage", 500),
    "extract": ("Failed to extract content", 500),
    "render": ("Failed to convert to Markdown", 500),
}


def error_message(ctx: PageContext) -> tuple[str, int]:
    """
    Map a failed conversion to the message and status shown to the client.

    Example:
        >>> ctx = PageContext(url="https://example.com", error="unexpected status code: 404", failed_step="fetch")
        >>> error_message(ctx)
        ('Failed to fetch webpage: unexpected status code: 404', 500)
    """
    prefix, status = STEP_ERRORS.get(ctx.failed_step or "", ("Conversion failed", 500))
    return f"{prefix}: {ctx.error}", status


def format_text_document(article: Optional[Article], markdown: str) -> str:
    """
    Build the plain-text document returned by ``GET /?r=<url>``.

    Header lines are written in the order title, excerpt, byline, image;
    a line is left out when its value is empty.
    """
    lines = []
    if article is not None:
        for label, value in (
            ("Title", article.title),
            ("Excerpt", article.excerpt),
            ("Byline", article.byline),
            ("Image", article.image),
        ):
            if value:
                lines.append(f"{label}: {value}")

    if lines:
        lines.append("")
    lines.append("Markdown Content:")
    lines.append(markdown.rstrip("\n"))
    return "\n".join(lines) + "\n"
