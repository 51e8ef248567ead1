"""Tests for error messages and the plain-text document."""

from page2md.formatting import error_message, format_text_document
from page2md.models.article import Article
from page2md.pipeline.base import PageContext


class TestErrorMessage:
    """Tests for error_message()."""

    def test_fetch_failure(self):
        ctx = PageContext(url="https://example.com", error="unexpected status code: 404", failed_step="fetch")
        assert error_message(ctx) == ("Failed to fetch webpage: unexpected status code: 404", 500)

    def test_extract_failure(self):
        ctx = PageContext(url="https://example.com", error="no readable content found", failed_step="extract")
        assert error_message(ctx) == ("Failed to extract content: no readable content found", 500)

    def test_validate_failure_is_client_error(self):
        ctx = PageContext(url="http://localhost", error="localhost URLs not allowed", failed_step="validate")
        message, status = error_message(ctx)
        assert message == "Invalid URL: localhost URLs not allowed"
        assert status == 400

    def test_render_failure(self):
        ctx = PageContext(url="https://example.com", error="boom", failed_step="render")
        assert error_message(ctx) == ("Failed to convert to Markdown: boom", 500)

    def test_unknown_step(self):
        ctx = PageContext(url="https://example.com", error="boom", failed_step="custom")
        assert error_message(ctx) == ("Conversion failed: boom", 500)


class TestFormatTextDocument:
    """Tests for format_text_document()."""

    def test_full_header(self):
        article = Article(
            url="https://example.com/post",
            title="Hello",
            excerpt="A greeting",
            byline="Ann",
            image="https://example.com/a.png",
        )

        text = format_text_document(article, "# Hello\n\nWorld\n")

        assert text == (
            "Title: Hello\n"
            "Excerpt: A greeting\n"
            "Byline: Ann\n"
            "Image: https://example.com/a.png\n"
            "\n"
            "Markdown Content:\n"
            "# Hello\n"
            "\n"
            "World\n"
        )

    def test_empty_fields_are_omitted(self):
        article = Article(url="https://example.com/post", title="Hello")

        text = format_text_document(article, "Body\n")

        assert text == "Title: Hello\n\nMarkdown Content:\nBody\n"
        assert "Byline:" not in text
        assert "Image:" not in text

    def test_no_header_lines(self):
        text = format_text_document(Article(url="https://example.com"), "Body")
        assert text == "Markdown Content:\nBody\n"

    def test_without_article(self):
        assert format_text_document(None, "") == "Markdown Content:\n\n"
