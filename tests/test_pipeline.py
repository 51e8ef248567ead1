"""Tests for pipeline steps and the conversion pipeline."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from page2md.concurrency import WorkerPool
from page2md.conversion import HtmlToMarkdown, ReadabilityExtractor
from page2md.exceptions import ExtractionError, FetchError, InvalidUrlError, RenderError
from page2md.models.article import Article
from page2md.models.events import EventType
from page2md.pipeline.base import ConversionPipeline, PageContext
from page2md.pipeline.steps import ExtractStep, FetchStep, RenderStep, ValidateStep
from page2md.security import UrlValidator


class TestPageContext:
    """Tests for PageContext dataclass."""

    def test_create_context(self):
        ctx = PageContext(url="https://example.com/page")
        assert ctx.html is None
        assert ctx.markdown is None
        assert ctx.ok
        assert ctx.base_url == "https://example.com/page"

    def test_base_url_prefers_final_url(self):
        ctx = PageContext(url="https://example.com/a", final_url="https://example.com/b")
        assert ctx.base_url == "https://example.com/b"


class TestValidateStep:
    """Tests for ValidateStep."""

    @pytest.mark.asyncio
    async def test_valid_url_passes(self):
        step = ValidateStep(UrlValidator())
        ctx = await step.execute(PageContext(url="https://example.com/page"))
        assert ctx.ok

    @pytest.mark.asyncio
    async def test_invalid_url_raises(self):
        step = ValidateStep(UrlValidator())

        with pytest.raises(InvalidUrlError, match="localhost"):
            await step.execute(PageContext(url="http://localhost/admin"))


class TestFetchStep:
    """Tests for FetchStep."""

    @pytest.mark.asyncio
    async def test_fetches_html(self, fake_client, article_url):
        events = []

        ctx = await FetchStep(fake_client).execute(PageContext(url=article_url), events.append)

        assert "Growing Tomatoes" in ctx.html
        assert ctx.status_code == 200
        assert ctx.final_url == article_url
        assert ctx.bytes_downloaded > 0
        assert [e.type for e in events] == [EventType.FETCH_STARTED, EventType.FETCH_COMPLETED]

    @pytest.mark.asyncio
    async def test_records_redirect_target(self, fake_client, make_response):
        fake_client.pages["https://example.com/old"] = make_response("https://example.com/new", "<p>moved</p>")

        ctx = await FetchStep(fake_client).execute(PageContext(url="https://example.com/old"))

        assert ctx.final_url == "https://example.com/new"
        assert ctx.base_url == "https://example.com/new"

    @pytest.mark.asyncio
    async def test_propagates_fetch_errors(self, fake_client):
        with pytest.raises(FetchError, match="unexpected status code: 404"):
            await FetchStep(fake_client).execute(PageContext(url="https://example.com/missing"))

    @pytest.mark.asyncio
    async def test_rejects_non_html(self, fake_client, make_response):
        url = "https://example.com/file.pdf"
        fake_client.pages[url] = make_response(url, "%PDF-1.4", content_type="application/pdf")

        with pytest.raises(FetchError, match="unsupported content type: application/pdf"):
            await FetchStep(fake_client).execute(PageContext(url=url))

    @pytest.mark.asyncio
    async def test_content_type_check_can_be_disabled(self, fake_client, make_response):
        url = "https://example.com/page.txt"
        fake_client.pages[url] = make_response(url, "<p>hello</p>", content_type="text/plain")

        ctx = await FetchStep(fake_client, validate_content_type=False).execute(PageContext(url=url))

        assert ctx.html == "<p>hello</p>"

    @pytest.mark.asyncio
    async def test_missing_content_type_is_allowed(self, fake_client, make_response):
        url = "https://example.com/bare"
        fake_client.pages[url] = make_response(url, "<p>hello</p>", content_type="")

        ctx = await FetchStep(fake_client).execute(PageContext(url=url))

        assert ctx.html == "<p>hello</p>"


class TestExtractStep:
    """Tests for ExtractStep."""

    @pytest.mark.asyncio
    async def test_uses_final_url_as_base(self):
        extractor = MagicMock()
        extractor.extract.return_value = Article(url="https://example.com/b", title="T", length=4)
        ctx = PageContext(url="https://example.com/a", final_url="https://example.com/b", html="<p>x</p>")

        ctx = await ExtractStep(extractor).execute(ctx)

        extractor.extract.assert_called_once_with("<p>x</p>", "https://example.com/b")
        assert ctx.article.title == "T"

    @pytest.mark.asyncio
    async def test_requires_html(self):
        with pytest.raises(ExtractionError):
            await ExtractStep(MagicMock()).execute(PageContext(url="https://example.com"))

    @pytest.mark.asyncio
    async def test_runs_in_thread_pool(self, article_html, article_url):
        ctx = PageContext(url=article_url, html=article_html)

        async with WorkerPool(workers=1) as pool:
            ctx = await ExtractStep(ReadabilityExtractor(), pool).execute(ctx)

        assert "twenty litres" in ctx.article.text_content


class TestRenderStep:
    """Tests for RenderStep."""

    @pytest.mark.asyncio
    async def test_renders_article_content(self):
        ctx = PageContext(
            url="https://example.com/post",
            article=Article(url="https://example.com/post", content="<h2>Hello</h2><p>World</p>"),
        )
        events = []

        ctx = await RenderStep(HtmlToMarkdown()).execute(ctx, events.append)

        assert "## Hello" in ctx.markdown
        assert "World" in ctx.markdown
        assert events[-1].type == EventType.PAGE_CONVERTED

    @pytest.mark.asyncio
    async def test_requires_article(self):
        with pytest.raises(RenderError):
            await RenderStep(HtmlToMarkdown()).execute(PageContext(url="https://example.com"))


class TestConversionPipeline:
    """Tests for ConversionPipeline."""

    def _step(self, name, side_effect=None):
        step = MagicMock()
        step.name = name
        if side_effect is None:
            step.execute = AsyncMock(side_effect=lambda ctx, emit=None: ctx)
        else:
            step.execute = AsyncMock(side_effect=side_effect)
        return step

    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self):
        first, second = self._step("first"), self._step("second")

        ctx = await ConversionPipeline(steps=[first, second]).execute("https://example.com")

        assert ctx.ok
        first.execute.assert_awaited_once()
        second.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stops_at_first_error(self):
        failing = self._step("fetch", FetchError("unexpected status code: 500", status_code=500))
        after = self._step("extract")
        events = []

        ctx = await ConversionPipeline(steps=[failing, after]).execute("https://example.com", events.append)

        assert not ctx.ok
        assert ctx.error == "unexpected status code: 500"
        assert ctx.failed_step == "fetch"
        assert isinstance(ctx.exception, FetchError)
        after.execute.assert_not_awaited()
        assert events[-1].type == EventType.FETCH_FAILED
        assert events[-1].status_code == 500

    @pytest.mark.parametrize(
        "step_name, event_type",
        [
            ("validate", EventType.URL_REJECTED),
            ("extract", EventType.EXTRACT_FAILED),
            ("render", EventType.RENDER_FAILED),
            ("custom", EventType.STEP_FAILED),
        ],
    )
    @pytest.mark.asyncio
    async def test_failure_event_names_the_step(self, step_name, event_type):
        events = []
        pipeline = ConversionPipeline(steps=[self._step(step_name, ExtractionError("bad"))])

        ctx = await pipeline.execute("https://example.com", events.append)

        assert ctx.failed_step == step_name
        assert [e.type for e in events] == [event_type]
        assert events[0].is_error
        assert events[0].error == "bad"

    @pytest.mark.asyncio
    async def test_error_without_message_uses_type_name(self):
        ctx = await ConversionPipeline(steps=[self._step("render", RuntimeError())]).execute("https://example.com")

        assert ctx.error == "RuntimeError"

    @pytest.mark.asyncio
    async def test_add_step_is_fluent(self):
        pipeline = ConversionPipeline(steps=[])
        assert pipeline.add_step(self._step("a")) is pipeline
        assert len(pipeline.steps) == 1

    @pytest.mark.asyncio
    async def test_full_pipeline(self, fake_client, article_url):
        pipeline = ConversionPipeline(
            steps=[
                ValidateStep(UrlValidator()),
                FetchStep(fake_client),
                ExtractStep(ReadabilityExtractor()),
                RenderStep(HtmlToMarkdown()),
            ]
        )

        ctx = await pipeline.execute(article_url)

        assert ctx.ok, ctx.error
        assert ctx.article.byline == "Jane Gardener"
        assert "twenty litres" in ctx.markdown
        assert "[compost guide](https://garden.example.com/guides/compost)" in ctx.markdown
