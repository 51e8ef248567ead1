"""Tests for the FastAPI application."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from page2md.core.converter import PageConverter
from page2md.exceptions import FetchError
from page2md.models.config import ServiceConfig
from page2md.server import create_app


@pytest.fixture
def client(fake_client):
    config = ServiceConfig()
    app = create_app(config, converter=PageConverter(config, http_client=fake_client))
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Process-Time" in response.headers


class TestConvertEndpoint:
    """Tests for POST /convert."""

    def test_converts_page(self, client, article_url):
        response = client.post("/convert", json={"url": article_url})

        assert response.status_code == 200
        body = response.json()
        assert "error" not in body
        assert "twenty litres" in body["markdown"]
        assert "Buy seeds now" not in body["markdown"]
        assert "All rights reserved" not in body["markdown"]

    def test_url_without_scheme(self, client, fake_client):
        response = client.post("/convert", json={"url": "garden.example.com/posts/tomatoes"})

        assert response.status_code == 200
        assert fake_client.requested == ["https://garden.example.com/posts/tomatoes"]

    def test_missing_url(self, client):
        response = client.post("/convert", json={})

        assert response.status_code == 400
        assert response.json() == {"markdown": "", "error": "URL is required"}

    def test_blank_url(self, client, fake_client):
        response = client.post("/convert", json={"url": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "URL is required"
        assert fake_client.requested == []

    def test_malformed_body(self, client):
        response = client.post(
            "/convert",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"markdown": "", "error": "Invalid request body"}

    def test_fetch_failure(self, client):
        response = client.post("/convert", json={"url": "https://example.com/missing"})

        assert response.status_code == 500
        assert response.json() == {
            "markdown": "",
            "error": "Failed to fetch webpage: unexpected status code: 404",
        }

    def test_network_failure(self, client, fake_client):
        url = "https://example.com/slow"
        fake_client.pages[url] = FetchError("error fetching webpage: timed out after 30s")

        response = client.post("/convert", json={"url": url})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to fetch webpage: error fetching webpage: timed out after 30s"

    def test_extraction_failure(self, client, fake_client, make_response):
        url = "https://example.com/empty"
        fake_client.pages[url] = make_response(url, "<html><body></body></html>")

        response = client.post("/convert", json={"url": url})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to extract content: ")

    def test_private_address_rejected(self, client, fake_client):
        response = client.post("/convert", json={"url": "http://127.0.0.1:8080/"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid URL: loopback IP address '127.0.0.1' not allowed"
        assert fake_client.requested == []


class TestReadEndpoint:
    """Tests for GET /?r=<url>."""

    def test_text_document(self, client, article_url):
        response = client.get(f"/?r={article_url}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        text = response.text
        assert text.startswith("Title: Growing Tomatoes on a Balcony")
        assert "Excerpt: A short guide to growing tomatoes in containers.\n" in text
        assert "Byline: Jane Gardener\n" in text
        assert "Image: https://garden.example.com/images/tomatoes.jpg\n" in text
        assert "\n\nMarkdown Content:\n" in text
        assert "twenty litres" in text.split("Markdown Content:\n", 1)[1]

    def test_target_keeps_its_own_query(self, client, fake_client, make_response):
        target = "https://garden.example.com/search?q=tomatoes&page=2"
        fake_client.pages[target] = make_response(target, "<p>nothing</p>")

        client.get(f"/?r={target}")

        assert fake_client.requested == [target]

    def test_encoded_target(self, client, fake_client, article_url):
        response = client.get("/", params={"r": article_url})

        assert response.status_code == 200
        assert fake_client.requested == [article_url]

    def test_missing_target(self, client):
        response = client.get("/")

        assert response.status_code == 400
        assert response.text == "URL is required\n"

    def test_fetch_failure(self, client):
        response = client.get("/?r=https://example.com/missing")

        assert response.status_code == 500
        assert response.text == "Failed to fetch webpage: unexpected status code: 404\n"


class TestUnhandledErrors:
    """Tests for the catch-all exception handler."""

    def test_unexpected_error_is_json_500_with_timing(self, fake_client):
        config = ServiceConfig()
        app = create_app(config, converter=PageConverter(config, http_client=fake_client))

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.converter.convert = AsyncMock(side_effect=RuntimeError("boom"))

            response = client.post("/convert", json={"url": "https://example.com/post"})

        assert response.status_code == 500
        assert response.json() == {"markdown": "", "error": "An unexpected error occurred"}
        assert float(response.headers["X-Process-Time"]) >= 0
