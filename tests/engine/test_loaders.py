# ABOUTME: Tests for the string, file and URL loaders
# ABOUTME: URL loads are mocked with pytest-httpx

import pytest

from flarestone.engine import (
    Schema,
    deserialize,
    load_object_from_file,
    load_object_from_string,
    load_object_from_url,
    xpath,
)
from flarestone.errors import ExtractionError, FetchError


class Headline(Schema):
    text: str = xpath("//h1/text()")


class TestLocalLoaders:
    """Test loading from strings and files."""

    def test_load_from_string(self):
        """Test the basic string loader."""
        assert load_object_from_string("<h1>News</h1>", Headline).text == "News"

    def test_deserialize_alias(self):
        """Test the type-first alias."""
        assert deserialize(Headline, "<h1>News</h1>").text == "News"

    def test_load_from_file(self, tmp_path):
        """Test reading a saved page from disk."""
        page = tmp_path / "page.html"
        page.write_text("<h1>Saved</h1>", encoding="utf-8")

        assert load_object_from_file(page, Headline).text == "Saved"


class TestLoadFromUrl:
    """Test fetching and loading a page."""

    @pytest.mark.asyncio
    async def test_success(self, httpx_mock):
        """Test a successful fetch."""
        httpx_mock.add_response(url="https://example.test/page", text="<h1>Remote</h1>")

        record = await load_object_from_url("https://example.test/page", Headline)

        assert record.text == "Remote"

    @pytest.mark.asyncio
    async def test_sends_user_agent(self, httpx_mock):
        """Test that requests identify the scraper."""
        httpx_mock.add_response(url="https://example.test/page", text="<h1>Remote</h1>")

        await load_object_from_url("https://example.test/page", Headline)

        request = httpx_mock.get_requests()[0]
        assert "Flarestone" in request.headers["User-Agent"]

    @pytest.mark.asyncio
    async def test_error_status_raises(self, httpx_mock):
        """Test that non-2xx responses surface as FetchError."""
        httpx_mock.add_response(url="https://example.test/missing", status_code=404)

        with pytest.raises(FetchError) as exc_info:
            await load_object_from_url("https://example.test/missing", Headline)

        assert exc_info.value.status == 404
        assert exc_info.value.url == "https://example.test/missing"


class TestUnloadableTypes:
    """Test types the engine cannot populate."""

    def test_type_without_rules(self):
        """Test that a plain class is rejected rather than returned empty."""

        class Plain:
            pass

        with pytest.raises(ExtractionError):
            load_object_from_string("<h1>News</h1>", Plain)
