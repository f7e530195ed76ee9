# ABOUTME: Tests for page availability classification and outward status mapping
# ABOUTME: Also covers loading a fetched page together with its result

import pytest

from flarestone.engine import Schema, xpath
from flarestone.transformers import (
    ScrapeResult,
    detect_availability,
    fetch_page_with_meta,
    load_page_with_meta,
    status_code_for,
)
from flarestone.transformers.scrape_meta import MAINTENANCE_MARKER, PRIVATE_PROFILE_MARKER
from flarestone.utils.fetch import FetchResponse

PROFILE_URL = "https://na.finalfantasyxiv.com/lodestone/character/123/"


class Profile(Schema):
    name: str = xpath("//p[@class='frame__chara__name']/text()")


class TestDetectAvailability:
    """Test classification of fetched pages."""

    @pytest.mark.parametrize(
        "html,status,expected",
        [
            ("<p>ok</p>", 200, ScrapeResult.SUCCESS),
            (f"<p>{PRIVATE_PROFILE_MARKER}</p>", 200, ScrapeResult.PRIVATE),
            ("<p>hidden</p>", 403, ScrapeResult.HIDDEN),
            ("<p>gone</p>", 404, ScrapeResult.NOT_FOUND),
            (f"<p>{MAINTENANCE_MARKER}</p>", 503, ScrapeResult.MAINTENANCE),
            (f"<p>{MAINTENANCE_MARKER}</p>", 502, ScrapeResult.MAINTENANCE),
            ("<p>bad gateway</p>", 502, ScrapeResult.ERROR),
            ("<p>oops</p>", 500, ScrapeResult.ERROR),
        ],
    )
    def test_classification(self, html, status, expected):
        """Test each classification rule."""
        meta = detect_availability(html, status)

        assert meta.result_code is expected
        assert meta.upstream_status_code == status

    def test_hidden_wins_over_markers(self):
        """Test that the status check runs before content checks."""
        meta = detect_availability(f"<p>{PRIVATE_PROFILE_MARKER}</p>", 403)

        assert meta.result_code is ScrapeResult.HIDDEN

    def test_private_marker_ignored_on_errors(self):
        """Test that the private marker only counts on a 200."""
        meta = detect_availability(f"<p>{PRIVATE_PROFILE_MARKER}</p>", 500)

        assert meta.result_code is ScrapeResult.ERROR


class TestStatusCodeFor:
    """Test the outward status mapping."""

    @pytest.mark.parametrize(
        "result,expected",
        [
            (ScrapeResult.SUCCESS, 200),
            (ScrapeResult.PRIVATE, 200),
            (ScrapeResult.HIDDEN, 403),
            (ScrapeResult.NOT_FOUND, 404),
            (ScrapeResult.MAINTENANCE, 503),
        ],
    )
    def test_fixed_codes(self, result, expected):
        """Test results with a fixed status."""
        assert status_code_for(result) == expected

    def test_error_keeps_upstream_failure_status(self):
        """Test that errors pass through the upstream status."""
        assert status_code_for(ScrapeResult.ERROR, 502) == 502

    def test_error_without_failure_status(self):
        """Test the fallback when there is no usable upstream status."""
        assert status_code_for(ScrapeResult.ERROR) == 500
        assert status_code_for(ScrapeResult.ERROR, 200) == 500

    def test_wire_values(self):
        """Test the result codes as clients see them."""
        assert ScrapeResult.PRIVATE.value == "profile_private"
        assert ScrapeResult.HIDDEN.value == "character_hidden"


class TestLoadPageWithMeta:
    """Test loading a page with its availability result."""

    def test_success(self):
        """Test a normal page."""
        response = FetchResponse(url=PROFILE_URL, status=200, body='<p class="frame__chara__name">Alyx</p>')

        result = load_page_with_meta(response, Profile)

        assert result.data.name == "Alyx"
        assert result.scrape_meta.result_code is ScrapeResult.SUCCESS
        assert result.response_status_code == 200

    def test_private_profile_still_extracts(self):
        """Test that private profiles keep the fields they do show."""
        body = f'<p class="frame__chara__name">Alyx</p><p>{PRIVATE_PROFILE_MARKER}</p>'
        response = FetchResponse(url=PROFILE_URL, status=200, body=body)

        result = load_page_with_meta(response, Profile)

        assert result.data.name == "Alyx"
        assert result.scrape_meta.result_code is ScrapeResult.PRIVATE
        assert result.response_status_code == 200

    def test_maintenance(self):
        """Test a maintenance page."""
        response = FetchResponse(url=PROFILE_URL, status=503, body=f"<h1>{MAINTENANCE_MARKER}</h1>")

        result = load_page_with_meta(response, Profile)

        assert result.scrape_meta.result_code is ScrapeResult.MAINTENANCE
        assert result.scrape_meta.upstream_status_code == 503
        assert result.response_status_code == 503

    @pytest.mark.asyncio
    async def test_fetch_classifies_error_statuses(self, httpx_mock):
        """Test that HTTP errors are classified rather than raised."""
        httpx_mock.add_response(url=PROFILE_URL, status_code=403, text="<p>Forbidden</p>")

        result = await fetch_page_with_meta(PROFILE_URL, Profile)

        assert result.scrape_meta.result_code is ScrapeResult.HIDDEN
        assert result.response_status_code == 403
