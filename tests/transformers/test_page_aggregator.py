# ABOUTME: Tests for the multi-page aggregator
# ABOUTME: Pages come from a recording mock upstream so fetch order and counts can be asserted

import pytest

from flarestone.errors import FetchError
from flarestone.models import FreeCompanyMembers
from flarestone.transformers import PageAggregationOptions, aggregate_items, aggregate_pages

FIRST_PAGE_URL = "https://na.finalfantasyxiv.com/lodestone/freecompany/9231/member"


def members_of(page: FreeCompanyMembers):
    return page.members


class TestAggregatePages:
    """Test walking a paginated member list."""

    @pytest.mark.asyncio
    async def test_walks_every_page(self, ranked_upstream):
        """Test that an uncapped walk fetches every page in order."""
        upstream = ranked_upstream([["Master", "Officer"], ["Officer", "Member"], ["Member"]])

        result = await aggregate_pages(FIRST_PAGE_URL, FreeCompanyMembers, members_of, client=upstream.client())

        assert upstream.requested == [1, 2, 3]
        assert [member.name for member in result.items] == [f"Member {n}" for n in range(1, 6)]
        assert len(result.pages) == 3
        assert result.total_pages == 3
        assert result.pages_fetched == 3
        assert result.complete is True

    @pytest.mark.asyncio
    async def test_max_items_trims_and_marks_incomplete(self, ranked_upstream):
        """Test stopping once enough items are collected."""
        upstream = ranked_upstream([["Member"] * 4 for _ in range(5)])
        options = PageAggregationOptions(max_items=10)

        result = await aggregate_pages(
            FIRST_PAGE_URL, FreeCompanyMembers, members_of, options=options, client=upstream.client()
        )

        assert len(result.items) == 10
        assert result.pages_fetched == 3
        assert result.total_pages == 5
        assert result.complete is False
        assert upstream.requested == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_item_cap_on_last_page_is_incomplete(self, ranked_upstream):
        """Test that filling the item cap exactly on the final page still reports an incomplete walk."""
        upstream = ranked_upstream([["Member"] * 2, ["Member"] * 2])
        options = PageAggregationOptions(max_items=4)

        result = await aggregate_pages(
            FIRST_PAGE_URL, FreeCompanyMembers, members_of, options=options, client=upstream.client()
        )

        assert result.pages_fetched == 2
        assert len(result.items) == 4
        assert result.complete is False
        assert upstream.requested == [1, 2]

    @pytest.mark.asyncio
    async def test_max_pages(self, ranked_upstream):
        """Test stopping after a fixed number of pages."""
        upstream = ranked_upstream([["Member"] * 2 for _ in range(4)])
        options = PageAggregationOptions(max_pages=2)

        result = await aggregate_pages(
            FIRST_PAGE_URL, FreeCompanyMembers, members_of, options=options, client=upstream.client()
        )

        assert upstream.requested == [1, 2]
        assert len(result.items) == 4
        assert result.complete is False

    @pytest.mark.asyncio
    async def test_page_cap_on_last_page_is_complete(self, ranked_upstream):
        """Test that reaching the page cap on the final page still counts as complete."""
        upstream = ranked_upstream([["Member"], ["Member"]])
        options = PageAggregationOptions(max_pages=2)

        result = await aggregate_pages(
            FIRST_PAGE_URL, FreeCompanyMembers, members_of, options=options, client=upstream.client()
        )

        assert result.pages_fetched == 2
        assert result.complete is True

    @pytest.mark.asyncio
    async def test_relative_links_resolve_against_base_url(self, ranked_upstream):
        """Test that next links are resolved against the configured origin."""
        upstream = ranked_upstream([["Member"], ["Member"]])
        options = PageAggregationOptions(base_url="https://eu.finalfantasyxiv.com")

        await aggregate_pages(FIRST_PAGE_URL, FreeCompanyMembers, members_of, options=options, client=upstream.client())

        assert upstream.urls == [
            FIRST_PAGE_URL,
            "https://eu.finalfantasyxiv.com/lodestone/freecompany/9231/member?page=2",
        ]

    @pytest.mark.asyncio
    async def test_relative_links_resolve_against_current_page(self, ranked_upstream):
        """Test resolution without an explicit origin."""
        upstream = ranked_upstream([["Member"], ["Member"]])

        await aggregate_pages(FIRST_PAGE_URL, FreeCompanyMembers, members_of, client=upstream.client())

        assert upstream.urls[1] == "https://na.finalfantasyxiv.com/lodestone/freecompany/9231/member?page=2"

    @pytest.mark.asyncio
    async def test_failed_page_aborts(self, ranked_upstream):
        """Test that a failing page raises instead of returning a partial result."""
        upstream = ranked_upstream([["Member"], ["Member"], ["Member"]], failing={2: 500})

        with pytest.raises(FetchError) as exc_info:
            await aggregate_pages(FIRST_PAGE_URL, FreeCompanyMembers, members_of, client=upstream.client())

        assert exc_info.value.status == 500
        assert upstream.requested == [1, 2]

    def test_options_reject_nonpositive_page_cap(self):
        """Test option validation."""
        with pytest.raises(ValueError):
            PageAggregationOptions(max_pages=0)


class TestAggregateItems:
    """Test the items-only wrapper."""

    @pytest.mark.asyncio
    async def test_returns_items(self, ranked_upstream):
        """Test that only the item list comes back."""
        upstream = ranked_upstream([["Master"], ["Officer"]])

        items = await aggregate_items(FIRST_PAGE_URL, FreeCompanyMembers, members_of, client=upstream.client())

        assert [member.rank.name for member in items] == ["Master", "Officer"]
