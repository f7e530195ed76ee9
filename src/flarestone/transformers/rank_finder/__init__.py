# ABOUTME: Rank boundary finder for free company member lists
# ABOUTME: find_free_company_ranks scans with minimal fetches; extract_ranks_from_pages reuses fetched pages

"""
Rank discovery over a rank-sorted, paginated member list.

The scan works by:
1. Fetching the first page to learn the total page count
2. Smart preloading: fetching early pages only while a rank transition may still lie ahead
3. Binary searching the remaining range for rank boundaries
4. Skipping every run of pages whose ends share a rank

Member counts only cover fetched pages; see ``RankSearchResultMetadata.pages_checked``.
"""

from flarestone.transformers.rank_finder.extractor import RankExtractor, extract_ranks_from_pages
from flarestone.transformers.rank_finder.fetcher import RankFetcher
from flarestone.transformers.rank_finder.tracker import RankTracker
from flarestone.transformers.rank_finder.types import (
    RankEntry,
    RankSearchOptions,
    RankSearchResult,
    RankSearchResultMetadata,
    RankTracking,
)
from flarestone.utils.fetch import FlarestoneClient
from flarestone.utils.logging import with_operation_context


@with_operation_context("rank scan")
async def find_free_company_ranks(
    fc_id: str, options: RankSearchOptions | None = None, client: FlarestoneClient | None = None
) -> RankSearchResult:
    """Discover a free company's ranks in hierarchy order.

    Args:
        fc_id: Free company ID
        options: Base URL, delay and preload settings
        client: Upstream client to reuse; one is created and closed if omitted

    Raises:
        FetchError: If any page fetch fails
    """
    return await RankFetcher(fc_id, options, client=client).scan()


__all__ = [
    "RankEntry",
    "RankExtractor",
    "RankFetcher",
    "RankSearchOptions",
    "RankSearchResult",
    "RankSearchResultMetadata",
    "RankTracker",
    "RankTracking",
    "extract_ranks_from_pages",
    "find_free_company_ranks",
]
