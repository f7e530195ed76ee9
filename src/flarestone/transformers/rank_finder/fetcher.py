# ABOUTME: Rank fetcher: discovers every rank in a member list with as few page fetches as possible
# ABOUTME: Fetches page 1, smart-preloads early pages, then binary-searches for rank boundaries

import asyncio

from flarestone.engine import load_object_from_string
from flarestone.errors import FetchError
from flarestone.models.free_company.members import FreeCompanyMembers
from flarestone.models.parsable import RankedPage
from flarestone.transformers.rank_finder.tracker import RankTracker
from flarestone.transformers.rank_finder.types import RankSearchOptions, RankSearchResult, RankSearchResultMetadata
from flarestone.transformers.rank_finder.utils import rank_at, same_rank
from flarestone.utils.fetch import FlarestoneClient
from flarestone.utils.logging import get_logger
from flarestone.utils.urls import free_company_members_url


class RankFetcher:
    """Scans one free company's member list for its distinct ranks.

    Members are listed sorted by rank, so members sharing a rank are contiguous across pages. That
    lets whole runs of pages be skipped once both ends are known to share a rank. Member counts are
    therefore taken from fetched pages only and undercount ranks spanning a skipped page; the
    result's ``pages_checked`` tells callers which pages were read.

    A fetcher holds per-scan state and is meant to be used for a single ``scan()``.
    """

    def __init__(
        self,
        fc_id: str,
        options: RankSearchOptions | None = None,
        client: FlarestoneClient | None = None,
        page_type: type[RankedPage] = FreeCompanyMembers,
    ):
        self.fc_id = fc_id
        self.options = options or RankSearchOptions()
        self.page_type = page_type
        self.client = client
        self.logger = get_logger(__name__).bind(fc_id=fc_id)

        self._tracker = RankTracker()
        self._page_cache: dict[int, RankedPage] = {}
        self._checked_pages: set[int] = set()

    def page_url(self, page: int) -> str:
        return free_company_members_url(self.fc_id, page, base_url=self.options.base_url)

    async def scan(self) -> RankSearchResult:
        """Discover all ranks.

        Raises:
            FetchError: If any page fetch fails; the whole scan is abandoned
        """
        owns_client = self.client is None
        if owns_client:
            self.client = FlarestoneClient()

        try:
            first_page = await self.fetch_page(1)
            total_pages = first_page.get_total_pages()

            if total_pages > 1:
                await self._smart_preload(total_pages)

                current_preload_page = 1
                preload_limit = min(self.options.preload_pages, total_pages - 1)
                while current_preload_page < preload_limit and (current_preload_page + 1) in self._page_cache:
                    current_preload_page += 1

                await self._search_range(current_preload_page, total_pages)
        finally:
            if owns_client:
                await self.client.close()
                self.client = None

        result = RankSearchResult(
            ranks=self._tracker.ranks_sorted(),
            metadata=RankSearchResultMetadata(total_pages=total_pages, pages_checked=sorted(self._checked_pages)),
        )
        self.logger.info(
            "Rank scan finished",
            total_pages=total_pages,
            pages_checked=len(self._checked_pages),
            ranks=len(result.ranks),
        )
        return result

    async def _smart_preload(self, total_pages: int) -> None:
        """Fetch early pages in order while a rank transition may still lie ahead of them."""
        current = 1
        max_preload_page = min(self.options.preload_pages, total_pages - 1)

        while current < max_preload_page:
            current_page = self._cached(current)
            end_page = await self.fetch_page(total_pages)

            # Same rank at both ends means no transition in between
            if same_rank(rank_at(current_page, -1), rank_at(end_page, 0)):
                self.logger.debug("Preload stopped early", page=current, total_pages=total_pages)
                break

            current += 1
            await self.fetch_page(current)

    async def _search_range(self, start: int, end: int) -> None:
        """Find rank transitions between two pages.

        Only each page's first member decides where a transition lies; the last member of the start
        page catches a rank that runs over the whole gap.
        """
        if start >= end:
            return

        start_page = await self.fetch_page(start)
        end_page = await self.fetch_page(end)

        if end - start <= 1:
            return

        first_of_start = rank_at(start_page, 0)
        first_of_end = rank_at(end_page, 0)

        if same_rank(first_of_start, first_of_end):
            return

        if same_rank(rank_at(start_page, -1), first_of_end):
            return

        mid = (start + end) // 2
        first_of_mid = rank_at(await self.fetch_page(mid), 0)

        if same_rank(first_of_start, first_of_mid):
            await self._search_range(mid, end)
        elif same_rank(first_of_mid, first_of_end):
            await self._search_range(start, mid)
        else:
            await self._search_range(start, mid)
            await self._search_range(mid, end)

    def _cached(self, page: int) -> RankedPage:
        try:
            return self._page_cache[page]
        except KeyError:
            raise RuntimeError(f"Page {page} not in cache") from None

    async def fetch_page(self, page: int) -> RankedPage:
        """Return a member page, fetching it and recording its ranks on first request."""
        cached = self._page_cache.get(page)
        if cached is not None:
            return cached

        url = self.page_url(page)
        response = await self.client.fetch(url)
        if not response.ok:
            raise FetchError(url, response.status)

        members_page = load_object_from_string(response.body, self.page_type)
        self._page_cache[page] = members_page
        self._checked_pages.add(page)

        # The last page may be partial, so only earlier pages establish the page size
        members = members_page.members or []
        if members and page < members_page.get_total_pages():
            self._tracker.set_page_size(len(members))

        self._tracker.extract_ranks_from_page(members_page, page)
        self.logger.debug("Fetched member page", page=page, members=len(members))

        if self.options.delay_ms > 0:
            await asyncio.sleep(self.options.delay_ms / 1000)

        return members_page
