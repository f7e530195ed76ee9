# ABOUTME: Rank extraction from member pages that were already fetched in full
# ABOUTME: Used after a complete member aggregation so no further requests are needed

from collections.abc import Sequence

from flarestone.models.parsable import RankedPage
from flarestone.transformers.rank_finder.tracker import RankTracker
from flarestone.transformers.rank_finder.types import RankEntry


class RankExtractor:
    """Derives ranks from consecutive pages starting at page 1."""

    def __init__(self) -> None:
        self._tracker = RankTracker()

    def extract(self, pages: Sequence[RankedPage]) -> list[RankEntry]:
        if not pages:
            return []

        # Every page but the last is full
        if len(pages) > 1 and pages[0].members:
            self._tracker.set_page_size(len(pages[0].members))

        for page_number, page in enumerate(pages, start=1):
            self._tracker.extract_ranks_from_page(page, page_number)

        return self._tracker.ranks_sorted()


def extract_ranks_from_pages(pages: Sequence[RankedPage]) -> list[RankEntry]:
    return RankExtractor().extract(pages)
