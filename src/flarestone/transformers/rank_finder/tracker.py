# ABOUTME: Rank tracker shared by the fetcher and the extractor
# ABOUTME: Deduplicates ranks, counts members and remembers first-seen order across pages

from typing import Any

from flarestone.engine import UNSET, is_empty
from flarestone.models.parsable import RankedPage
from flarestone.transformers.rank_finder.types import RankEntry, RankTracking
from flarestone.transformers.rank_finder.utils import rank_key

DEFAULT_PAGE_SIZE = 50
ORDINAL_BASE = 100


def _optional_text(value: Any) -> str | None:
    return None if value is None or value is UNSET else str(value)


class RankTracker:
    """Accumulates rank sightings for a single scan."""

    def __init__(self) -> None:
        self._ranks: dict[str, RankTracking] = {}
        self._page_size: int | None = None

    def set_page_size(self, size: int) -> None:
        """Record the member count of a full page. Only the first call takes effect."""
        if self._page_size is None:
            self._page_size = size

    @property
    def page_size(self) -> int:
        return self._page_size if self._page_size is not None else DEFAULT_PAGE_SIZE

    def ordinal(self, page: int, position: int) -> int:
        return ORDINAL_BASE + (page - 1) * self.page_size + position

    def update_rank(self, rank: Any, page: int, ordinal: int) -> None:
        key = rank_key(rank)
        existing = self._ranks.get(key)

        if existing is None:
            self._ranks[key] = RankTracking(
                name=_optional_text(rank.name) or "",
                icon_url=_optional_text(rank.icon_url),
                member_count=1,
                first_seen_page=page,
                last_seen_page=page,
                first_seen_ordinal=ordinal,
            )
            return

        if ordinal < existing.first_seen_ordinal:
            existing.first_seen_page = page
            existing.first_seen_ordinal = ordinal
        existing.last_seen_page = max(existing.last_seen_page, page)
        existing.member_count += 1

    def extract_ranks_from_page(self, page: RankedPage, page_number: int) -> None:
        for position, member in enumerate(page.members or []):
            rank = getattr(member, "rank", None)
            if is_empty(rank):
                continue
            self.update_rank(rank, page_number, self.ordinal(page_number, position))

    def ranks_sorted(self) -> list[RankEntry]:
        ordered = sorted(self._ranks.values(), key=lambda rank: rank.first_seen_ordinal)
        return [RankEntry(name=rank.name, icon_url=rank.icon_url, member_count=rank.member_count) for rank in ordered]
