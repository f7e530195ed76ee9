# ABOUTME: Helpers for comparing ranks and reading them off member list pages
# ABOUTME: Ranks are identified by name plus icon URL

from typing import Any

from flarestone.engine import is_empty
from flarestone.models.parsable import RankedPage


def rank_key(rank: Any) -> str:
    return f"{rank.name}|{rank.icon_url}"


def rank_at(page: RankedPage, index: int) -> Any | None:
    """Rank of the member at ``index`` (negative counts from the end), or None."""
    members = page.members or []
    if not members:
        return None
    try:
        rank = getattr(members[index], "rank", None)
    except IndexError:
        return None
    return None if is_empty(rank) else rank


def same_rank(first: Any | None, second: Any | None) -> bool:
    """True when both ranks are present and identical. A missing rank never matches."""
    if first is None or second is None:
        return False
    return rank_key(first) == rank_key(second)
