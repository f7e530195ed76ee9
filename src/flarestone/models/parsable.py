# ABOUTME: Capability protocols that multi-page operations depend on instead of concrete schemas
# ABOUTME: Any record exposing pagination (and, for rank scans, ranked members) satisfies them

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PagedPage(Protocol):
    """A page record that knows where it sits in a paginated collection."""

    def get_current_page(self) -> int: ...

    def get_total_pages(self) -> int: ...

    def get_next_page_url(self) -> str | None: ...


class RankedMember(Protocol):
    """A list entry carrying a category with a name and an icon."""

    rank: Any


@runtime_checkable
class RankedPage(PagedPage, Protocol):
    """A paged record whose entries are sorted by rank."""

    members: Sequence[RankedMember]
