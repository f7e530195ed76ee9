# ABOUTME: Data types for rank discovery: result entries, per-call tracking state and options
# ABOUTME: Results are pydantic models so they serialize straight to JSON

from pydantic import BaseModel, Field


class RankEntry(BaseModel):
    """A distinct rank and how many members were seen holding it."""

    name: str
    icon_url: str | None = None
    member_count: int = Field(
        description="Members counted on fetched pages only; a lower bound when pages were skipped"
    )


class RankTracking(BaseModel):
    """Running state for one rank during a scan."""

    name: str
    icon_url: str | None = None
    member_count: int = 0
    first_seen_page: int
    last_seen_page: int
    first_seen_ordinal: int


class RankSearchOptions(BaseModel):
    base_url: str | None = Field(
        default=None, description="Origin to build member list URLs on; config default if unset"
    )
    delay_ms: int = Field(default=50, ge=0, description="Pause after every page actually fetched")
    preload_pages: int = Field(
        default=2,
        ge=1,
        description=(
            "Upper bound on pages fetched in order before boundary search. Preloading stops early once the "
            "latest page's last rank matches the final page's first rank."
        ),
    )


class RankSearchResultMetadata(BaseModel):
    total_pages: int
    pages_checked: list[int] = Field(description="Page numbers actually fetched, ascending")


class RankSearchResult(BaseModel):
    ranks: list[RankEntry]
    metadata: RankSearchResultMetadata
