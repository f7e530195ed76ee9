# ABOUTME: Page and component schemas for Lodestone pages, declared on the extraction engine
# ABOUTME: Also defines the capability protocols multi-page operations depend on

"""
Models Layer: Record types describing where each value lives in a page

This layer provides:
- Page schemas (character, character search, free company, members, world status)
- Reusable components (pager, world label, grand company, crest)
- PagedPage / RankedPage capability protocols

Data Flow: engine.inject_into(document, PageType) → populated page record
"""

from .character import CharacterPage, CharacterSearchPage, SearchResult
from .common import Pager, PagedSchema, WorldInfo
from .free_company import FreeCompany, FreeCompanyMembers, MemberEntry, RankInfo
from .parsable import PagedPage, RankedPage
from .worldstatus import PhysicalDataCenter, WorldStatusPage

__all__ = [
    # Capabilities
    "PagedPage",
    "PagedSchema",
    "RankedPage",
    # Shared components
    "Pager",
    "WorldInfo",
    # Pages
    "CharacterPage",
    "CharacterSearchPage",
    "FreeCompany",
    "FreeCompanyMembers",
    "MemberEntry",
    "PhysicalDataCenter",
    "RankInfo",
    "SearchResult",
    "WorldStatusPage",
]
