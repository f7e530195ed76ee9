# ABOUTME: Character page models
# ABOUTME: Re-exports the profile page and search results schemas

from .overview import CharacterPage
from .search import CharacterSearchPage, SearchResult

__all__ = ["CharacterPage", "CharacterSearchPage", "SearchResult"]
