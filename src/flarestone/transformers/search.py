# ABOUTME: Character search query building and exact-name result filtering
# ABOUTME: Search can be narrowed to one world or a whole data center

from collections.abc import Iterable
from urllib.parse import urlencode

from flarestone.models.character import SearchResult


def build_search_params(
    name: str, *, world: str | None = None, datacenter: str | None = None, exact: bool = False
) -> str:
    """Encode search query parameters.

    An exact search quotes the name. A world filter wins over a data center filter.
    """
    query = f'"{name}"' if exact else name

    if world:
        worldname = world
    elif datacenter:
        worldname = f"_dc_{datacenter}"
    else:
        worldname = ""

    return urlencode({"q": query, "worldname": worldname})


def filter_exact_matches(results: Iterable[SearchResult], name: str) -> list[SearchResult]:
    """Keep results whose name equals ``name``, ignoring case."""
    wanted = name.lower()
    return [result for result in results if isinstance(result.name, str) and result.name.lower() == wanted]
