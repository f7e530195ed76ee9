# ABOUTME: Operations layered on top of the extraction engine
# ABOUTME: Multi-page aggregation, rank discovery, availability classification and output reshaping

"""
Transformers Layer: Multi-page walks and post-processing of extracted records

This layer handles:
- Aggregating paginated collections into one item list
- Discovering free company ranks with as few fetches as possible
- Classifying single-record page availability from content and status
- Reshaping world status and building character search queries

Data Flow: FlarestoneClient.fetch → engine extraction → transformer → serialize
"""

from .page_aggregator import (
    AggregationMetadata,
    AggregationResult,
    PageAggregationOptions,
    aggregate_items,
    aggregate_pages,
)
from .rank_finder import RankSearchOptions, extract_ranks_from_pages, find_free_company_ranks
from .scrape_meta import (
    PageResult,
    ScrapeMeta,
    ScrapeResult,
    detect_availability,
    fetch_page_with_meta,
    load_page_with_meta,
    status_code_for,
)
from .search import build_search_params, filter_exact_matches
from .worldstatus_flattener import FlattenedWorldStatus, flatten_world_status

__all__ = [
    # Aggregation
    "AggregationMetadata",
    "AggregationResult",
    "PageAggregationOptions",
    "aggregate_items",
    "aggregate_pages",
    # Ranks
    "RankSearchOptions",
    "extract_ranks_from_pages",
    "find_free_company_ranks",
    # Availability
    "PageResult",
    "ScrapeMeta",
    "ScrapeResult",
    "detect_availability",
    "fetch_page_with_meta",
    "load_page_with_meta",
    "status_code_for",
    # Reshaping
    "FlattenedWorldStatus",
    "build_search_params",
    "filter_exact_matches",
    "flatten_world_status",
]
