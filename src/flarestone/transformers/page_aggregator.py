# ABOUTME: Page aggregator: follows a paginated collection's next links into one item list
# ABOUTME: Fetches strictly one page at a time, bounded by page and item caps

import asyncio
from collections.abc import Callable, Sequence
from typing import Any, TypeVar
from urllib.parse import urljoin

from pydantic import BaseModel, ConfigDict, Field

from flarestone.engine import load_object_from_string
from flarestone.errors import FetchError
from flarestone.models.parsable import PagedPage
from flarestone.utils.fetch import FlarestoneClient
from flarestone.utils.logging import get_logger, with_operation_context

P = TypeVar("P", bound=PagedPage)
ItemT = TypeVar("ItemT")

logger = get_logger(__name__)


class PageAggregationOptions(BaseModel):
    """Caps and pacing for a multi-page walk. Unset caps mean unbounded."""

    max_pages: int | None = Field(default=None, ge=1, description="Stop after this many pages")
    max_items: int | None = Field(default=None, ge=0, description="Stop once this many items are collected")
    base_url: str | None = Field(default=None, description="Origin that relative next-page links resolve against")
    delay_ms: int = Field(default=0, ge=0, description="Pause between consecutive fetches")


class AggregationMetadata(BaseModel):
    total_pages: int = Field(description="Page count self-reported by the last page fetched")
    pages_fetched: int
    complete: bool = Field(description="True only when the walk ran out of pages without hitting a cap")


class AggregationResult(BaseModel):
    """Items and page records collected by one aggregation walk."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[Any] = Field(default_factory=list)
    pages: list[Any] = Field(default_factory=list)
    metadata: AggregationMetadata

    @property
    def total_pages(self) -> int:
        return self.metadata.total_pages

    @property
    def pages_fetched(self) -> int:
        return self.metadata.pages_fetched

    @property
    def complete(self) -> bool:
        return self.metadata.complete


def _resolve(next_url: str, current_url: str, base_url: str | None) -> str:
    if next_url.startswith(("http://", "https://")):
        return next_url
    return urljoin(base_url or current_url, next_url)


@with_operation_context("page aggregation")
async def aggregate_pages(
    initial_url: str,
    page_type: type[P],
    item_extractor: Callable[[P], Sequence[ItemT]],
    options: PageAggregationOptions | None = None,
    client: FlarestoneClient | None = None,
) -> AggregationResult:
    """Fetch and extract every page of a collection, following next-page links.

    Args:
        initial_url: URL of the first page
        page_type: Page schema implementing PagedPage
        item_extractor: Pulls the item list out of one page record
        options: Page/item caps, relative-URL base and inter-fetch delay
        client: Upstream client to reuse; one is created and closed if omitted

    Returns:
        AggregationResult with items trimmed to ``max_items``

    Raises:
        FetchError: On the first page that cannot be fetched; nothing partial is returned
    """
    options = options or PageAggregationOptions()
    owns_client = client is None
    client = client or FlarestoneClient()

    pages: list[P] = []
    items: list[ItemT] = []
    current_url = initial_url
    capped = False

    try:
        while True:
            response = await client.fetch(current_url)
            if not response.ok:
                raise FetchError(current_url, response.status)

            page = load_object_from_string(response.body, page_type)
            pages.append(page)
            items.extend(item_extractor(page) or [])

            logger.debug(
                "Aggregated page",
                url=current_url,
                pages_fetched=len(pages),
                items_collected=len(items),
            )

            if options.max_items is not None and len(items) >= options.max_items:
                capped = True
                break

            next_url = page.get_next_page_url()
            if not next_url:
                break

            if options.max_pages is not None and len(pages) >= options.max_pages:
                capped = True
                break

            current_url = _resolve(next_url, current_url, options.base_url)

            if options.delay_ms > 0:
                await asyncio.sleep(options.delay_ms / 1000)
    finally:
        if owns_client:
            await client.close()

    if options.max_items is not None:
        items = items[: options.max_items]

    metadata = AggregationMetadata(
        total_pages=pages[-1].get_total_pages() if pages else 0,
        pages_fetched=len(pages),
        complete=not capped,
    )
    logger.info(
        "Aggregation finished",
        total_pages=metadata.total_pages,
        pages_fetched=metadata.pages_fetched,
        items=len(items),
        complete=metadata.complete,
    )
    return AggregationResult(items=items, pages=pages, metadata=metadata)


async def aggregate_items(
    initial_url: str,
    page_type: type[P],
    item_extractor: Callable[[P], Sequence[ItemT]],
    options: PageAggregationOptions | None = None,
    client: FlarestoneClient | None = None,
) -> list[ItemT]:
    """Like aggregate_pages, returning only the collected items."""
    result = await aggregate_pages(initial_url, page_type, item_extractor, options, client)
    return result.items
