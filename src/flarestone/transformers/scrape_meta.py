# ABOUTME: Availability classifier: maps page content and upstream status to a semantic result
# ABOUTME: Also maps that result to the outward status code and loads a page together with its result

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from flarestone.engine import load_object_from_string
from flarestone.utils.fetch import FetchResponse, FlarestoneClient
from flarestone.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

MAINTENANCE_MARKER = "The Lodestone is currently down for maintenance"

# FIXME: Plain substring match; a player can put this text in their own profile and be misreported as private.
PRIVATE_PROFILE_MARKER = "This character's profile is private"


class ScrapeResult(str, Enum):
    """Outcome of loading a single-record page."""

    SUCCESS = "success"
    PRIVATE = "profile_private"
    HIDDEN = "character_hidden"
    NOT_FOUND = "not_found"
    MAINTENANCE = "maintenance"
    ERROR = "error"


class ScrapeMeta(BaseModel):
    result_code: ScrapeResult
    upstream_status_code: int | None = None


class PageResult(BaseModel, Generic[T]):
    """A page record plus its availability result and the status to answer with."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    scrape_meta: ScrapeMeta
    response_status_code: int


def detect_availability(html: str, status_code: int) -> ScrapeMeta:
    """Classify a fetched page. The first matching rule wins."""
    if status_code == 403:
        result = ScrapeResult.HIDDEN
    elif status_code == 404:
        result = ScrapeResult.NOT_FOUND
    elif status_code in (502, 503) and MAINTENANCE_MARKER in html:
        result = ScrapeResult.MAINTENANCE
    elif status_code >= 400:
        result = ScrapeResult.ERROR
    elif status_code == 200 and PRIVATE_PROFILE_MARKER in html:
        result = ScrapeResult.PRIVATE
    else:
        result = ScrapeResult.SUCCESS

    return ScrapeMeta(result_code=result, upstream_status_code=status_code)


def status_code_for(result: ScrapeResult, original_status: int | None = None) -> int:
    """Status code to report outward for a scrape result."""
    match result:
        case ScrapeResult.SUCCESS | ScrapeResult.PRIVATE:
            return 200
        case ScrapeResult.HIDDEN:
            return 403
        case ScrapeResult.NOT_FOUND:
            return 404
        case ScrapeResult.MAINTENANCE:
            return 503
        case ScrapeResult.ERROR:
            return original_status if original_status is not None and original_status >= 400 else 500
    return 200


def load_page_with_meta(response: FetchResponse, target_type: type[T]) -> PageResult[T]:
    """Classify a fetched page and extract it.

    Data is extracted whatever the result, since private profiles still carry some fields.
    """
    meta = detect_availability(response.body, response.status)
    data = load_object_from_string(response.body, target_type)

    if meta.result_code is not ScrapeResult.SUCCESS:
        logger.warning(
            "Page not fully available",
            url=response.url,
            result_code=meta.result_code.value,
            upstream_status_code=meta.upstream_status_code,
        )

    return PageResult(
        data=data,
        scrape_meta=meta,
        response_status_code=status_code_for(meta.result_code, meta.upstream_status_code),
    )


async def fetch_page_with_meta(
    url: str, target_type: type[T], client: FlarestoneClient | None = None
) -> PageResult[T]:
    """Fetch a single-record page and load it with its availability result.

    Raises:
        FetchError: Only when the request itself fails; HTTP error statuses are classified instead
    """
    owns_client = client is None
    client = client or FlarestoneClient()
    try:
        response = await client.fetch(url)
    finally:
        if owns_client:
            await client.close()

    return load_page_with_meta(response, target_type)
