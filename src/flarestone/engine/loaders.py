# ABOUTME: Convenience loaders that fetch or read HTML and run it through the extraction engine
# ABOUTME: Single-page loads surface upstream failures to the caller as FetchError

from pathlib import Path
from typing import TypeVar

from flarestone.engine.injector import inject_into
from flarestone.engine.nodes import parse_html
from flarestone.engine.rules import schema_registry
from flarestone.errors import ExtractionError, FetchError
from flarestone.utils.fetch import FlarestoneClient

T = TypeVar("T")


def load_object_from_string(html: str, target_type: type[T]) -> T:
    """Load a record from an HTML string.

    Raises:
        ExtractionError: If ``target_type`` declares no extraction rules
    """
    if not schema_registry.is_schema_type(target_type):
        raise ExtractionError(f"{getattr(target_type, '__name__', target_type)} declares no extraction rules")
    return inject_into(parse_html(html), target_type)


def deserialize(target_type: type[T], html: str) -> T:
    """Alias for load_object_from_string with the type first."""
    return load_object_from_string(html, target_type)


def load_object_from_file(path: str | Path, target_type: type[T]) -> T:
    """Load a record from an HTML file on disk."""
    html = Path(path).read_text(encoding="utf-8")
    return load_object_from_string(html, target_type)


async def load_object_from_url(
    url: str,
    target_type: type[T],
    client: FlarestoneClient | None = None,
    headers: dict[str, str] | None = None,
) -> T:
    """Fetch a page and load a record from it.

    Raises:
        FetchError: If the page could not be fetched or returned a non-2xx status
    """
    owns_client = client is None
    client = client or FlarestoneClient()

    try:
        response = await client.fetch(url, headers=headers)
    finally:
        if owns_client:
            await client.close()

    if not response.ok:
        raise FetchError(url, response.status)

    return load_object_from_string(response.body, target_type)
