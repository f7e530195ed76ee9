# ABOUTME: Exception hierarchy shared by the engine, fetch client and transformers
# ABOUTME: Fetch failures carry the URL and upstream status so callers can map them

class FlarestoneError(Exception):
    """Base exception for all flarestone errors."""

    pass


class FetchError(FlarestoneError):
    """Raised when an upstream page cannot be fetched or returns a non-2xx status."""

    def __init__(self, url: str, status: int | None = None, message: str | None = None):
        self.url = url
        self.status = status
        detail = message or (f"HTTP {status}" if status is not None else "transport error")
        super().__init__(f"Failed to fetch {url}: {detail}")


class ExtractionError(FlarestoneError):
    """Raised when a document cannot be turned into a record at all."""

    pass
