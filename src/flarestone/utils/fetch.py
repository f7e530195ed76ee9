# ABOUTME: Upstream HTTP client built on httpx with tenacity retries on transport failures
# ABOUTME: Every page fetch in the engine, aggregator and rank finder goes through FlarestoneClient

import httpx
from pydantic import BaseModel
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from flarestone.config import get_config
from flarestone.errors import FetchError
from flarestone.utils.logging import get_logger, log_api_call

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/141.0.0.0 Safari/537.36 (compatible; Flarestone/0.3; +https://xivauth.net/flarestone)"
)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 18_6 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/26.0 Mobile/15E148 Safari/604.1 "
    "(compatible; Flarestone/0.3; +https://xivauth.net/flarestone)"
)


class FetchResponse(BaseModel):
    """Status and body of one upstream page."""

    url: str
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class FlarestoneClient:
    """Thin async wrapper around httpx that applies the scraper's User-Agent and retry policy.

    HTTP error statuses are returned as-is; only transport failures are retried and, once
    retries are exhausted, raised as FetchError.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        mobile: bool | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        config = get_config()
        use_mobile = config.use_mobile_agent if mobile is None else mobile

        self.user_agent = MOBILE_USER_AGENT if use_mobile else DESKTOP_USER_AGENT
        self.max_retries = max_retries or config.max_retries
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={"User-Agent": self.user_agent},
            timeout=timeout or config.request_timeout,
            follow_redirects=True,
        )
        self.logger = get_logger(__name__)

    async def __aenter__(self) -> "FlarestoneClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchResponse:
        """Fetch a page, returning its status and decoded body.

        Raises:
            FetchError: If the request could not be completed after all retries
        """
        request_headers = {"User-Agent": self.user_agent, **(headers or {})}

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=0.2, min=0.2, max=2.0),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    return await self._get(url, request_headers)
        except httpx.TransportError as e:
            raise FetchError(url, message=f"{type(e).__name__}: {e}") from e

        raise FetchError(url, message="no attempt was made")

    @log_api_call("lodestone")
    async def _get(self, url: str, headers: dict[str, str]) -> FetchResponse:
        self.logger.debug("Fetching URL", url=url)
        response = await self.http_client.get(url, headers=headers)
        return FetchResponse(url=str(response.url), status=response.status_code, body=response.text)
