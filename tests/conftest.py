# ABOUTME: Shared fixtures building Lodestone-shaped HTML pages and mock upstream clients
# ABOUTME: Multi-page tests route requests through httpx.MockTransport and record what was fetched

from collections.abc import Callable
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from flarestone.config import reload_config
from flarestone.utils.fetch import FlarestoneClient

BASE_URL = "https://na.finalfantasyxiv.com"


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate every test from the developer's environment."""
    for name in (
        "FLARESTONE_BASE_URL",
        "FLARESTONE_MAX_RETRIES",
        "FLARESTONE_USE_MOBILE_AGENT",
        "FLARESTONE_REQUEST_DELAY_MS",
        "FLARESTONE_PRELOAD_PAGES",
        "FLARESTONE_LOG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    monkeypatch.undo()
    reload_config()


def render_pager(current: int, total: int, next_href: str | None) -> str:
    next_link = (
        f'<li><a href="{next_href}" class="icon-list__pager btn__pager__next js__tooltip"></a></li>' if next_href else ""
    )
    return (
        '<ul class="btn__pager">'
        f'<li class="btn__pager__current">Page {current} of {total}</li>'
        f"{next_link}"
        "</ul>"
    )


def render_member(index: int, rank: str) -> str:
    return (
        '<li class="entry">'
        f'<a class="entry__bg" href="/lodestone/character/{index}/"></a>'
        f'<div class="entry__chara__face"><img src="https://img.example/face{index}.jpg"></div>'
        f'<p class="entry__name">Member {index}</p>'
        '<p class="entry__world">Gilgamesh [Aether]</p>'
        '<ul class="entry__freecompany__info">'
        f'<li><img src="https://img.example/{rank.lower()}.png"><span>{rank}</span></li>'
        '<li><i class="list__ic__class"><img src="https://img.example/job.png"></i><span>90</span></li>'
        "</ul>"
        "</li>"
    )


def render_members_page(
    ranks: list[str], current: int, total: int, first_index: int = 1, fc_id: str = "9231"
) -> str:
    """A member list page whose entries hold the given ranks in order."""
    next_href = f"/lodestone/freecompany/{fc_id}/member?page={current + 1}" if current < total else None
    entries = "".join(render_member(first_index + offset, rank) for offset, rank in enumerate(ranks))
    return (
        "<html><body>"
        '<div class="ldst__window">'
        f"{render_pager(current, total, next_href)}"
        f"<ul>{entries}</ul>"
        "</div>"
        "</body></html>"
    )


def page_number(request: httpx.Request) -> int:
    values = parse_qs(urlparse(str(request.url)).query).get("page")
    return int(values[0]) if values else 1


class RecordingUpstream:
    """Serves pages by number and remembers the order they were requested in."""

    def __init__(self, pages: dict[int, str], failing: dict[int, int] | None = None):
        self.pages = pages
        self.failing = failing or {}
        self.requested: list[int] = []
        self.urls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        number = page_number(request)
        self.requested.append(number)
        self.urls.append(str(request.url))
        if number in self.failing:
            return httpx.Response(self.failing[number], text="upstream error")
        if number not in self.pages:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=self.pages[number])

    def client(self) -> FlarestoneClient:
        return FlarestoneClient(httpx.AsyncClient(transport=httpx.MockTransport(self.handler)), max_retries=1)


@pytest.fixture
def members_page() -> Callable[..., str]:
    return render_members_page


@pytest.fixture
def ranked_upstream() -> Callable[..., RecordingUpstream]:
    """Build an upstream member list from one rank list per page."""

    def build(page_ranks: list[list[str]], failing: dict[int, int] | None = None) -> RecordingUpstream:
        total = len(page_ranks)
        pages = {}
        index = 1
        for number, ranks in enumerate(page_ranks, start=1):
            pages[number] = render_members_page(ranks, number, total, first_index=index)
            index += len(ranks)
        return RecordingUpstream(pages, failing)

    return build
