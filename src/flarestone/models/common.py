# ABOUTME: Shared page components used across character and free company schemas
# ABOUTME: Pager drives pagination; world, grand company, class and crest blocks are reused widely

import re

from flarestone.engine import Schema, TransformStep, xpath

PAGER_PATTERN = re.compile(r"Page (?P<current>\d+) of (?P<total>\d+)")


def _split_part(index: int):
    def pick(value: str) -> str:
        return value.split("/")[index].strip()

    return pick


class Pager(Schema):
    """The "Page X of Y" control with its navigation links."""

    page_text: str = xpath(".//li[@class='btn__pager__current']/text()")

    first_page_url: str = xpath(".//a[contains(@class, 'btn__pager__prev--all')]/@href")
    previous_page_url: str = xpath(".//a[contains(@class, 'btn__pager__prev')]/@href")
    next_page_url: str = xpath(".//a[contains(@class, 'btn__pager__next')]/@href")
    last_page_url: str = xpath(".//a[contains(@class, 'btn__pager__next--all')]/@href")

    def _page_match(self, group: str) -> int:
        match = PAGER_PATTERN.search(self.page_text) if isinstance(self.page_text, str) else None
        return int(match.group(group)) if match else 1

    @property
    def current_page(self) -> int:
        return self._page_match("current")

    @property
    def total_pages(self) -> int:
        return self._page_match("total")

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    def get_next_page_url(self) -> str | None:
        if not self.has_next_page:
            return None
        return self.next_page_url or None


class PagedSchema(Schema):
    """Base for page records carrying a pager; implements PagedPage."""

    _pager: Pager = xpath("//ul[@class='btn__pager']")

    def _resolved_pager(self) -> Pager:
        # Pages without a pager control are a single page
        return self._pager or Pager()

    def get_current_page(self) -> int:
        return self._resolved_pager().current_page

    def get_total_pages(self) -> int:
        return self._resolved_pager().total_pages

    def get_next_page_url(self) -> str | None:
        return self._resolved_pager().get_next_page_url()

    @property
    def pagination(self) -> dict:
        return {
            "current_page": self.get_current_page(),
            "total_pages": self.get_total_pages(),
            "next_page_url": self.get_next_page_url(),
        }


class WorldInfo(Schema):
    """A "World [Data Center]" label."""

    world: str = xpath(
        "./text()[last()]", transform=TransformStep(extract_regex=r"([A-Za-z]+) \[[A-Za-z]+\]")
    )
    datacenter: str = xpath(
        "./text()[last()]", transform=TransformStep(extract_regex=r"[A-Za-z]+ \[([A-Za-z]+)\]")
    )


class MiniGrandCompanyInfo(Schema):
    """Grand company icon with a "Name / Rank" tooltip."""

    _gc_parse: str = xpath("./@data-tooltip")
    name: str = xpath("./@data-tooltip", transform=TransformStep(function=_split_part(0)))
    rank: str = xpath("./@data-tooltip", transform=TransformStep(function=_split_part(1)))
    icon_url: str = xpath("./img/@src")


class MiniClassJobInfo(Schema):
    level: int = xpath("./span/text()")
    icon_url: str = xpath("./i[@class='list__ic__class']/img/@src")


class MiniFreeCompanyInfo(Schema):
    lodestone_url: str = xpath("./@href")
    name: str = xpath("./span/text()")


class CrestComponents(Schema):
    """The three stacked layers of a free company crest."""

    background: str = xpath(".//img[1]/@src")
    frame: str = xpath(".//img[2]/@src")
    symbol: str = xpath(".//img[3]/@src")
