# ABOUTME: Free company member list page: one entry per member with rank, class and grand company
# ABOUTME: Paged and rank-sorted, so it feeds both the page aggregator and the rank finder

import re

from flarestone.engine import Schema, serializer_property, xpath
from flarestone.models.common import MiniClassJobInfo, MiniGrandCompanyInfo, PagedSchema

WORLD_LABEL_PATTERN = re.compile(r"(?P<world>[A-Za-z]+)\s*\[(?P<datacenter>[A-Za-z]+)\]")


class RankInfo(Schema):
    """A member's free company rank: display name plus icon."""

    name: str = xpath("./span/text()")
    icon_url: str = xpath("./img/@src")


class MemberEntry(Schema):
    name: str = xpath(".//p[@class='entry__name']/text()")
    _world_info: str = xpath(".//p[@class='entry__world']/text()")
    lodestone_url: str = xpath(".//a[@class='entry__bg']/@href")
    avatar_url: str = xpath(".//div[@class='entry__chara__face']/img/@src")
    rank: RankInfo = xpath(".//ul[@class='entry__freecompany__info']/li[1]")
    class_job: MiniClassJobInfo = xpath(".//ul[@class='entry__freecompany__info']/li[2]")
    grand_company: MiniGrandCompanyInfo | None = xpath(
        ".//ul[@class='entry__freecompany__info']/li[3]", default=None, type=lambda: MiniGrandCompanyInfo
    )

    def _world_label(self, group: str) -> str | None:
        match = WORLD_LABEL_PATTERN.search(self._world_info) if isinstance(self._world_info, str) else None
        return match.group(group) if match else None

    @serializer_property(emplace_after="_world_info")
    def world(self) -> str | None:
        return self._world_label("world")

    @serializer_property(emplace_after="world")
    def datacenter(self) -> str | None:
        return self._world_label("datacenter")


class FreeCompanyMembers(PagedSchema):
    """One page of a free company's member list."""

    members: list[MemberEntry] = xpath(
        "//div[@class='ldst__window']/ul[not(@class)]/li[@class='entry']", type=lambda: MemberEntry, many=True
    )
