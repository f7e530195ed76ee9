# ABOUTME: Character search results page schema
# ABOUTME: Paged list of matching characters with world, class, grand company and free company

from flarestone.engine import Schema, TransformStep, serializer_property, xpath
from flarestone.models.common import (
    MiniClassJobInfo,
    MiniFreeCompanyInfo,
    MiniGrandCompanyInfo,
    PagedSchema,
    WorldInfo,
)


class SearchResult(Schema):
    name: str = xpath(".//p[@class='entry__name']/text()")
    _world_info: WorldInfo = xpath(".//p[@class='entry__world']")
    id: str = xpath("./a[@class='entry__link']/@href", transform=TransformStep(extract_regex=r"/character/(\d+)/"))
    lodestone_url: str = xpath("./a[@class='entry__link']/@href")
    class_job: MiniClassJobInfo = xpath(".//ul[@class='entry__chara_info']/li[./i[@class='list__ic__class']]")
    grand_company: MiniGrandCompanyInfo | None = xpath(
        ".//ul[@class='entry__chara_info']/li[@class='js__tooltip']", default=None, type=lambda: MiniGrandCompanyInfo
    )
    free_company: MiniFreeCompanyInfo | None = xpath(
        "./a[@class='entry__freecompany__link']", default=None, type=lambda: MiniFreeCompanyInfo
    )
    avatar_url: str = xpath(".//div[@class='entry__chara__face']/img/@src")
    languages: list[str] = xpath(
        ".//div[@class='entry__chara__lang']/text()", transform=TransformStep(function=lambda value: value.split("/"))
    )

    @serializer_property(emplace_after="name")
    def world(self) -> str:
        return self._world_info.world

    @serializer_property(emplace_after="world")
    def datacenter(self) -> str:
        return self._world_info.datacenter


class CharacterSearchPage(PagedSchema):
    """One page of character search results."""

    results: list[SearchResult] = xpath("//div[@class='entry']", type=lambda: SearchResult, many=True)
