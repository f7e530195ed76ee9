# ABOUTME: World status page schema: regions, their logical data centers and each world's state
# ABOUTME: Regions are tab panes; the region name lives in the tab strip elsewhere in the document

from flarestone.engine import MatchedElement, Schema, TransformStep, serializer_property, xpath

TRIM = TransformStep(trim=True)


class World(Schema):
    name: str = xpath("./div[@class='world-list__world_name']/p/text()", transform=TRIM)
    status: str = xpath("./div[@class='world-list__status_icon']/i/@data-tooltip", transform=TRIM)
    category: str | None = xpath(
        "./div[@class='world-list__world_category']/p/text()", transform=TransformStep(trim=True, null_if="--")
    )
    _creation_open: str | None = xpath(
        "./div[@class='world-list__create_character']/i/@class",
        transform=TransformStep(extract_regex=r"world-ic__(available|unavailable)", null_if="--"),
    )

    @property
    def creation_open(self) -> bool | None:
        if self._creation_open is None:
            return None
        return self._creation_open == "available"


class LogicalDataCenter(Schema):
    name: str = xpath(".//h2[@class='world-dcgroup__header']/text()")
    worlds: list[World] = xpath(
        ".//li[contains(@class, 'item-list')]/div[@class='world-list__item']", type=lambda: World, many=True
    )


class PhysicalDataCenter(Schema):
    """A region tab pane, e.g. North America."""

    _node: MatchedElement = xpath(".")
    id: int = xpath("./@data-region")
    data_centers: list[LogicalDataCenter] = xpath(
        ".//li[@class='world-dcgroup__item']", type=lambda: LogicalDataCenter, many=True
    )

    @serializer_property(emplace_after="id")
    def name(self) -> str:
        query = f"//ul[@class='world__tab js--tab-buttons']/li[@data-region='{self.id}']/a/span/text()"
        match = self._node.getroottree().xpath(query)
        return str(match[0]).strip() if match else "Unknown"


class WorldStatusPage(Schema):
    regions: list[PhysicalDataCenter] = xpath(
        "//div[contains(@class, 'js--tab-content') and @data-region]", type=lambda: PhysicalDataCenter, many=True
    )
