# ABOUTME: Character profile page schema and its component blocks
# ABOUTME: Identity, home world, current class, grand company, free company, demographics and levels

from flarestone.engine import (
    EMPTY,
    UNSET,
    MatchedElement,
    Schema,
    TransformStep,
    inner_html,
    serializer_property,
    to_key_string,
    xpath,
)
from flarestone.models.common import CrestComponents, WorldInfo


class CurrentClass(Schema):
    level: int = xpath(
        "./p/text()", type=lambda: str, transform=TransformStep(extract_regex=r"LEVEL ([0-9]+)", parse_number=True)
    )
    icon_url: str = xpath("./div[@class='character__class_icon']/img/@src")


class GrandCompanyInfo(Schema):
    """Grand company block; the name line reads "Name / Rank"."""

    _gc_parse: str = xpath(".//p[@class='character-block__name']")
    name: str = xpath(
        ".//p[@class='character-block__name']",
        transform=TransformStep(function=lambda value: value.split("/")[0].strip()),
    )
    rank: str = xpath(
        ".//p[@class='character-block__name']",
        transform=TransformStep(function=lambda value: value.split("/")[1].strip()),
    )
    icon_url: str = xpath("./img/@src")


class FreeCompanyInfo(Schema):
    name: str = xpath(".//div[@class='character__freecompany__name']//a/text()")
    lodestone_url: str = xpath(".//div[@class='character__freecompany__name']//a/@href")
    id: str = xpath(
        ".//div[@class='character__freecompany__name']//a/@href",
        transform=TransformStep(extract_regex=r"(?i)/freecompany/(\d+)"),
    )
    crest: CrestComponents = xpath(".//div[@class='character__freecompany__crest__image']")


class RaceClanGenderInfo(Schema):
    """The "Race<br>Clan / Gender" block."""

    _rcg_parse: MatchedElement = xpath(".//p[@class='character-block__name']")

    def _lines(self) -> list[str]:
        return inner_html(self._rcg_parse).split("<br>")

    @property
    def race(self) -> str:
        return self._lines()[0].strip()

    @property
    def _clan_gender(self) -> str:
        return self._lines()[1].strip()

    @property
    def clan(self) -> str:
        return self._clan_gender.split("/")[0].strip()

    @property
    def gender(self) -> str:
        return "male" if self._clan_gender.split("/")[1].strip() == "♂" else "female"


class CityStateInfo(Schema):
    name: str = xpath(".//p[@class='character-block__name']")
    icon_url: str = xpath(".//img/@src")


class GuardianInfo(Schema):
    name: str = xpath(".//p[@class='character-block__name']")
    icon_url: str = xpath(".//img/@src")


class SlimLevel(Schema):
    """One class or job in the level list."""

    name: str = xpath(
        ".//img/@data-tooltip", transform=TransformStep(extract_regex=r"([A-Za-z ]+)( / [A-Za-z ]+)?", trim=True)
    )
    level: int = xpath("./text()")
    icon_url: str = xpath(".//img/@src")

    @property
    def _key(self) -> str:
        return to_key_string(self.name)


class CharacterPage(Schema):
    """A character's profile page."""

    name: str = xpath("//p[@class='frame__chara__name']/text()")
    title: str = xpath("//p[@class='frame__chara__title']/text()")
    _world_info: WorldInfo = xpath("//p[@class='frame__chara__world']")
    headshot_url: str = xpath("//div[@class='frame__chara__face']/img/@src")
    portrait_url: str = xpath("//div[@class='character__detail__image']/a/@href")
    current_class: CurrentClass = xpath("//div[@class='character__class__data']")
    grand_company: GrandCompanyInfo = xpath(
        "//p[@class='character-block__title' and text()='Grand Company']//ancestor::div[@class='character-block']"
    )
    free_company: FreeCompanyInfo = xpath(
        "//div[@class='character__freecompany__crest']//ancestor::div[@class='character-block']"
    )
    _rcg_info: RaceClanGenderInfo = xpath(
        "//p[@class='components-block__title' and text()='Race/Clan/Gender']//ancestor::div[@class='character-block']"
    )

    # Includes escaped HTML for clients to render
    bio: str = xpath("//div[@class='character__selfintroduction']")

    _levels: list[SlimLevel] | None = xpath(
        "//div[@class='character__level__list']/ul/li",
        type=lambda: SlimLevel,
        many=True,
        transform=TransformStep(undefined_if=EMPTY),
    )
    home_city: CityStateInfo = xpath(
        "//p[@class='character-block__title' and text()='City-state']//ancestor::div[@class='character-block']"
    )
    nameday: str = xpath(
        "//p[@class='character-block__title' and text()='Nameday']"
        "//following-sibling::p[@class='character-block__birth']/text()"
    )
    guardian: GuardianInfo = xpath(
        "//p[@class='character-block__title' and text()='Guardian']//ancestor::div[@class='character-block']"
    )

    @serializer_property(emplace_after="_world_info")
    def world(self) -> str:
        return self._world_info.world

    @serializer_property(emplace_after="world")
    def datacenter(self) -> str:
        return self._world_info.datacenter

    @serializer_property(emplace_after="_rcg_info")
    def race(self) -> str:
        return self._rcg_info.race

    @serializer_property(emplace_after="race")
    def clan(self) -> str:
        return self._rcg_info.clan

    @serializer_property(emplace_after="clan")
    def gender(self) -> str:
        return self._rcg_info.gender

    @property
    def levels(self):
        """Levels keyed by class name, e.g. ``PALADIN``; absent when the page lists none."""
        if not self._levels:
            return UNSET
        return {entry._key: entry for entry in self._levels}
