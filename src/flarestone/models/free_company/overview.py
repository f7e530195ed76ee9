# ABOUTME: Free company profile page schema and its component blocks
# ABOUTME: Covers identity, grand company standing, rankings, reputation, recruitment and estate

import re
from datetime import UTC, datetime

from flarestone.engine import MatchedElement, Schema, TransformStep, serializer_property, text_content, xpath
from flarestone.models.common import WorldInfo

GC_PATTERN = r"(?P<name>[A-Za-z ]+) <(?P<rank>[A-Za-z]+)"

ADDRESS_PATTERN = re.compile(
    r"Plot (?P<plot>\d+), (?P<ward>\d+) Ward, (?P<zone>[0-9a-zA-Z ]+) \((?P<size>[0-9a-zA-Z]+)\)"
)
ADDRESS_QUERY = (
    "//p[@class='freecompany__estate__title' and text()='Address']"
    "/following-sibling::p[@class='freecompany__estate__text']/text()"
)

STANDING_RANK_STEP = TransformStep(extract_regex=r"Rank:([0-9\-]+)", null_if="--", parse_number=True)

FORMED_PATTERN = re.compile(r"ldst_strftime\((\d+), 'YMD'\)")
REPUTATION_BAR_PATTERN = re.compile(r"width:\s*(\d+)%")

NOT_SPECIFIED = "Not specified"


class AffiliatedGrandCompany(Schema):
    """The grand company line, e.g. "Maelstrom <Respected>"."""

    _affiliated_gc: str = xpath("./text()")
    name: str | None = xpath(
        "./text()", transform=TransformStep(extract_regex=GC_PATTERN, capture_group="name", trim=True)
    )
    rank: str | None = xpath(
        "./text()", transform=TransformStep(extract_regex=GC_PATTERN, capture_group="rank", trim=True)
    )


class Standing(Schema):
    """Weekly and monthly ranking. Unranked companies show "--", which becomes null."""

    # Extracted as text so the transform sees "Rank:12" before it is parsed
    weekly: int | None = xpath(
        "//th[contains(text(), 'Weekly Rank')]/text()", type=lambda: str, transform=STANDING_RANK_STEP
    )
    monthly: int | None = xpath(
        "//th[contains(text(), 'Monthly Rank')]/text()", type=lambda: str, transform=STANDING_RANK_STEP
    )


class Reputation(Schema):
    """Standing with one grand company."""

    grand_company_name: str = xpath(".//p[@class='freecompany__reputation__gcname']/text()")
    _rank_element: MatchedElement = xpath(".//p[contains(@class, 'freecompany__reputation__rank')]")
    _reputation_bar_element: MatchedElement = xpath(
        ".//div[@class='freecompany__reputation__data']/div[@class='character__bar']/div"
    )

    @property
    def rank(self) -> int:
        # Second class token is "color_<rank id>"
        class_attr = self._rank_element.get("class", "")
        return int(class_attr.split(" ")[1].replace("color_", ""))

    @property
    def rank_name(self) -> str:
        return text_content(self._rank_element)

    @property
    def rank_progress(self) -> int | None:
        match = REPUTATION_BAR_PATTERN.search(self._reputation_bar_element.get("style", ""))
        return int(match.group(1)) if match else None


class Focus(Schema):
    name: str = xpath(".//p")
    icon_url: str = xpath(".//img/@src")


class SoughtRole(Schema):
    name: str = xpath(".//p")
    icon_url: str = xpath(".//img/@src")


class RecruitmentInfo(Schema):
    _active_times: str = xpath(".//h3[text()='Active']/following-sibling::p[@class='freecompany__text']/text()")
    _status: str = xpath(
        ".//h3[text()='Recruitment']/following-sibling::p[contains(@class, 'freecompany__text')]/text()"
    )
    foci: list[Focus] = xpath(
        ".//h3[text()='Focus']/following-sibling::ul[contains(@class, 'freecompany__focus_icon')]"
        "/li[not(@class='freecompany__focus_icon--off')]",
        type=lambda: Focus,
        many=True,
    )
    _seeking: list[SoughtRole] = xpath(
        ".//ul[contains(@class, 'freecompany__focus_icon--role')]/li[not(@class='freecompany__focus_icon--off')]",
        type=lambda: SoughtRole,
        many=True,
    )

    @property
    def active_times(self) -> str | None:
        return None if self._active_times == NOT_SPECIFIED else self._active_times

    @property
    def status(self) -> str | None:
        return None if self._status == NOT_SPECIFIED else self._status

    @property
    def seeking(self) -> list[SoughtRole] | None:
        return self._seeking if self._seeking else None


class EstateAddress(Schema):
    """Plot address. The page does not wrap estate data in a container, so queries are global."""

    plot: int = xpath(
        ADDRESS_QUERY,
        type=lambda: str,
        transform=TransformStep(extract_regex=ADDRESS_PATTERN, capture_group="plot", parse_number=True),
    )
    ward: int = xpath(
        ADDRESS_QUERY,
        type=lambda: str,
        transform=TransformStep(extract_regex=ADDRESS_PATTERN, capture_group="ward", parse_number=True),
    )
    zone: str = xpath(ADDRESS_QUERY, transform=TransformStep(extract_regex=ADDRESS_PATTERN, capture_group="zone"))
    _size: str = xpath(ADDRESS_QUERY, transform=TransformStep(extract_regex=ADDRESS_PATTERN, capture_group="size"))


class EstateInfo(Schema):
    name: str = xpath("//p[@class='freecompany__estate__name']/text()")
    greeting: str = xpath("//p[@class='freecompany__estate__greeting']/text()")
    address: EstateAddress = xpath(".")

    @property
    def size(self) -> str:
        return self.address._size


class FreeCompany(Schema):
    """A free company's profile page."""

    name: str = xpath("//p[@class='entry__freecompany__name']/text()")
    _tag: str = xpath("//p[contains(@class, 'freecompany__text__tag')]/text()")

    # Raw HTML for consumers to render
    slogan: str = xpath("//p[contains(@class, 'freecompany__text__message')]")

    _world_info: WorldInfo = xpath(
        "//p[@class='entry__freecompany__gc' and ./i[contains(@class, 'xiv-lds-home-world')]]"
    )
    affiliated_grand_company: AffiliatedGrandCompany = xpath(
        "//div[@class='entry__freecompany__box']/p[@class='entry__freecompany__gc'][1]"
    )
    _created_date_script: str = xpath(
        "//h3[text()='Formed']/following-sibling::p[@class='freecompany__text']"
        "/span[contains(@id, 'datetime-')]/following-sibling::script/text()"
    )
    active_member_count: int = xpath(
        "//h3[text()='Active Members']/following-sibling::p[@class='freecompany__text']/text()"
    )
    fc_rank: int = xpath("//h3[text()='Rank']/following-sibling::p[@class='freecompany__text']/text()")
    reputations: list[Reputation] = xpath(
        "//div[@class='ldst__window']/div[contains(@class, 'freecompany__reputation')]",
        type=lambda: Reputation,
        many=True,
    )
    standings: Standing = xpath("//table[contains(@class, 'character__ranking__data')]")
    recruitment_info: RecruitmentInfo = xpath("//div[@class='ldst__window' and ./h2[@id='anchor__focus']]")
    community_finder_url: str = xpath("//a[contains(@class, 'cf-member-link')]/@href")

    _no_estate_indicator: bool = xpath("//p[@class='freecompany__estate__none']")
    _estate_info: EstateInfo = xpath("//p[@class='freecompany__estate__name']")

    @property
    def tag(self) -> str:
        return re.sub(r"[«»]", "", self._tag)

    @serializer_property(emplace_after="_world_info")
    def world(self) -> str:
        return self._world_info.world

    @serializer_property(emplace_after="world")
    def datacenter(self) -> str:
        return self._world_info.datacenter

    @serializer_property(emplace_after="_created_date_script")
    def formed(self) -> datetime | None:
        match = FORMED_PATTERN.search(self._created_date_script)
        if not match:
            return None
        timestamp = int(match.group(1))
        return datetime.fromtimestamp(timestamp, tz=UTC) if timestamp else None

    @property
    def estate(self) -> EstateInfo | None:
        if self._no_estate_indicator:
            return None
        return self._estate_info
