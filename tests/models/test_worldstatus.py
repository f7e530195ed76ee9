# ABOUTME: Tests for the world status page schema
# ABOUTME: Region names are looked up from the tab strip outside each region pane

import pytest

from flarestone.engine import load_object_from_string, serialize
from flarestone.models import WorldStatusPage


def render_world(name: str, status: str, category: str, creation: str) -> str:
    return (
        '<li class="item-list">'
        '<div class="world-list__item">'
        f'<div class="world-list__status_icon"><i class="world-ic__1 js__tooltip" data-tooltip=" {status} "></i></div>'
        f'<div class="world-list__world_name"><p> {name} </p></div>'
        f'<div class="world-list__world_category"><p>{category}</p></div>'
        f'<div class="world-list__create_character"><i class="world-ic__{creation} js__tooltip"></i></div>'
        "</div>"
        "</li>"
    )


WORLD_STATUS_PAGE = (
    "<html><body>"
    '<ul class="world__tab js--tab-buttons">'
    '<li data-region="1"><a href="#"><span>Japan</span></a></li>'
    '<li data-region="2"><a href="#"><span> North America </span></a></li>'
    "</ul>"
    '<div class="world__content js--tab-content" data-region="2">'
    "<ul>"
    '<li class="world-dcgroup__item">'
    '<h2 class="world-dcgroup__header">Aether</h2>'
    "<ul>"
    + render_world("Gilgamesh", "Online", "Congested", "unavailable")
    + render_world("Adamantoise", "Online", "Standard", "available")
    + "</ul>"
    "</li>"
    '<li class="world-dcgroup__item">'
    '<h2 class="world-dcgroup__header">Dynamis</h2>'
    "<ul>"
    + render_world("Halicarnassus", "Maintenance", "--", "available")
    + "</ul>"
    "</li>"
    "</ul>"
    "</div>"
    "</body></html>"
)


@pytest.fixture
def page() -> WorldStatusPage:
    return load_object_from_string(WORLD_STATUS_PAGE, WorldStatusPage)


class TestWorldStatusPage:
    """Test regions, data centers and worlds."""

    def test_structure(self, page):
        """Test the region tree."""
        region = page.regions[0]

        assert len(page.regions) == 1
        assert region.id == 2
        assert region.name == "North America"
        assert [dc.name for dc in region.data_centers] == ["Aether", "Dynamis"]
        assert [world.name for world in region.data_centers[0].worlds] == ["Gilgamesh", "Adamantoise"]

    def test_world_fields(self, page):
        """Test that world text is trimmed and creation availability is a flag."""
        gilgamesh, adamantoise = page.regions[0].data_centers[0].worlds

        assert gilgamesh.status == "Online"
        assert gilgamesh.category == "Congested"
        assert gilgamesh.creation_open is False
        assert adamantoise.creation_open is True

    def test_uncategorized_world(self, page):
        """Test that a "--" category becomes null."""
        world = page.regions[0].data_centers[1].worlds[0]

        assert world.category is None
        assert world.status == "Maintenance"

    def test_serialized_region(self, page):
        """Test that the region name follows its id."""
        region = serialize(page)["regions"][0]

        assert list(region) == ["id", "name", "data_centers"]
        assert region["data_centers"][0]["worlds"][0] == {
            "name": "Gilgamesh",
            "status": "Online",
            "category": "Congested",
            "creation_open": False,
        }

    def test_unknown_region_name(self):
        """Test the fallback when the tab strip has no entry for a region."""
        html = WORLD_STATUS_PAGE.replace('data-region="2"><a', 'data-region="9"><a')
        page = load_object_from_string(html, WorldStatusPage)

        assert page.regions[0].name == "Unknown"
