# ABOUTME: Tests for the serializer producing ordered, cycle-safe wire representations
# ABOUTME: Covers computed field placement, internal fields, node rendering, idempotence and cycles

import copy
import json
import math
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel

from flarestone.engine import (
    UNSET,
    MatchedElement,
    Schema,
    load_object_from_string,
    parse_number,
    serialize,
    serializer_property,
    to_key_string,
    xpath,
)


class Ordered:
    def __init__(self):
        self.a = 1
        self.b = 2

    @serializer_property(emplace_after="a")
    def c(self):
        return 3


class WithPrivate:
    def __init__(self):
        self._secret = "hidden"
        self.visible = "shown"
        self._tag = "«TAG»"

    @property
    def tag(self):
        return self._tag.strip("«»")

    @property
    def appended(self):
        return "last"

    @serializer_property(internal=True)
    def internal_only(self):
        return "never"

    @serializer_property(key="renamed")
    def original_name(self):
        return "value"

    @property
    def _private_getter(self):
        return "never"


class Color(Enum):
    RED = "red"


class Point(BaseModel):
    x: int
    y: int


class Card(Schema):
    name: str = xpath("//h1/text()")
    flavor: MatchedElement = xpath("//div[@class='flavor']")
    power: int = xpath("//p[@class='power']/text()")
    missing: str = xpath("//p[@class='missing']/text()")


CARD_HTML = '<h1>Bahamut</h1><div class="flavor">Dragon <i>king</i></div><p class="power">9</p>'


class TestOrdering:
    """Test key placement of stored and computed fields."""

    def test_emplace_after(self):
        """Test that a computed field declared after "a" lands between a and b."""
        assert list(serialize(Ordered())) == ["a", "c", "b"]

    def test_private_field_replaced_by_public_computed(self):
        """Test that _tag is dropped and tag takes its slot."""
        output = serialize(WithPrivate())

        assert list(output) == ["visible", "tag", "appended", "renamed"]
        assert output["tag"] == "TAG"

    def test_internal_and_underscore_getters_dropped(self):
        """Test visibility rules for computed fields."""
        output = serialize(WithPrivate())

        assert "internal_only" not in output
        assert "_private_getter" not in output
        assert "_secret" not in output

    def test_alternate_key(self):
        """Test that key= renames the output key."""
        output = serialize(WithPrivate())

        assert output["renamed"] == "value"
        assert "original_name" not in output

    def test_chained_emplacement(self):
        """Test that a computed field can follow another computed field."""

        class Entry:
            def __init__(self):
                self.name = "Thancred"
                self._world_info = "Gilgamesh [Aether]"
                self.level = 90

            @serializer_property(emplace_after="world")
            def datacenter(self):
                return "Aether"

            @serializer_property(emplace_after="name")
            def world(self):
                return "Gilgamesh"

        assert list(serialize(Entry())) == ["name", "world", "datacenter", "level"]

    def test_order_is_stable(self):
        """Test that repeated serialization keeps the same order."""
        assert json.dumps(serialize(WithPrivate())) == json.dumps(serialize(WithPrivate()))


class TestValues:
    """Test conversion of individual values."""

    def test_nodes_render_as_markup(self):
        """Test that element fields never leak the tree."""
        output = serialize(load_object_from_string(CARD_HTML, Card))

        assert output["flavor"] == "Dragon <i>king</i>"

    def test_unset_fields_omitted_and_none_kept(self):
        """Test absent vs null."""

        class Holder:
            def __init__(self):
                self.gone = UNSET
                self.null = None

        assert serialize(Holder()) == {"null": None}

    def test_unset_in_list_becomes_null(self):
        """Test that list positions are preserved."""
        assert serialize([1, UNSET, 3]) == [1, None, 3]

    def test_nan_becomes_null(self):
        """Test the not-a-number marker."""
        assert serialize({"rank": math.nan}) == {"rank": None}

    def test_infinity_becomes_null(self):
        """Test that infinite floats from parsed text stay strict-JSON encodable."""

        class Score(Schema):
            value: float = xpath("//span/text()")

        record = load_object_from_string("<html><body><span>Infinity</span></body></html>", Score)
        output = serialize({"value": record.value, "low": -math.inf, "huge": parse_number("1e999")})

        assert output == {"value": None, "low": None, "huge": None}
        assert json.dumps(output, allow_nan=False) == '{"value": null, "low": null, "huge": null}'

    def test_enum_date_and_model(self):
        """Test enum values, dates and pydantic models."""
        output = serialize(
            {"color": Color.RED, "when": datetime(2020, 1, 2, tzinfo=UTC), "point": Point(x=1, y=2)}
        )

        assert output == {"color": "red", "when": "2020-01-02T00:00:00+00:00", "point": {"x": 1, "y": 2}}

    def test_to_json_hook(self):
        """Test that a custom hook takes over completely."""

        class Custom:
            def __init__(self):
                self.ignored = True

            def to_json(self):
                return "custom"

        assert serialize({"value": Custom()}) == {"value": "custom"}

    def test_raising_getter_skipped(self):
        """Test that getters which raise are left out."""

        class Broken:
            def __init__(self):
                self.ok = 1

            @property
            def bad(self):
                raise AttributeError("no")

        assert serialize(Broken()) == {"ok": 1}

    def test_tuples_and_sets_become_lists(self):
        """Test sequence conversion."""
        assert serialize((1, 2)) == [1, 2]
        assert serialize({"a"}) == ["a"]


class TestSafety:
    """Test idempotence, immutability and cycles."""

    def test_idempotent_output(self):
        """Test that serializing the same record twice gives identical JSON."""
        card = load_object_from_string(CARD_HTML, Card)

        assert json.dumps(serialize(card)) == json.dumps(serialize(card))

    def test_source_not_mutated(self):
        """Test that the record is unchanged by serialization."""
        card = load_object_from_string(CARD_HTML, Card)
        before = {key: value for key, value in vars(card).items() if key != "flavor"}

        serialize(card)

        after = {key: value for key, value in vars(card).items() if key != "flavor"}
        assert copy.copy(before) == after
        assert card.missing is UNSET

    def test_cycle_serializes_as_absent(self):
        """Test that a revisited object is omitted instead of recursing."""

        class Node:
            def __init__(self, name):
                self.name = name
                self.other = None

        first, second = Node("first"), Node("second")
        first.other = second
        second.other = first

        assert serialize(first) == {"name": "first", "other": {"name": "second"}}

    def test_output_is_json_ready(self):
        """Test that output round-trips through the json module."""
        card = load_object_from_string(CARD_HTML, Card)

        assert json.loads(json.dumps(serialize(card))) == {
            "name": "Bahamut",
            "flavor": "Dragon <i>king</i>",
            "power": 9,
        }


class TestKeyString:
    """Test key normalization."""

    def test_to_key_string(self):
        """Test upper snake case keys."""
        assert to_key_string("Disciple of War") == "DISCIPLE_OF_WAR"
        assert to_key_string("  Paladin / Gladiator ") == "PALADIN_GLADIATOR"
        assert to_key_string("--Blue  Mage--") == "BLUE_MAGE"
