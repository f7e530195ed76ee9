# ABOUTME: Absent-value sentinel and the shared emptiness rule
# ABOUTME: Used by default_if_empty handling, EMPTY transform conditions and the serializer

from collections.abc import Mapping
from enum import Enum
from typing import Any

from lxml import etree

from flarestone.engine.nodes import text_content


class Unset(Enum):
    """Marker for a field that holds no value at all (distinct from None, which is an explicit null)."""

    UNSET = "UNSET"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset.UNSET


def is_absent(value: Any) -> bool:
    return value is None or value is UNSET


def is_empty(value: Any) -> bool:
    """Return True when a value carries no meaningful content.

    A value is empty when it is absent, an all-whitespace string, a zero-length sequence, or an
    object whose every public field is absent. A matched element with no text is also empty.
    """
    if is_absent(value):
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, etree._Element):
        return text_content(value) == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    if isinstance(value, Mapping):
        return all(is_absent(v) for k, v in value.items() if not (isinstance(k, str) and k.startswith("_")))
    if hasattr(value, "__dict__") and not callable(value):
        return all(is_absent(v) for k, v in vars(value).items() if not k.startswith("_"))
    return False
