# ABOUTME: Serializer turning record graphs into ordered, JSON-ready dicts, lists and primitives
# ABOUTME: Computed properties are spliced between stored fields according to serializer_property metadata

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel

from flarestone.engine.nodes import is_node, node_to_string
from flarestone.engine.values import UNSET
from flarestone.utils.logging import get_logger

logger = get_logger(__name__)

INTERNAL_PREFIX = "_"


@dataclass(frozen=True)
class SerializerOptions:
    """Visibility metadata for a computed field."""

    internal: bool = False
    emplace_after: str | None = None
    key: str | None = None


class SerializedProperty(property):
    """A property carrying serializer visibility metadata."""

    def __init__(self, fget: Callable[[Any], Any], options: SerializerOptions, doc: str | None = None):
        super().__init__(fget, doc=doc or fget.__doc__)
        self.serializer_options = options


def serializer_property(
    *, internal: bool = False, emplace_after: str | None = None, key: str | None = None
) -> Callable[[Any], SerializedProperty]:
    """Declare a computed field and control how it appears in serialized output.

    Args:
        internal: Leave the field out of serialized output entirely
        emplace_after: Place the field directly after this stored field
        key: Output key to use instead of the property name

    Usable on a plain method or stacked on top of ``@property``.
    """
    options = SerializerOptions(internal=internal, emplace_after=emplace_after, key=key)

    def decorator(func: Any) -> SerializedProperty:
        fget = func.fget if isinstance(func, property) else func
        return SerializedProperty(fget, options)

    return decorator


@dataclass
class _Computed:
    value: Any
    emplace_after: str | None


def _computed_properties(klass: type) -> dict[str, tuple[property, SerializerOptions]]:
    """Public properties of a class and its bases, base declarations first."""
    found: dict[str, tuple[property, SerializerOptions]] = {}
    for base in reversed(klass.__mro__):
        for name, attr in vars(base).items():
            if not isinstance(attr, property):
                continue
            options = getattr(attr, "serializer_options", None) or SerializerOptions()
            found[name] = (attr, options)
    return found


class _Serializer:
    """One top-level serialization call. Owns the visited set used for cycle safety."""

    def __init__(self) -> None:
        # id -> object keeps visited objects alive so their ids cannot be recycled mid-call
        self._visited: dict[int, Any] = {}

    def _mark(self, obj: Any) -> bool:
        """Record a visit; False when the object was already visited."""
        if id(obj) in self._visited:
            return False
        self._visited[id(obj)] = obj
        return True

    def serialize(self, obj: Any) -> Any:
        if obj is None or obj is UNSET or isinstance(obj, bool):
            return obj
        if isinstance(obj, Enum):
            return self.serialize(obj.value)
        if isinstance(obj, str):
            # Plain str drops lxml's smart-string back reference into the tree
            return str(obj)
        if isinstance(obj, int):
            return int(obj)
        if isinstance(obj, float):
            return obj if math.isfinite(obj) else None

        if isinstance(obj, date):
            return obj.isoformat()

        if is_node(obj):
            return node_to_string(obj)

        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")

        to_json = getattr(obj, "to_json", None)
        if callable(to_json):
            return to_json()

        if not self._mark(obj):
            return UNSET

        if isinstance(obj, (list, tuple, set, frozenset)):
            return [self._in_sequence(item) for item in obj]

        if isinstance(obj, Mapping):
            return self._serialize_mapping(obj)

        if hasattr(obj, "__dict__"):
            return self._serialize_object(obj)

        return str(obj)

    def _in_sequence(self, item: Any) -> Any:
        value = self.serialize(item)
        return None if value is UNSET else value

    def _serialize_mapping(self, obj: Mapping) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in obj.items():
            if isinstance(key, str) and key.startswith(INTERNAL_PREFIX):
                continue
            serialized = self.serialize(value)
            if serialized is not UNSET:
                out[str(key)] = serialized
        return out

    def _collect_computed(self, obj: Any) -> dict[str, _Computed]:
        computed: dict[str, _Computed] = {}
        for name, (prop, options) in _computed_properties(type(obj)).items():
            if options.internal or name.startswith(INTERNAL_PREFIX):
                continue
            try:
                value = prop.__get__(obj, type(obj))
            except Exception as e:
                logger.debug(
                    "Skipping computed field that raised",
                    record_type=type(obj).__name__,
                    field=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            computed[options.key or name] = _Computed(self.serialize(value), options.emplace_after)
        return computed

    def _emplace_after(self, anchor: str, out: dict[str, Any], computed: dict[str, _Computed]) -> None:
        """Place computed fields anchored to `anchor`, then anything anchored to those in turn."""
        for computed_name in [n for n, c in computed.items() if c.emplace_after == anchor]:
            out[computed_name] = computed.pop(computed_name).value
            self._emplace_after(computed_name, out, computed)

    def _serialize_object(self, obj: Any) -> dict[str, Any]:
        computed = self._collect_computed(obj)
        out: dict[str, Any] = {}

        for name, value in vars(obj).items():
            if not name.startswith(INTERNAL_PREFIX) and name in computed:
                # A computed field shadowing a stored one takes the stored field's slot
                out[name] = computed.pop(name).value
            else:
                out[name] = self.serialize(value)

                if name.startswith(INTERNAL_PREFIX):
                    public_name = name[len(INTERNAL_PREFIX) :]
                    if public_name in computed:
                        out[public_name] = computed.pop(public_name).value

            self._emplace_after(name, out, computed)

        for computed_name, entry in computed.items():
            out.setdefault(computed_name, entry.value)

        return {k: v for k, v in out.items() if not k.startswith(INTERNAL_PREFIX) and v is not UNSET}


def serialize(obj: Any) -> Any:
    """Convert a record graph into its wire representation.

    Output is built from dicts, lists and primitives only and can be passed straight to a JSON
    encoder. Key order is stored-field declaration order with computed fields spliced in, and is
    stable across calls. A revisited object (a cycle or a shared reference) serializes as absent.
    The source record is never modified.
    """
    value = _Serializer().serialize(obj)
    return None if value is UNSET else value


def to_key_string(text: str) -> str:
    """Normalize free text into an UPPER_SNAKE key, e.g. ``"Disciple of War"`` -> ``"DISCIPLE_OF_WAR"``."""
    key = re.sub(r"[^A-Z0-9]+", "_", text.strip().upper())
    key = re.sub(r"^_+|_+$", "", key)
    return re.sub(r"_{2,}", "_", key)
