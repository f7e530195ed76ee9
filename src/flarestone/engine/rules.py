# ABOUTME: Schema Registry: declarative field-to-query rules bound to record types
# ABOUTME: xpath() declares a rule, Schema is the base for records the engine populates

import types
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any, Union, get_args, get_origin

from flarestone.engine.transforms import TransformStep, transform_registry
from flarestone.engine.values import UNSET

TypeResolver = Callable[[], Any]

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence)


@dataclass(frozen=True)
class ExtractionRule:
    """How one field of a record is located and typed.

    Rules are immutable once bound to a type. ``field_name`` is filled in when the rule is
    assigned as a class attribute.
    """

    query: str
    field_name: str = ""
    type_resolver: TypeResolver | None = None
    default: Any = UNSET
    default_if_empty: bool = False
    many: bool = False
    transforms: tuple[TransformStep, ...] = ()

    @property
    def has_default(self) -> bool:
        return self.default is not UNSET

    def __set_name__(self, owner: type, name: str) -> None:
        schema_registry.register(owner, replace(self, field_name=name))
        transform_registry.register(owner, name, *self.transforms)


def xpath(
    query: str,
    *,
    type: TypeResolver | None = None,
    default: Any = UNSET,
    default_if_empty: bool = False,
    many: bool = False,
    transform: TransformStep | Sequence[TransformStep] = (),
) -> Any:
    """Declare a field extracted by an XPath query.

    Args:
        query: XPath evaluated against the record's context node
        type: Zero-argument callable returning the value type, overriding the annotation
        default: Value used when nothing matches or extraction of this field fails
        default_if_empty: Also use ``default`` when the extracted value is empty
        many: Collect every match into a list instead of taking the first
        transform: Post-extraction steps, run in the order given
    """
    steps = (transform,) if isinstance(transform, TransformStep) else tuple(transform)
    return ExtractionRule(
        query=query,
        type_resolver=type,
        default=default,
        default_if_empty=default_if_empty,
        many=many,
        transforms=steps,
    )


def _unwrap(tp: Any) -> Any:
    """Reduce an annotation to the type a single extracted value should have."""
    origin = get_origin(tp)
    if origin in (Union, types.UnionType):
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        return _unwrap(args[0]) if len(args) == 1 else None
    if origin in _SEQUENCE_ORIGINS:
        args = get_args(tp)
        return _unwrap(args[0]) if args else None
    if tp is Any or isinstance(tp, str):
        return None
    return tp


class SchemaRegistry:
    """Ordered extraction rules per record type.

    A subtype rule for a field name replaces the ancestor's rule outright. Lookup walks from the
    most-derived type upward, keeping the first rule seen per field name. Registration happens at
    import time; afterwards the registry is only read.
    """

    def __init__(self) -> None:
        self._own_rules: dict[type, dict[str, ExtractionRule]] = {}
        self._resolved: dict[type, tuple[ExtractionRule, ...]] = {}
        self._hints: dict[type, dict[str, Any]] = {}

    def register(self, owner: type, rule: ExtractionRule) -> None:
        self._own_rules.setdefault(owner, {})[rule.field_name] = rule
        self._resolved.clear()
        self._hints.pop(owner, None)

    def rules_for(self, target: type) -> tuple[ExtractionRule, ...]:
        cached = self._resolved.get(target)
        if cached is not None:
            return cached

        seen: set[str] = set()
        rules: list[ExtractionRule] = []
        for klass in target.__mro__:
            for name, rule in self._own_rules.get(klass, {}).items():
                if name not in seen:
                    seen.add(name)
                    rules.append(rule)

        resolved = tuple(rules)
        self._resolved[target] = resolved
        return resolved

    def is_schema_type(self, target: Any) -> bool:
        return isinstance(target, type) and len(self.rules_for(target)) > 0

    def declared_fields(self, target: type) -> list[str]:
        """Field names in declaration order, base types first."""
        names: list[str] = []
        for klass in reversed(target.__mro__):
            for name in self._own_rules.get(klass, {}):
                if name not in names:
                    names.append(name)
        return names

    def value_type(self, target: type, rule: ExtractionRule) -> Any:
        """Resolve the type a field's values should be coerced or extracted to."""
        if rule.type_resolver is not None:
            return _unwrap(rule.type_resolver())
        return _unwrap(self._type_hints(target).get(rule.field_name))

    def _type_hints(self, target: type) -> dict[str, Any]:
        hints = self._hints.get(target)
        if hints is None:
            try:
                hints = typing.get_type_hints(target)
            except (NameError, TypeError):
                hints = {}
                for klass in reversed(target.__mro__):
                    hints.update(getattr(klass, "__annotations__", {}))
            self._hints[target] = hints
        return hints


schema_registry = SchemaRegistry()


def get_schema(target: type) -> tuple[ExtractionRule, ...]:
    return schema_registry.rules_for(target)


class Schema:
    """Base class for records populated by the extraction engine.

    Every declared field starts out UNSET so that absent values are distinguishable from nulls and
    stored fields keep their declaration order.
    """

    def __init__(self) -> None:
        for name in schema_registry.declared_fields(type(self)):
            setattr(self, name, UNSET)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items() if v is not UNSET)
        return f"{type(self).__name__}({fields})"
