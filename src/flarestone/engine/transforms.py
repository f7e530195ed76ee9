# ABOUTME: Transform Registry and the post-extraction transform pipeline
# ABOUTME: Each field owns an ordered list of TransformStep applied after the whole record is extracted

import inspect
import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from flarestone.engine.nodes import is_node, text_content
from flarestone.engine.values import UNSET, is_absent, is_empty


class _Empty(Enum):
    EMPTY = "EMPTY"

    def __repr__(self) -> str:
        return "EMPTY"


# Condition sentinel matching any value that is empty under the shared emptiness rule
EMPTY = _Empty.EMPTY

# A condition is a literal compared by equality, the EMPTY sentinel, or a predicate
TransformCondition = Any


def _accepts_record(func: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False

    positional = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if (
            param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            and param.default is inspect.Parameter.empty
        ):
            positional += 1
    return positional >= 2


def _as_conditions(conditions: Any) -> tuple[TransformCondition, ...]:
    if conditions is UNSET:
        return ()
    if isinstance(conditions, (list, tuple)):
        return tuple(conditions)
    return (conditions,)


@dataclass(frozen=True)
class TransformStep:
    """One step of a field's transform pipeline.

    Within a step the operations run in a fixed order: extract_text, function, extract_regex,
    undefined_if / null_if, trim, parse_number. A matching undefined_if or null_if ends this step
    early; later steps in the pipeline still run on the new value.

    ``function`` receives the current value, plus the record being built when it accepts a second
    positional argument.
    """

    extract_text: bool = False
    function: Callable[..., Any] | None = None
    extract_regex: re.Pattern[str] | str | None = None
    capture_group: int | str = 1
    trim: bool = False
    parse_number: bool = False
    undefined_if: Any = UNSET
    null_if: Any = UNSET

    _pattern: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)
    _undefined_conditions: tuple[TransformCondition, ...] = field(default=(), init=False, repr=False, compare=False)
    _null_conditions: tuple[TransformCondition, ...] = field(default=(), init=False, repr=False, compare=False)
    _function_takes_record: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pattern = self.extract_regex
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        object.__setattr__(self, "_pattern", pattern)
        object.__setattr__(self, "_undefined_conditions", _as_conditions(self.undefined_if))
        object.__setattr__(self, "_null_conditions", _as_conditions(self.null_if))
        if self.function is not None:
            object.__setattr__(self, "_function_takes_record", _accepts_record(self.function))

    def apply(self, value: Any, record: Any = None) -> Any:
        """Run this step on a value. Absent values pass through untouched."""
        if is_absent(value):
            return value

        result = value

        if self.extract_text and is_node(result):
            result = text_content(result)

        if self.function is not None:
            result = self.function(result, record) if self._function_takes_record else self.function(result)

        if self._pattern is not None and isinstance(result, str):
            match = self._pattern.search(result)
            result = _capture(match, self.capture_group) if match else None

        if _matches_any(result, self._undefined_conditions):
            return UNSET

        if _matches_any(result, self._null_conditions):
            return None

        if self.trim and isinstance(result, str):
            result = result.strip()

        if self.parse_number and isinstance(result, str):
            result = parse_number(result)

        return result


def _capture(match: re.Match[str], group: int | str) -> str | None:
    try:
        return match.group(group)
    except IndexError:
        return None


def _matches_any(value: Any, conditions: tuple[TransformCondition, ...]) -> bool:
    for condition in conditions:
        if condition is EMPTY:
            if is_empty(value):
                return True
        elif callable(condition):
            if condition(value):
                return True
        elif condition == value:
            return True
    return False


def parse_number(text: str) -> int | float:
    """Parse a display number such as ``"12,345"``.

    Thousands separators are stripped first. Input that is not numeric yields ``math.nan`` rather
    than raising; callers should treat NaN as "could not parse". Blank input parses as 0.
    """
    cleaned = text.replace(",", "").strip()
    if not cleaned:
        return 0
    try:
        return int(cleaned)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return math.nan


def apply_pipeline(value: Any, steps: Sequence[TransformStep], record: Any = None) -> Any:
    for step in steps:
        value = step.apply(value, record)
    return value


class TransformRegistry:
    """Per-type, per-field ordered transform pipelines.

    Steps registered for a field accumulate in the order they are registered. Lookup walks from the
    most-derived type upward and uses the pipeline of the first type that declares the field.
    """

    def __init__(self) -> None:
        self._pipelines: dict[type, dict[str, list[TransformStep]]] = {}

    def register(self, owner: type, field_name: str, *steps: TransformStep) -> None:
        self._pipelines.setdefault(owner, {}).setdefault(field_name, []).extend(steps)

    def pipeline_for(self, target: type, field_name: str) -> tuple[TransformStep, ...]:
        for klass in target.__mro__:
            fields = self._pipelines.get(klass)
            if fields is not None and field_name in fields:
                return tuple(fields[field_name])
        return ()


transform_registry = TransformRegistry()
