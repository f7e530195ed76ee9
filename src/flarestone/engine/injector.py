# ABOUTME: Extraction engine: evaluates a type's rules against a parsed node and builds the record
# ABOUTME: Handles type coercion, nested records, raw nodes, defaults and per-field failure isolation

import math
from typing import Any, TypeVar

from lxml import etree

from flarestone.engine.nodes import NodeKind, classify, evaluate, has_children, inner_html, text_content
from flarestone.engine.rules import ExtractionRule, schema_registry
from flarestone.engine.transforms import apply_pipeline, transform_registry
from flarestone.engine.values import UNSET, is_empty
from flarestone.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def is_raw_node_type(target_type: Any) -> bool:
    """True when a field wants the matched node itself rather than a value derived from it."""
    return isinstance(target_type, type) and issubclass(target_type, (etree._Element, etree._ElementTree))


def _to_number(value: Any, target_type: type) -> int | float:
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return target_type(0)
        try:
            number = float(text)
        except ValueError:
            return target_type(0)

    if math.isnan(number) or (target_type is int and math.isinf(number)):
        return target_type(0)
    return int(number) if target_type is int else number


def coerce(value: Any, target_type: Any) -> Any:
    """Coerce a primitive or text value to a field's declared type.

    Strings pass through, numeric types parse (non-numeric text becomes 0), booleans are cast.
    Any other target type receives the value unchanged.
    """
    if target_type is None or target_type is str:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    if target_type is bool:
        return bool(value)
    if target_type in (int, float):
        return _to_number(value, target_type)
    return value


def _fallback(rule: ExtractionRule) -> Any:
    return rule.default if rule.has_default else None


def extract_value(node: Any, target_type: Any, rule: ExtractionRule) -> Any:
    """Turn a single query result into a field value of ``target_type``."""
    kind = classify(node)

    if kind is NodeKind.ABSENT:
        return rule.default

    if kind is NodeKind.TEXT:
        return coerce(str(node).strip(), target_type)

    if kind is NodeKind.ATTRIBUTE:
        return coerce(str(node), target_type)

    if kind is NodeKind.ELEMENT:
        if schema_registry.is_schema_type(target_type):
            if rule.default_if_empty and not has_children(node):
                return _fallback(rule)

            record = inject_into(node, target_type)
            if rule.default_if_empty and is_empty(record):
                return _fallback(rule)
            return record

        if is_raw_node_type(target_type):
            return node

        # Strings keep their markup so rich text (line breaks, links) survives
        if target_type is None or target_type is str:
            return inner_html(node)
        return coerce(text_content(node), target_type)

    if kind is NodeKind.DOCUMENT:
        if schema_registry.is_schema_type(target_type):
            return inject_into(node, target_type)
        return node

    return coerce(node, target_type)


def _extract_field(context: Any, target_type: type, rule: ExtractionRule) -> Any:
    value_type = schema_registry.value_type(target_type, rule)
    result = evaluate(rule.query, context)

    if rule.many:
        nodes = result if isinstance(result, list) else [result]
        return [extract_value(node, value_type, rule) for node in nodes if node is not None]

    if isinstance(result, list):
        node = result[0] if result else None
    else:
        node = result

    value = extract_value(node, value_type, rule)
    if rule.default_if_empty and is_empty(value):
        return rule.default
    return value


def inject_into(context: Any, target_type: type[T]) -> T:
    """Build a ``target_type`` record from a document or element.

    Every rule is evaluated independently: a failure in one field is logged and resolved to that
    field's default (an empty list for ``many`` fields) without affecting its siblings. Transform
    pipelines run only after every field, nested records included, has been extracted.
    """
    instance = target_type()
    rules = schema_registry.rules_for(target_type)

    for rule in rules:
        try:
            value = _extract_field(context, target_type, rule)
        except Exception as e:
            logger.warning(
                "Field extraction failed",
                record_type=target_type.__name__,
                field=rule.field_name,
                query=rule.query,
                error=str(e),
                error_type=type(e).__name__,
            )
            if rule.has_default:
                value = rule.default
            elif rule.many:
                value = []
            else:
                continue
        setattr(instance, rule.field_name, value)

    for rule in rules:
        steps = transform_registry.pipeline_for(target_type, rule.field_name)
        if not steps:
            continue
        try:
            current = getattr(instance, rule.field_name, UNSET)
            setattr(instance, rule.field_name, apply_pipeline(current, steps, instance))
        except Exception as e:
            logger.warning(
                "Field transform failed",
                record_type=target_type.__name__,
                field=rule.field_name,
                error=str(e),
                error_type=type(e).__name__,
            )

    return instance
