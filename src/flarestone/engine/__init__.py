# ABOUTME: Metadata-driven extraction engine: schema rules, transforms, extraction and serialization
# ABOUTME: Public surface for declaring record types and loading them from HTML

"""
Engine Layer: HTML documents in, typed records out, wire dicts back out

This layer handles:
- Declaring record fields as XPath rules (``xpath``) on ``Schema`` subclasses
- Ordered post-extraction transform pipelines (``TransformStep``)
- Extracting records from parsed documents with per-field failure isolation
- Serializing record graphs into stable, ordered, JSON-ready structures

Data Flow: fetched HTML → parse_html → inject_into → record → serialize → wire dict
"""

from .injector import coerce, extract_value, inject_into
from .loaders import deserialize, load_object_from_file, load_object_from_string, load_object_from_url
from .nodes import MatchedElement, inner_html, parse_html, text_content
from .rules import ExtractionRule, Schema, SchemaRegistry, get_schema, schema_registry, xpath
from .serializer import serialize, serializer_property, to_key_string
from .transforms import EMPTY, TransformRegistry, TransformStep, parse_number, transform_registry
from .values import UNSET, is_empty

__all__ = [
    # Declaring schemas
    "EMPTY",
    "ExtractionRule",
    "MatchedElement",
    "Schema",
    "SchemaRegistry",
    "TransformRegistry",
    "TransformStep",
    "UNSET",
    "get_schema",
    "schema_registry",
    "serializer_property",
    "transform_registry",
    "xpath",
    # Extraction
    "coerce",
    "extract_value",
    "inject_into",
    "is_empty",
    "parse_number",
    # Parsed documents
    "inner_html",
    "parse_html",
    "text_content",
    # Loading
    "deserialize",
    "load_object_from_file",
    "load_object_from_string",
    "load_object_from_url",
    # Output
    "serialize",
    "to_key_string",
]
