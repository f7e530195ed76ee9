# ABOUTME: Parsed-document helpers over lxml: lenient HTML parsing, node classification and rendering
# ABOUTME: Everything the engine needs to know about lxml trees lives here

from enum import Enum
from html import escape
from typing import Any

from lxml import etree

# Type alias for XPath results that represent DOM elements. Annotate a field with this when the
# record should keep the matched element itself (to read attributes or markup later) rather than
# its text or a parsed value.
MatchedElement = etree._Element

VOID_ELEMENTS = frozenset(
    ["br", "img", "hr", "input", "meta", "link", "area", "base", "col", "embed", "param", "source", "track", "wbr"]
)


class NodeKind(Enum):
    """Classification of a single query result."""

    ABSENT = "absent"
    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"
    ATTRIBUTE = "attribute"
    PRIMITIVE = "primitive"


def _html_parser() -> etree.HTMLParser:
    return etree.HTMLParser(remove_comments=True, remove_pis=True, recover=True)


def parse_html(html: str) -> etree._ElementTree:
    """Parse HTML text into a navigable document.

    Comments and processing directives are discarded, script/style text is kept, and void elements
    are handled the HTML way. Blank or unparseable input yields an empty document instead of raising.
    """
    root = None
    if html and html.strip():
        try:
            root = etree.fromstring(html, _html_parser())
        except ValueError:
            # lxml refuses str input that carries an XML encoding declaration
            root = etree.fromstring(html.encode("utf-8"), _html_parser())
        except etree.ParserError:
            root = None

    if root is None:
        root = etree.fromstring("<html></html>", _html_parser())

    return root.getroottree()


def classify(node: Any) -> NodeKind:
    if node is None:
        return NodeKind.ABSENT
    if isinstance(node, etree._ElementTree):
        return NodeKind.DOCUMENT
    if isinstance(node, etree._Element):
        return NodeKind.ELEMENT
    if isinstance(node, etree._ElementUnicodeResult):
        return NodeKind.ATTRIBUTE if node.is_attribute else NodeKind.TEXT
    return NodeKind.PRIMITIVE


def is_node(value: Any) -> bool:
    """True for anything that is a handle into a parsed document."""
    return classify(value) in (NodeKind.DOCUMENT, NodeKind.ELEMENT)


def inner_html(node: Any) -> str:
    """Serialize the children of an element, preserving nested tags (like innerHTML)."""
    if isinstance(node, etree._ElementTree):
        node = node.getroot()
    if not isinstance(node, etree._Element):
        return ""

    parts = [escape(node.text, quote=False)] if node.text else []
    for child in node:
        if not isinstance(child.tag, str):
            # Comments and PIs only survive when a tree was built elsewhere; keep their tail text
            if child.tail:
                parts.append(escape(child.tail, quote=False))
            continue
        parts.append(etree.tostring(child, encoding="unicode", method="html", with_tail=True))

    return "".join(parts)


def text_content(node: Any) -> str:
    """Concatenated, stripped text of a node and its descendants."""
    if isinstance(node, etree._ElementTree):
        node = node.getroot()
    if isinstance(node, etree._Element):
        return "".join(node.itertext()).strip()
    if node is None:
        return ""
    return str(node).strip()


def has_children(node: Any) -> bool:
    """True when an element has any child element or text."""
    if not isinstance(node, etree._Element):
        return False
    return len(node) > 0 or bool(node.text)


def node_to_string(node: Any) -> str:
    """String form of a node for output: inner markup for elements, plain text otherwise."""
    if isinstance(node, etree._ElementTree):
        return etree.tostring(node, encoding="unicode", method="html")
    if isinstance(node, etree._Element):
        return inner_html(node) or text_content(node)
    return str(node)


def evaluate(query: str, context: Any) -> Any:
    """Evaluate an XPath query against a document or element."""
    return context.xpath(query)
