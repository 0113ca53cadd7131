"""Element tree helpers for the gateway's XML documents.

Builders assemble requests from ordered `ElementTree` nodes; element order
is significant for schema validation, so children are always appended in
the order they are added. Readers get namespace-free elements and a
nested-dict rendition of the reply.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections import defaultdict
from datetime import date, datetime
from typing import Any

from core.domain.errors import MalformedResponseError

_TAG_PREFIX_RE = re.compile(r"<(/?)[A-Za-z_][\w.-]*:(?=[A-Za-z_])")


def format_value(value: object) -> str | None:
    """Render a Python value as element text."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def element(tag: str, value: object = None, **attrs: str) -> ET.Element:
    node = ET.Element(tag, attrs)
    node.text = format_value(value)
    return node


def add(parent: ET.Element, tag: str, value: object = None) -> ET.Element:
    """Append a child unconditionally (empty text when `value` is None)."""

    node = ET.SubElement(parent, tag)
    node.text = format_value(value)
    return node


def add_if_present(parent: ET.Element, tag: str, value: object) -> ET.Element | None:
    """Append a child only when `value` is neither None nor an empty string."""

    if value is None or value == "":
        return None
    return add(parent, tag, value)


def is_empty(node: ET.Element) -> bool:
    return not node.text and len(node) == 0


def append_if_present(parent: ET.Element, child: ET.Element) -> ET.Element | None:
    """Append `child` unless it has neither text nor children."""

    if is_empty(child):
        return None
    parent.append(child)
    return child


def to_xml(root: ET.Element) -> str:
    return ET.tostring(root, encoding="unicode")


def parse_document(text: str) -> ET.Element:
    """Parse a reply into a namespace-free element tree.

    Tag prefixes (``<v7:RateReply>``) are dropped before parsing and default
    namespaces are removed afterwards, so lookups use bare element names.
    """

    cleaned = _TAG_PREFIX_RE.sub(r"<\1", text)
    try:
        root = ET.fromstring(cleaned)
    except ET.ParseError as exc:
        raise MalformedResponseError(text) from exc

    for node in root.iter():
        if isinstance(node.tag, str) and node.tag.startswith("{"):
            node.tag = node.tag.split("}", 1)[1]
    return root


def find_reply_root(document: ET.Element, name: str) -> ET.Element | None:
    """Locate the operation's reply element (document root or nested in an envelope)."""

    if document.tag == name:
        return document
    return document.find(f".//{name}")


def child_text(node: ET.Element | None, path: str) -> str:
    """Stripped text at `path`, or an empty string when missing."""

    if node is None:
        return ""
    found = node.find(path)
    if found is None or found.text is None:
        return ""
    return found.text.strip()


def element_to_dict(node: ET.Element) -> dict[str, Any]:
    """Nested-dict rendition of an element: repeated children become lists."""

    return {node.tag: _element_value(node)}


def _element_value(node: ET.Element) -> Any:
    children = list(node)
    if not children and not node.attrib:
        text = (node.text or "").strip()
        return text or None

    grouped: dict[str, list[Any]] = defaultdict(list)
    for child in children:
        grouped[child.tag].append(_element_value(child))

    value: dict[str, Any] = dict(node.attrib)
    for tag, items in grouped.items():
        value[tag] = items[0] if len(items) == 1 else items
    return value
