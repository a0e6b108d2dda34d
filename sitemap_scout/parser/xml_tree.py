"""sitemap_scout.parser.xml_tree: permissive XML → plain tree conversion.

The tree is a recursive ``str | list | dict`` structure:

* namespaces are dropped from element and attribute names, so
  ``<news:publication_date>`` and ``<publication_date>`` look the same;
* attributes become plain keys of the element's mapping;
* an element without attributes and children collapses to its stripped text;
* text next to attributes or children is stored under ``"#text"``;
* repeated child names are gathered into a list in document order.

Example::

    >>> parse_document('<urlset><url><loc> /a </loc></url></urlset>')
    {'urlset': {'url': {'loc': '/a'}}}
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Union

from lxml import etree

from sitemap_scout.errors import DocumentParseError

__all__ = (
    "Node",
    "TEXT_KEY",
    "parse_document",
    "as_list",
    "text_of",
    "child",
    "iter_mappings",
)

Node = Union[str, List["Node"], Dict[str, "Node"]]

TEXT_KEY = "#text"


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        recover=True,
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _local(name: Any) -> str:
    return etree.QName(name).localname


def _add(mapping: Dict[str, Node], key: str, value: Node) -> None:
    if key not in mapping:
        mapping[key] = value
        return
    current = mapping[key]
    if isinstance(current, list):
        current.append(value)
    else:
        mapping[key] = [current, value]


def _convert(element: etree._Element) -> Node:
    children = [c for c in element if isinstance(c.tag, str)]
    text = (element.text or "").strip()
    if not element.attrib and not children:
        return text

    node: Dict[str, Node] = {}
    for name, value in element.attrib.items():
        _add(node, _local(name), value.strip())
    for sub in children:
        _add(node, _local(sub), _convert(sub))
    if text:
        _add(node, TEXT_KEY, text)
    return node


def parse_document(text: str) -> Dict[str, Node]:
    """Parse *text* into ``{root_local_name: node}``.

    Raises :class:`DocumentParseError` when no root element can be recovered.
    """
    try:
        root = etree.fromstring(text.encode("utf-8"), parser=_make_parser())
    except etree.XMLSyntaxError as exc:
        raise DocumentParseError(str(exc)) from exc
    if root is None or not isinstance(root.tag, str):
        raise DocumentParseError("no root element")
    return {_local(root): _convert(root)}


# --------------------------------------------------------------------------- #
# Node helpers                                                                #
# --------------------------------------------------------------------------- #


def as_list(value: Any) -> List[Any]:
    """Treat a missing value as empty and a singleton as a one-element list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_of(value: Any) -> str:
    """Return the text carried by *value*: the string itself, ``#text`` of a
    mapping, or the first non-empty text of a list."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        return text_of(value.get(TEXT_KEY))
    if isinstance(value, list):
        for item in value:
            found = text_of(item)
            if found:
                return found
    return ""


def child(node: Any, *path: str) -> Any:
    """Walk *path* through nested mappings, returning ``None`` on any miss."""
    current = node
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def iter_mappings(values: Iterable[Any]) -> Iterable[Dict[str, Node]]:
    """Yield only the mapping-shaped items of *values*."""
    return (v for v in values if isinstance(v, dict))
