"""sitemap_scout.parser: XML tree building, dialect detection and per-dialect extraction."""

from sitemap_scout.parser.dialects import Classification, Dialect, classify
from sitemap_scout.parser.extractors import EXTRACTORS, Extraction, extract
from sitemap_scout.parser.xml_tree import Node, parse_document

__all__ = [
    "Classification",
    "Dialect",
    "classify",
    "EXTRACTORS",
    "Extraction",
    "extract",
    "Node",
    "parse_document",
]
