"""sitemap_scout.parser.dialects: root-shape detection for parsed documents."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, NamedTuple

from sitemap_scout.parser.xml_tree import Node, child

__all__ = ("Dialect", "Classification", "classify")


class Dialect(str, Enum):
    """The closed set of document shapes the extractors understand."""

    SITEMAP_INDEX = "sitemapindex"
    URL_SET = "urlset"
    RSS = "rss"
    ATOM = "atom"
    RDF = "rdf"
    GENERIC = "generic"

    @property
    def expands(self) -> bool:
        """Whether documents of this dialect point at more documents to fetch."""
        return self is Dialect.SITEMAP_INDEX


class Classification(NamedTuple):
    dialect: Dialect
    node: Any


def _present(value: Any) -> bool:
    # an empty element parses to "" and does not count as a container
    return value is not None and value != "" and value != [] and value != {}


def classify(tree: Dict[str, Node]) -> Classification:
    """Pick exactly one dialect for *tree*, checked in fixed priority order.

    Matching is structural: only the presence of the expected container is
    tested, nothing is validated against a schema.
    """
    sitemaps = child(tree, "sitemapindex", "sitemap")
    if _present(sitemaps):
        return Classification(Dialect.SITEMAP_INDEX, sitemaps)

    urls = child(tree, "urlset", "url")
    if _present(urls):
        return Classification(Dialect.URL_SET, urls)

    channel = child(tree, "rss", "channel")
    if _present(channel):
        return Classification(Dialect.RSS, channel)

    feed = tree.get("feed")
    if _present(feed):
        return Classification(Dialect.ATOM, feed)

    for key in ("RDF", "rdf"):
        rdf = tree.get(key)
        if _present(rdf):
            return Classification(Dialect.RDF, rdf)

    return Classification(Dialect.GENERIC, tree)
