"""sitemap_scout.parser.extractors: one extraction strategy per dialect.

Each extractor takes the sub-node chosen by :func:`~sitemap_scout.parser.dialects.classify`,
the document's base URL (its post-redirect URL) and the optional lower bound, and
returns an :class:`Extraction`: documents to visit next and result URLs, both
already resolved to absolute form. Deduplication across documents is the
driver's job.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Final, List, Optional, Sequence, Tuple

from sitemap_scout.dates import Timestamp, first_finite, includes, normalize
from sitemap_scout.parser.dialects import Dialect
from sitemap_scout.parser.xml_tree import as_list, child, iter_mappings, text_of
from sitemap_scout.utils import resolve_url

__all__ = (
    "Extraction",
    "Extractor",
    "EXTRACTORS",
    "extract",
    "extract_sitemap_index",
    "extract_url_set",
    "extract_rss",
    "extract_atom",
    "extract_rdf",
    "extract_generic",
)


@dataclass
class Extraction:
    """Output of one extractor run over one document."""

    sitemaps: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)

    def add_url(self, ref: Any, base: str) -> None:
        resolved = resolve_url(ref, base)
        if resolved is not None:
            self.urls.append(resolved)

    def add_sitemap(self, ref: Any, base: str) -> None:
        resolved = resolve_url(ref, base)
        if resolved is not None:
            self.sitemaps.append(resolved)


Extractor = Callable[[Any, str, Timestamp], Extraction]

# --------------------------------------------------------------------------- #
# Field priority tables                                                       #
# --------------------------------------------------------------------------- #
# Names are namespace-free: dc:date → date, dcterms:modified → modified,
# rdf:about → about, rss:link / xhtml:link → link.

URLSET_LASTMOD_FIELDS: Final[Tuple[str, ...]] = ("lastmod", "lastModified", "modified", "changeDate")
URLSET_NEWS_NODES: Final[Tuple[str, ...]] = ("news", "news_news")
URLSET_NEWS_FIELDS: Final[Tuple[str, ...]] = ("publication_date", "published", "updated", "pubDate")
URLSET_VIDEO_NODES: Final[Tuple[str, ...]] = ("video", "video_video")
URLSET_VIDEO_FIELDS: Final[Tuple[str, ...]] = (
    "publication_date",
    "upload_date",
    "expiration_date",
    "live_stream_start_time",
    "live_stream_end_time",
    "release_date",
)
URLSET_ALTERNATE_NODES: Final[Tuple[str, ...]] = ("xhtml_link", "xhtml", "link")

RSS_DATE_FIELDS: Final[Tuple[str, ...]] = ("pubDate", "updated", "date", "modified", "issued")
ATOM_DATE_FIELDS: Final[Tuple[str, ...]] = (
    "updated",
    "published",
    "issued",
    "date",
    "modified",
    "updated_at",
    "created_at",
)
RDF_LOCATION_FIELDS: Final[Tuple[str, ...]] = ("link", "about", "guid")
RDF_DATE_FIELDS: Final[Tuple[str, ...]] = ("date", "modified", "pubDate", "issued")

INDEX_LOCATION_FIELDS: Final[Tuple[str, ...]] = ("loc", "link")

ALTERNATE_REL: Final[str] = "alternate"

# Generic fallback heuristics. Thresholds are empirical and kept as they are.
URL_VALUE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(https?:)?//|^[a-z]+://|^/[A-Za-z0-9._~!$&'()*+,;=:@/%-]+", re.IGNORECASE
)
URL_KEY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(^|:)(loc|url|link|href|canonical|@href|@_href)$", re.IGNORECASE
)
DATE_KEY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(^|:)(lastmod|updated|pubdate|date|modified|issued|created|time|timestamp"
    r"|publication_date|upload_date|expiration_date|release_date)$",
    re.IGNORECASE,
)
DATE_VALUE_PATTERNS: Final[Tuple[re.Pattern[str], ...]] = (
    re.compile(r"^-?\d{9,13}$"),
    re.compile(r"^\d{8}$"),
    re.compile(r"^\d{4}-\d{2}-\d{2}"),
    re.compile(r"^[A-Z][a-z]{2},"),
    re.compile(r"^[A-Z][a-z]{2}\s+\d{1,2},\s+\d{4}"),
)


# --------------------------------------------------------------------------- #
# Shared helpers                                                              #
# --------------------------------------------------------------------------- #


def _dates(entry: Dict[str, Any], fields: Sequence[str]) -> Timestamp:
    return first_finite(*(text_of(entry.get(name)) for name in fields))


def _first_mapping(value: Any) -> Optional[Dict[str, Any]]:
    return next(iter_mappings(as_list(value)), None)


def _href(value: Any) -> str:
    """Location carried by a link-ish node: plain text, ``href``/``url``, or text."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        return text_of(value.get("href")) or text_of(value.get("url")) or text_of(value)
    for item in as_list(value):
        found = _href(item)
        if found:
            return found
    return ""


def _rel(link: Dict[str, Any]) -> str:
    return (text_of(link.get("rel")) or ALTERNATE_REL).lower()


def _entries(node: Any, key: str) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    for container in iter_mappings(as_list(node)):
        entries.extend(iter_mappings(as_list(container.get(key))))
    return entries


def _harvest(
    entries: Sequence[Dict[str, Any]],
    base: str,
    lower_bound: Timestamp,
    location: Callable[[Dict[str, Any]], str],
    date_fields: Sequence[str],
) -> Extraction:
    out = Extraction()
    for entry in entries:
        loc = location(entry)
        if not loc:
            continue
        if not includes(_dates(entry, date_fields), lower_bound):
            continue
        out.add_url(loc, base)
    return out


# --------------------------------------------------------------------------- #
# Extractors                                                                  #
# --------------------------------------------------------------------------- #


def extract_sitemap_index(node: Any, base: str, lower_bound: Timestamp = None) -> Extraction:
    """Collect child sitemap locations; an index never yields result URLs."""
    out = Extraction()
    for entry in iter_mappings(as_list(node)):
        loc = ""
        for name in INDEX_LOCATION_FIELDS:
            loc = _href(entry.get(name))
            if loc:
                break
        if not loc:
            loc = text_of(child(entry, "url", "loc"))
        if loc:
            out.add_sitemap(loc, base)
    return out


def _url_set_timestamp(entry: Dict[str, Any]) -> Timestamp:
    news = next((_first_mapping(entry.get(n)) for n in URLSET_NEWS_NODES if entry.get(n)), None)
    video = next((_first_mapping(entry.get(n)) for n in URLSET_VIDEO_NODES if entry.get(n)), None)
    candidates = (
        _dates(entry, URLSET_LASTMOD_FIELDS),
        _dates(news, URLSET_NEWS_FIELDS) if news else None,
        _dates(video, URLSET_VIDEO_FIELDS) if video else None,
    )
    # already normalized; re-normalizing would rescale pre-2001 milliseconds
    return next((ts for ts in candidates if ts is not None), None)


def _alternates(entry: Dict[str, Any]) -> List[str]:
    links = next((entry[n] for n in URLSET_ALTERNATE_NODES if entry.get(n)), None)
    hrefs = []
    for link in iter_mappings(as_list(links)):
        href = text_of(link.get("href")) or text_of(link.get("url"))
        if href and _rel(link) == ALTERNATE_REL:
            hrefs.append(href)
    return hrefs


def extract_url_set(node: Any, base: str, lower_bound: Timestamp = None) -> Extraction:
    """Sitemap ``<url>`` entries, with News/Video dates and hreflang alternates.

    The best timestamp is the first finite of the lastmod family, then the News
    extension, then the Video extension. Alternates inherit that timestamp.
    """
    out = Extraction()
    for entry in iter_mappings(as_list(node)):
        loc = text_of(entry.get("loc"))
        if not loc:
            continue
        ts = _url_set_timestamp(entry)
        if not includes(ts, lower_bound):
            continue
        out.add_url(loc, base)
        for href in _alternates(entry):
            out.add_url(href, base)
    return out


def _rss_location(item: Dict[str, Any]) -> str:
    link = _href(item.get("link"))
    if link:
        return link
    enclosure = _first_mapping(item.get("enclosure"))
    if enclosure and text_of(enclosure.get("url")):
        return text_of(enclosure.get("url"))
    guid = item.get("guid")
    if isinstance(guid, dict) and text_of(guid.get("isPermaLink")).lower() == "false":
        return ""
    return text_of(guid)


def extract_rss(node: Any, base: str, lower_bound: Timestamp = None) -> Extraction:
    """RSS 2.0 ``<item>`` entries of a channel."""
    return _harvest(_entries(node, "item"), base, lower_bound, _rss_location, RSS_DATE_FIELDS)


def _atom_location(entry: Dict[str, Any]) -> str:
    links = entry.get("link")
    if isinstance(links, str):
        return links.strip()
    if isinstance(links, dict):
        return text_of(links.get("href"))

    chosen = ""
    for link in as_list(links):
        if isinstance(link, str):
            href, rel = link.strip(), ALTERNATE_REL
        elif isinstance(link, dict):
            href, rel = text_of(link.get("href")), _rel(link)
        else:
            continue
        if not chosen:
            chosen = href
        if rel == ALTERNATE_REL and href:
            return href
    return chosen


def extract_atom(node: Any, base: str, lower_bound: Timestamp = None) -> Extraction:
    """Atom ``<entry>`` elements; an ``alternate`` link beats the first link."""
    return _harvest(_entries(node, "entry"), base, lower_bound, _atom_location, ATOM_DATE_FIELDS)


def _rdf_location(item: Dict[str, Any]) -> str:
    for name in RDF_LOCATION_FIELDS:
        loc = _href(item.get(name))
        if loc:
            return loc
    return ""


def extract_rdf(node: Any, base: str, lower_bound: Timestamp = None) -> Extraction:
    """RDF / RSS 1.0 ``<item>`` elements directly under the root."""
    return _harvest(_entries(node, "item"), base, lower_bound, _rdf_location, RDF_DATE_FIELDS)


def _looks_like_date(key: str, value: str) -> bool:
    return bool(DATE_KEY_PATTERN.search(key)) or any(p.search(value) for p in DATE_VALUE_PATTERNS)


def _looks_like_url(key: str, value: str) -> bool:
    return bool(URL_KEY_PATTERN.search(key) or URL_VALUE_PATTERN.search(value))


def extract_generic(node: Any, base: str, lower_bound: Timestamp = None) -> Extraction:
    """Heuristic fallback for documents no other dialect recognized.

    Every mapping in the tree is visited once. Its scalar children are scanned
    in order for the first URL-like and the first date-like value; nested
    containers go back onto the worklist. Each mapping is judged on its own.
    """
    out = Extraction()
    worklist: List[Any] = [node]
    while worklist:
        current = worklist.pop()
        if isinstance(current, list):
            worklist.extend(current)
            continue
        if not isinstance(current, dict):
            continue

        found_url = ""
        found_date = ""
        for key, value in current.items():
            if isinstance(value, (dict, list)):
                worklist.append(value)
                continue
            text = str(value).strip()
            if not text:
                continue
            if not found_url and _looks_like_url(key, text):
                found_url = text
            if not found_date and _looks_like_date(key, text):
                found_date = text

        if not found_url:
            continue
        if lower_bound is None:
            out.add_url(found_url, base)
        elif found_date and includes(normalize(found_date), lower_bound):
            out.add_url(found_url, base)
    return out


EXTRACTORS: Final[Dict[Dialect, Extractor]] = {
    Dialect.SITEMAP_INDEX: extract_sitemap_index,
    Dialect.URL_SET: extract_url_set,
    Dialect.RSS: extract_rss,
    Dialect.ATOM: extract_atom,
    Dialect.RDF: extract_rdf,
    Dialect.GENERIC: extract_generic,
}


def extract(dialect: Dialect, node: Any, base: str, lower_bound: Timestamp = None) -> Extraction:
    """Run the extractor registered for *dialect*."""
    return EXTRACTORS[dialect](node, base, lower_bound)
