# File: sitemap_scout/engine.py
"""sitemap_scout.engine: public entry point tying configuration, fetcher and driver together."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Union

from sitemap_scout.config import HarvestConfig
from sitemap_scout.crawler.fetcher import DocumentFetcher
from sitemap_scout.crawler.harvester import DocumentSource, Harvester
from sitemap_scout.dates import parse_lower_bound
from sitemap_scout.logger import logger

__all__ = ["extract_urls"]

FromDate = Union[str, int, float, datetime, date, None]


async def extract_urls(
    xml_url: str,
    from_date: FromDate = None,
    *,
    config: Optional[HarvestConfig] = None,
    source: Optional[DocumentSource] = None,
) -> List[str]:
    """Collect the absolute URLs published by a sitemap or feed.

    Sitemap indexes are followed recursively. With *from_date*, only entries
    whose best timestamp is on or after it are kept; entries without a usable
    date are then dropped. The result is deduplicated in first-seen order.

    Raises :class:`~sitemap_scout.errors.InvalidLowerBoundError` before any
    request is made when *from_date* cannot be parsed. Every other failure only
    skips the affected document.

    Example:
    ```python
    import asyncio
    from sitemap_scout import extract_urls

    urls = asyncio.run(extract_urls("https://example.com/sitemap.xml", "2024-01-01"))
    ```
    """
    config = config or HarvestConfig()
    if from_date is None:
        from_date = config.from_date
    lower_bound = parse_lower_bound(from_date)

    logger.info("Starting traversal of %s (from %s)", xml_url, from_date if lower_bound is not None else "any date")
    if source is not None:
        return await _traverse(source, xml_url, lower_bound, config)
    async with DocumentFetcher(config) as fetcher:
        return await _traverse(fetcher, xml_url, lower_bound, config)


async def _traverse(
    source: DocumentSource, xml_url: str, lower_bound: Optional[int], config: HarvestConfig
) -> List[str]:
    harvester = Harvester(source, lower_bound=lower_bound, max_documents=config.max_documents)
    harvester.seed(xml_url)
    return await harvester.run()
