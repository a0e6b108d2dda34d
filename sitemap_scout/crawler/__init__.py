"""sitemap_scout.crawler: fetching, decoding and the traversal driver."""

from sitemap_scout.crawler.fetcher import DocumentFetcher
from sitemap_scout.crawler.harvester import DocumentSource, Harvester
from sitemap_scout.crawler.models import FetchResult, StepOutcome, UnitState

__all__ = ["DocumentFetcher", "DocumentSource", "Harvester", "FetchResult", "StepOutcome", "UnitState"]
