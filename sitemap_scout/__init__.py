"""
SitemapScout package initializer.
Defines package version and exposes the extraction API.
"""
__version__ = "0.1.0"

from sitemap_scout.engine import extract_urls
from sitemap_scout.errors import InvalidLowerBoundError, SitemapScoutError

__all__ = ["__version__", "extract_urls", "InvalidLowerBoundError", "SitemapScoutError"]
