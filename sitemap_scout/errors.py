"""Exception hierarchy for SitemapScout.

Only :class:`InvalidLowerBoundError` ever reaches the caller of
:func:`sitemap_scout.extract_urls`; the other kinds are recovered inside the
traversal and downgrade a single document or candidate.
"""
from __future__ import annotations

from typing import Any

__all__ = (
    "SitemapScoutError",
    "InvalidLowerBoundError",
    "TransportError",
    "DocumentParseError",
)


class SitemapScoutError(Exception):
    """Base class for all project errors."""


class InvalidLowerBoundError(SitemapScoutError, ValueError):
    """The ``from_date`` lower bound could not be normalized to a timestamp."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid 'from_date': {value!r}")


class TransportError(SitemapScoutError):
    """A fetch raised or answered with a non-success status."""

    def __init__(self, url: str, reason: str, status: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")


class DocumentParseError(SitemapScoutError):
    """A fetched document could not be turned into a tree."""
