"""
Data models for the SitemapScout traversal.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sitemap_scout.errors import TransportError
from sitemap_scout.parser.dialects import Dialect


@dataclass(slots=True)
class FetchResult:
    """Raw outcome of one document fetch.

    ``final_url`` is the post-redirect URL and the base for relative references.
    ``error`` is set (and ``body`` empty) when the transport failed or the
    status was not a success.
    """

    url: str
    final_url: str
    status: Optional[int] = None
    content_type: str = ""
    content_encoding: str = ""
    charset: str = ""
    body: bytes = b""
    error: Optional[TransportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, url: str, reason: str, status: Optional[int] = None) -> FetchResult:
        return cls(url=url, final_url=url, status=status, error=TransportError(url, reason, status))


class UnitState(str, Enum):
    """Lifecycle of one queued document."""

    QUEUED = "queued"
    FETCHING = "fetching"
    EXPANDED = "expanded"
    HARVESTED = "harvested"
    SKIPPED = "skipped"


@dataclass(slots=True)
class StepOutcome:
    """What a single driver step did with the unit it dequeued."""

    url: str
    state: UnitState
    dialect: Optional[Dialect] = None
    discovered: int = 0
    emitted: int = 0
    reason: Optional[str] = None
