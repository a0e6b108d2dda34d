"""
Crawl driver: owns the work queue, the visited set and the result set.

Documents are processed strictly one at a time. The most recently discovered
document is visited next, so sitemap indexes are explored depth-first.
"""
from __future__ import annotations

import time
from typing import Dict, List, Optional, Protocol, Set

from sitemap_scout.crawler.decoding import decode_body, maybe_gunzip
from sitemap_scout.crawler.models import FetchResult, StepOutcome, UnitState
from sitemap_scout.dates import Timestamp
from sitemap_scout.errors import DocumentParseError
from sitemap_scout.logger import get_logger
from sitemap_scout.parser.dialects import classify
from sitemap_scout.parser.extractors import extract
from sitemap_scout.parser.xml_tree import parse_document
from sitemap_scout.utils import resolve_url

__all__ = ("DocumentSource", "Harvester")


class DocumentSource(Protocol):
    """Anything that can fetch a document; the network one is DocumentFetcher."""

    async def fetch(self, url: str) -> FetchResult:
        ...


class Harvester:
    """Traversal state machine over sitemap and feed documents."""

    def __init__(
        self,
        source: DocumentSource,
        lower_bound: Timestamp = None,
        max_documents: Optional[int] = None,
    ) -> None:
        self.source = source
        self.lower_bound = lower_bound
        self.max_documents = max_documents
        self.queue: List[str] = []
        self.visited: Set[str] = set()
        self.fetched = 0
        self._results: Dict[str, None] = {}
        self.logger = get_logger("harvester")

    @property
    def results(self) -> List[str]:
        return list(self._results)

    @property
    def done(self) -> bool:
        if not self.queue:
            return True
        return self.max_documents is not None and self.fetched >= self.max_documents

    def seed(self, url: str) -> None:
        """Queue the entry document."""
        url = url.strip()
        self.queue.append(resolve_url(url, url) or url)

    async def step(self) -> StepOutcome:
        """Dequeue one document and carry it to a terminal state.

        On an empty queue nothing is fetched and a SKIPPED outcome is returned.
        """
        if not self.queue:
            return StepOutcome("", UnitState.SKIPPED, reason="queue empty")
        url = self.queue.pop()
        if not url or url in self.visited:
            return StepOutcome(url, UnitState.SKIPPED, reason="already visited")
        self.visited.add(url)

        self.fetched += 1
        self.logger.debug("%s %s", UnitState.FETCHING.value, url)
        fetched = await self.source.fetch(url)
        if not fetched.ok:
            self.logger.warning("Skipping %s: %s", url, fetched.error.reason)
            return StepOutcome(url, UnitState.SKIPPED, reason=fetched.error.reason)

        body = maybe_gunzip(fetched.body, fetched.content_encoding, fetched.content_type)
        text = decode_body(body, fetched.content_type, fetched.charset)
        try:
            tree = parse_document(text)
        except DocumentParseError as exc:
            self.logger.warning("Skipping %s: unparseable XML (%s)", url, exc)
            return StepOutcome(url, UnitState.SKIPPED, reason=f"parse error: {exc}")

        base = fetched.final_url or url
        classification = classify(tree)
        extraction = extract(classification.dialect, classification.node, base, self.lower_bound)

        discovered = 0
        for child_url in extraction.sitemaps:
            if child_url not in self.visited:
                self.queue.append(child_url)
                self.logger.debug("%s %s", UnitState.QUEUED.value, child_url)
                discovered += 1

        emitted = 0
        for result in extraction.urls:
            if result not in self._results:
                self._results[result] = None
                emitted += 1

        state = UnitState.EXPANDED if classification.dialect.expands else UnitState.HARVESTED
        self.logger.debug(
            "%s %s as %s: +%d documents, +%d urls",
            state.value, url, classification.dialect.value, discovered, emitted,
        )
        return StepOutcome(url, state, classification.dialect, discovered, emitted)

    async def run(self) -> List[str]:
        """Step until the queue is empty (or the document cap is hit)."""
        start = time.monotonic()
        while not self.done:
            await self.step()
        if self.queue:
            self.logger.warning(
                "Stopped after %d documents, %d still queued", self.fetched, len(self.queue)
            )
        duration = time.monotonic() - start
        self.logger.info(
            "Finished: %d urls from %d documents in %.2f s", len(self._results), self.fetched, duration
        )
        return self.results
