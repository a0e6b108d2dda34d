# File: tests/conftest.py
import logging
from typing import Dict, List, Union

import pytest

from sitemap_scout.crawler.models import FetchResult
from sitemap_scout.logger import LOGGER_NAME


class FakeSource:
    """In-memory document source recording every fetch."""

    def __init__(self, documents: Dict[str, Union[str, bytes, FetchResult]]) -> None:
        self.documents = documents
        self.calls: List[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        doc = self.documents.get(url)
        if doc is None:
            return FetchResult.failure(url, "HTTP 404", status=404)
        if isinstance(doc, FetchResult):
            return doc
        body = doc.encode("utf-8") if isinstance(doc, str) else doc
        return FetchResult(
            url=url,
            final_url=url,
            status=200,
            content_type="application/xml; charset=utf-8",
            body=body,
        )


@pytest.fixture()
def fake_source():
    """Factory building a FakeSource from a url → document mapping."""
    return FakeSource


@pytest.fixture(autouse=True)
def reset_project_logger():
    """CLI tests reconfigure the project logger; restore propagation afterwards."""
    yield
    lg = logging.getLogger(LOGGER_NAME)
    lg.handlers.clear()
    lg.propagate = True
    lg.setLevel(logging.NOTSET)
