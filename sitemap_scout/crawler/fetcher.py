"""
Fetcher module: retrieves one document over HTTP, following redirects.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from sitemap_scout.config import HarvestConfig
from sitemap_scout.crawler.models import FetchResult
from sitemap_scout.logger import get_logger

__all__ = ("DocumentFetcher",)

log = get_logger("fetcher")


class DocumentFetcher:
    """aiohttp-backed document source.

    Bodies are returned exactly as sent (no transparent decompression) so the
    caller decides how to gunzip. Failures are reported in the result, never raised.
    """

    def __init__(self, config: Optional[HarvestConfig] = None, session: Optional[ClientSession] = None) -> None:
        self.config = config or HarvestConfig()
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> DocumentFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent, "Accept-Encoding": "gzip"},
                auto_decompress=False,
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> FetchResult:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url, allow_redirects=True) as resp:
                final_url = str(resp.url)
                if not 200 <= resp.status < 300:
                    return FetchResult.failure(url, f"HTTP {resp.status}", status=resp.status)
                body = await resp.read()
                return FetchResult(
                    url=url,
                    final_url=final_url,
                    status=resp.status,
                    content_type=resp.headers.get("Content-Type", "").lower(),
                    content_encoding=resp.headers.get("Content-Encoding", "").lower(),
                    charset=(resp.charset or "").lower(),
                    body=body,
                )
        except asyncio.TimeoutError:
            return FetchResult.failure(url, "timeout")
        except (ClientError, ValueError) as exc:
            return FetchResult.failure(url, f"{type(exc).__name__}: {exc}")
