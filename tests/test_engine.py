# File: tests/test_engine.py
# End-to-end traversal against a local aiohttp server
from __future__ import annotations

import gzip
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from sitemap_scout import InvalidLowerBoundError, extract_urls
from sitemap_scout.config import HarvestConfig
from sitemap_scout.utils import is_absolute_url

from samples import sitemap_index, url_entry, urlset

XML = "application/xml"


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def sitemap_server(unused_tcp_port: int) -> AsyncIterator[str]:
    """Index → plain child, gzip child without headers, redirected child, missing child."""
    app = web.Application()
    base = f"http://127.0.0.1:{unused_tcp_port}"

    async def handle_index(_):
        return web.Response(
            text=sitemap_index("/posts.xml", f"{base}/archive.xml.gz", "/old-maps/sitemap.xml", "/missing.xml"),
            content_type=XML,
        )

    async def handle_posts(_):
        return web.Response(
            text=urlset(url_entry("/posts/new", "2024-03-01"), url_entry("/posts/old", "2023-01-01")),
            content_type=XML,
        )

    async def handle_archive(_):
        body = gzip.compress(urlset(url_entry("/archive/1", "2024-01-15"), url_entry("/posts/new")).encode())
        return web.Response(body=body, content_type="application/octet-stream")

    async def handle_moved(_):
        raise web.HTTPMovedPermanently("/maps/sitemap.xml")

    async def handle_moved_target(_):
        return web.Response(text=urlset(url_entry("article", "2024-05-05")), content_type=XML)

    async def handle_feed(_):
        feed = (
            '<rss version="2.0"><channel>'
            "<item><link>/feed/1</link><pubDate>Tue, 02 Jan 2024 10:00:00 GMT</pubDate></item>"
            "</channel></rss>"
        )
        return web.Response(
            body=gzip.compress(feed.encode("latin-1")),
            headers={"Content-Encoding": "gzip", "Content-Type": "application/rss+xml; charset=ISO-8859-1"},
        )

    app.router.add_get("/sitemap_index.xml", handle_index)
    app.router.add_get("/posts.xml", handle_posts)
    app.router.add_get("/archive.xml.gz", handle_archive)
    app.router.add_get("/old-maps/sitemap.xml", handle_moved)
    app.router.add_get("/maps/sitemap.xml", handle_moved_target)
    app.router.add_get("/feed.xml", handle_feed)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_full_traversal_without_bound(sitemap_server: str):
    urls = await extract_urls(f"{sitemap_server}/sitemap_index.xml", config=HarvestConfig(timeout=5))

    assert set(urls) == {
        f"{sitemap_server}/posts/new",
        f"{sitemap_server}/posts/old",
        f"{sitemap_server}/archive/1",
        f"{sitemap_server}/maps/article",
    }
    assert len(urls) == len(set(urls))
    assert all(is_absolute_url(u) for u in urls)


@pytest.mark.asyncio()
async def test_traversal_with_lower_bound(sitemap_server: str):
    urls = await extract_urls(f"{sitemap_server}/sitemap_index.xml", "2023-06-01")

    assert set(urls) == {
        f"{sitemap_server}/posts/new",
        f"{sitemap_server}/archive/1",
        f"{sitemap_server}/maps/article",
    }


@pytest.mark.asyncio()
async def test_gzip_magic_bytes_without_headers(sitemap_server: str):
    urls = await extract_urls(f"{sitemap_server}/archive.xml.gz")
    assert urls == [f"{sitemap_server}/archive/1", f"{sitemap_server}/posts/new"]


@pytest.mark.asyncio()
async def test_gzip_content_encoding_and_declared_charset(sitemap_server: str):
    urls = await extract_urls(f"{sitemap_server}/feed.xml", 1704067200)
    assert urls == [f"{sitemap_server}/feed/1"]


@pytest.mark.asyncio()
async def test_unreachable_root_yields_empty_result(sitemap_server: str):
    assert await extract_urls(f"{sitemap_server}/missing.xml") == []


@pytest.mark.asyncio()
async def test_config_lower_bound_is_the_default(sitemap_server: str):
    cfg = HarvestConfig(from_date="2024-04-01")
    urls = await extract_urls(f"{sitemap_server}/sitemap_index.xml", config=cfg)
    assert urls == [f"{sitemap_server}/maps/article"]


@pytest.mark.asyncio()
@pytest.mark.parametrize("from_date", ["not-a-date", "Monday", "10:30"])
async def test_invalid_lower_bound_rejects_before_any_fetch(fake_source, from_date):
    source = fake_source({})
    with pytest.raises(InvalidLowerBoundError):
        await extract_urls("https://example.com/sitemap.xml", from_date, source=source)
    assert source.calls == []


@pytest.mark.asyncio()
async def test_injected_source(fake_source):
    source = fake_source({"https://example.com/sitemap.xml": urlset(url_entry("/a", "2024-01-01"))})
    urls = await extract_urls("https://example.com/sitemap.xml", "", source=source)
    assert urls == ["https://example.com/a"]


@pytest.mark.asyncio()
async def test_malformed_date_in_one_child_does_not_abort_traversal(fake_source):
    source = fake_source(
        {
            "https://example.com/i.xml": sitemap_index("/good.xml", "/bad.xml"),
            "https://example.com/good.xml": urlset(url_entry("/kept", "2024-01-01")),
            "https://example.com/bad.xml": urlset(url_entry("/broken", "2024-01-01T00:00:00+25:00")),
        }
    )
    urls = await extract_urls("https://example.com/i.xml", "2023-01-01", source=source)
    assert urls == ["https://example.com/kept"]
