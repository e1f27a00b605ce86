# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Dict, Optional

import pytest
from aiohttp import web

from site_mapper.config import SitemapOptions
from site_mapper.crawler.fetcher import FetchError
from site_mapper.crawler.models import FetchResult

FIXED_LASTMOD = datetime(2023, 1, 1, tzinfo=timezone.utc)


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture()
def options() -> SitemapOptions:
    """Default options with a fixed <lastmod> so output is reproducible."""
    return SitemapOptions(last_mod=FIXED_LASTMOD, timeout=2.0)


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def html(body: str) -> web.Response:
    return web.Response(text=f"<html><body>{body}</body></html>", content_type="text/html")


class FakeFetcher:
    """In-memory stand-in for :class:`site_mapper.crawler.fetcher.Fetcher`.

    *pages* maps a request URL to an HTML body, a ``FetchResult`` or an
    exception instance (raised as a transport error).
    """

    def __init__(self, pages: Dict[str, object]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.requested.append(url)
        page: Optional[object] = self.pages.get(url)
        if page is None:
            return FetchResult(url=url, status=404, content_type="text/plain")
        if isinstance(page, BaseException):
            raise FetchError(url, page)
        if isinstance(page, FetchResult):
            return page
        return FetchResult(
            url=url,
            status=200,
            content_type="text/html; charset=utf-8",
            body=str(page).encode("utf-8"),
        )
