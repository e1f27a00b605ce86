# site_mapper/crawler/fetcher.py
"""
Fetcher module: one GET per URL over a shared aiohttp session, no retries.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from site_mapper.config import SitemapOptions
from site_mapper.crawler.models import FetchResult

HTML_CONTENT_TYPE = "text/html"
#: Seconds an idle keep-alive connection stays in the pool before it is closed.
IDLE_CONNECTION_TIMEOUT = 15.0


class FetchError(Exception):
    """Transport failure: connection refused, reset, timed out, ..."""

    def __init__(self, url: str, reason: BaseException) -> None:
        super().__init__(f"{url}: {str(reason) or type(reason).__name__}")
        self.url = url
        self.reason = reason


def is_html(content_type: str) -> bool:
    return content_type.strip().lower().startswith(HTML_CONTENT_TYPE)


class Fetcher:
    """Handles HTTP fetching with a fixed per-request timeout.

    Use as an async context manager, or hand in an existing *session*
    (the caller then owns it).
    """

    def __init__(self, options: SitemapOptions, session: Optional[ClientSession] = None) -> None:
        self.options = options
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            # limit=0: no cap on in-flight requests, the crawl fans out freely;
            # idle connections are bounded by time instead
            self.session = ClientSession(
                connector=TCPConnector(limit=0, keepalive_timeout=IDLE_CONNECTION_TIMEOUT),
                timeout=ClientTimeout(total=self.options.timeout),
                headers={"User-Agent": self.options.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url*, following redirects.

        The body is read only for ``200 text/html`` responses. Raises
        :class:`FetchError` on transport errors and timeouts.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                content_type = resp.headers.get("Content-Type", "")
                body = b""
                if resp.status == 200 and is_html(content_type):
                    body = await resp.read()
                return FetchResult(
                    url=str(resp.url),
                    status=resp.status,
                    content_type=content_type,
                    body=body,
                )
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(url, exc) from exc
