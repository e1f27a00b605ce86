from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Set

from site_mapper.config import SitemapOptions
from site_mapper.crawler.fetcher import Fetcher, FetchError, is_html
from site_mapper.crawler.link_extractor import HTMLParseError, iter_hrefs, parse_html
from site_mapper.crawler.registry import VisitedRegistry
from site_mapper.crawler.urls import BaseURL, URLError, normalize, to_fetch_url
from site_mapper.logger import LOGGER_NAME

__all__ = ("SitemapCrawler",)


class SitemapCrawler:
    """Асинхронный краулер одного сайта: задача на каждую найденную ссылку.

    Each discovered link gets its own task; a page does not wait for the
    tasks it spawns. A pending-task counter acts as the barrier: :meth:`crawl`
    returns once it drops back to zero. Fetch, status, content-type and parse
    failures end only the task they happen in.
    """

    def __init__(
        self,
        base: BaseURL,
        options: SitemapOptions,
        fetcher: Fetcher,
        registry: Optional[VisitedRegistry] = None,
    ) -> None:
        self.base = base
        self.options = options
        self.fetcher = fetcher
        self.registry = registry if registry is not None else VisitedRegistry()
        self.logger = logging.getLogger(LOGGER_NAME)
        self._pending = 0
        self._idle = asyncio.Event()
        self._tasks: Set[asyncio.Task[None]] = set()
        self._errors: List[BaseException] = []

    async def crawl(self) -> VisitedRegistry:
        """Crawl from the base URL until every spawned task has finished."""
        self.logger.info("Старт обхода: %s", self.base)
        start = time.monotonic()
        self._spawn(self.base.url, 0)
        try:
            await self._idle.wait()
        finally:
            for task in list(self._tasks):
                task.cancel()
        if self._errors:
            raise self._errors[0]
        duration = time.monotonic() - start
        listed = len(self.registry.snapshot())
        self.logger.info(
            "Завершено: %d URL найдено, %d в карте сайта за %.2f с",
            len(self.registry), listed, duration,
        )
        return self.registry

    def _spawn(self, url: str, depth: int) -> None:
        self._pending += 1
        self._idle.clear()
        task = asyncio.create_task(self._crawl_url(url, depth))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self.logger.error("Crawl task failed: %r", task.exception())
            self._errors.append(task.exception())
        self._pending -= 1
        if self._pending == 0:
            self._idle.set()

    def _trace(self, msg: str, *args: object) -> None:
        self.logger.log(logging.INFO if self.options.verbose else logging.DEBUG, msg, *args)

    async def _crawl_url(self, url: str, depth: int) -> None:
        if not self.registry.claim(url, depth):
            self._trace("Skipping %s: already crawled", url)
            return
        self._trace("Crawling %s (depth %d)", url, depth)

        fetch_url = to_fetch_url(url)
        try:
            result = await self.fetcher.fetch(fetch_url)
        except FetchError as exc:
            self._trace("Error crawling %s: %r", url, exc.reason)
            self.registry.invalidate(url)
            return

        if result.status != 200:
            self._trace("Skipping %s: status code %d", url, result.status)
            self.registry.invalidate(url)
            return
        if not is_html(result.content_type):
            self._trace("Skipping %s: content type %r", url, result.content_type)
            self.registry.invalidate(url)
            return

        try:
            soup = parse_html(result.body)
        except HTMLParseError as exc:
            # still listed, just a dead end
            self._trace("Error parsing %s: %s", url, exc)
            return

        # canonical URL keeps its trailing slash; after a redirect the target wins
        page_url = url if result.url == fetch_url else result.url
        for href in iter_hrefs(soup):
            try:
                link = normalize(
                    href,
                    self.base,
                    ignore_query=self.options.ignore_query,
                    ignore_fragment=self.options.ignore_fragment,
                    page_url=page_url,
                )
            except URLError as exc:
                self._trace("Dropping link %r on %s: %s", href, url, exc)
                continue
            self._spawn(link, depth + 1)
