# File: site_mapper/engine.py
"""site_mapper.engine: Точка входа — обход сайта от seed URL и запись XML-карты сайта."""

from __future__ import annotations

from typing import IO, Any, Optional

from site_mapper.config import SitemapOptions
from site_mapper.crawler.crawler import SitemapCrawler
from site_mapper.crawler.fetcher import Fetcher
from site_mapper.crawler.registry import VisitedRegistry
from site_mapper.crawler.urls import normalize_base
from site_mapper.logger import logger
from site_mapper.report.xml_sitemap import write_sitemap

__all__ = ["crawl_site", "generate"]


async def crawl_site(
    seed_url: str,
    options: Optional[SitemapOptions] = None,
    fetcher: Optional[Fetcher] = None,
) -> VisitedRegistry:
    """Обходит сайт и возвращает итоговый реестр.

    Некорректный seed URL — ошибка вызывающего (URLError), до любых запросов.
    """
    if options is None:
        options = SitemapOptions()
    base = normalize_base(
        seed_url,
        ignore_query=options.ignore_query,
        ignore_fragment=options.ignore_fragment,
    )
    if fetcher is not None:
        return await SitemapCrawler(base, options, fetcher).crawl()
    async with Fetcher(options) as own_fetcher:
        return await SitemapCrawler(base, options, own_fetcher).crawl()


async def generate(
    sink: IO[Any],
    seed_url: str,
    options: Optional[SitemapOptions] = None,
    fetcher: Optional[Fetcher] = None,
) -> None:
    """Обходит сайт от seed_url и пишет карту сайта в sink.

    Ошибки отдельных страниц обрабатываются внутри обхода; наружу выходят
    только ошибки seed URL и ошибки записи в sink.
    """
    if options is None:
        options = SitemapOptions()
    registry = await crawl_site(seed_url, options, fetcher)
    try:
        write_sitemap(
            sink,
            registry.snapshot(),
            change_freq=options.change_freq,
            last_mod=options.last_mod,
        )
    except OSError as exc:
        logger.error("Writing sitemap failed: %s", exc)
        raise
