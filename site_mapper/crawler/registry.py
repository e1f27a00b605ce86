# site_mapper/crawler/registry.py
"""
Visited registry: canonical URL → shallowest depth it was reached at.

The registry is the only state crawl tasks share. Every operation holds a
single lock for its whole duration. Entries are never removed; an invalid
entry stays claimed so the URL is not fetched again.
"""
from __future__ import annotations

import threading
from typing import Dict, List

from site_mapper.crawler.models import SitemapEntry

__all__ = ("VisitedRegistry",)


class VisitedRegistry:
    """Concurrency-safe claim/invalidate store, one per crawl run."""

    def __init__(self) -> None:
        self._depths: Dict[str, int] = {}
        self._invalid: set[str] = set()
        self._lock = threading.Lock()

    def claim(self, url: str, depth: int) -> bool:
        """Record *url* at *depth*; True only for the first claimant.

        A repeated claim lowers the stored depth to ``min(old, depth)`` and
        returns False. Invalid entries keep their marker.
        """
        with self._lock:
            seen = self._depths.get(url)
            if seen is None:
                self._depths[url] = depth
                return True
            if depth < seen and url not in self._invalid:
                self._depths[url] = depth
            return False

    def invalidate(self, url: str) -> None:
        """Exclude a claimed *url* from the sitemap."""
        with self._lock:
            if url not in self._depths:
                raise KeyError(f"cannot invalidate unclaimed URL {url}")
            self._invalid.add(url)

    def snapshot(self) -> List[SitemapEntry]:
        """All valid entries, unordered. Call only once the crawl has finished."""
        with self._lock:
            return [
                SitemapEntry(loc=url, depth=depth)
                for url, depth in self._depths.items()
                if url not in self._invalid
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._depths)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._depths
