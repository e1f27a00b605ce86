# site_mapper/crawler/models.py
"""
Data models for the SiteMapper crawler.
"""
from __future__ import annotations

from dataclasses import dataclass

#: Lowest priority a sitemap entry can get, however deep it sits.
MIN_PRIORITY = 0.1


def priority_for_depth(depth: int) -> float:
    """1.0 for the seed, minus 0.1 per link hop, never below :data:`MIN_PRIORITY`."""
    return max(MIN_PRIORITY, 1.0 - 0.1 * depth)


@dataclass(slots=True, frozen=True)
class FetchResult:
    """Outcome of one HTTP request.

    ``body`` is only downloaded for ``200 text/html`` responses and is empty
    otherwise. ``url`` is the final URL after redirects.
    """

    url: str
    status: int
    content_type: str
    body: bytes = b""


@dataclass(slots=True, frozen=True)
class SitemapEntry:
    """A valid registry entry projected for serialization."""

    loc: str
    depth: int

    @property
    def priority(self) -> float:
        return priority_for_depth(self.depth)

    def sort_key(self) -> tuple[int, str]:
        return self.depth, self.loc
