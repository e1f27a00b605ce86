# site_mapper/crawler/link_extractor.py
"""
HTML parsing and anchor extraction for SiteMapper.
"""
from __future__ import annotations

from typing import Iterator, Union

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag


class HTMLParseError(Exception):
    """The body could not be parsed as HTML."""


def parse_html(markup: Union[str, bytes]) -> BeautifulSoup:
    """Parse *markup* with the stdlib-backed ``html.parser`` builder."""
    try:
        return BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as exc:
        raise HTMLParseError(str(exc)) from exc


def iter_hrefs(soup: BeautifulSoup) -> Iterator[str]:
    """
    Yield the whitespace-trimmed ``href`` of every ``<a>``, in document order.

    No filtering happens here: ``mailto:``, foreign hosts and the like are
    rejected later by URL normalization.
    """
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        yield href_val.strip()
