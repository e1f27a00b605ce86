# site_mapper/crawler/urls.py
"""
URL normalization for SiteMapper.

Every URL the crawler meets is turned into a canonical string which is the
registry key: two links point at "the same page" iff their canonical strings
are equal. Canonical form:

* scheme, host and port of the crawl's :class:`BaseURL`;
* path always ending with ``/`` (``/about`` and ``/about/`` are one page);
* query and fragment stripped unless the caller asks to keep them.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

__all__ = (
    "BaseURL",
    "CrossOriginError",
    "URLError",
    "URLSyntaxError",
    "UnsupportedSchemeError",
    "normalize",
    "normalize_base",
    "to_fetch_url",
)

_SUPPORTED_SCHEMES = ("http", "https")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class URLError(ValueError):
    """Base class for URLs the crawler refuses to use."""


class URLSyntaxError(URLError):
    """The raw string is not a well-formed URL."""


class CrossOriginError(URLError):
    """The URL lives outside the crawled origin."""


class UnsupportedSchemeError(URLError):
    """The seed URL uses a scheme other than http(s)."""


@dataclass(slots=True, frozen=True)
class BaseURL:
    """Normalized seed URL; fixed for the whole crawl run."""

    scheme: str
    host: str
    port: Optional[int]
    path: str
    query: str = ""
    fragment: str = ""

    @property
    def netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return host if self.port is None else f"{host}:{self.port}"

    @property
    def url(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, self.fragment))

    def same_origin(self, parts: SplitResult) -> bool:
        return (
            parts.scheme.lower() == self.scheme
            and (parts.hostname or "") == self.host
            and parts.port == self.port
        )

    def __str__(self) -> str:
        return self.url


def _split(raw: str) -> SplitResult:
    if _CONTROL_RE.search(raw):
        raise URLSyntaxError(f"invalid control character in URL {raw!r}")
    if _BAD_ESCAPE_RE.search(raw):
        raise URLSyntaxError(f"invalid percent-escape in URL {raw!r}")
    try:
        parts = urlsplit(raw)
        parts.port  # raises on a non-numeric or out-of-range port
    except ValueError as exc:
        raise URLSyntaxError(f"cannot parse URL {raw!r}: {exc}") from exc
    return parts


def _with_trailing_slash(path: str) -> str:
    if not path:
        return "/"
    return path if path.endswith("/") else path + "/"


def normalize_base(
    raw: str, *, ignore_query: bool = True, ignore_fragment: bool = True
) -> BaseURL:
    """Parse the seed URL, filling in whatever it lacks.

    Missing scheme → ``http``, missing host → ``localhost``, missing path →
    ``/``; the path always gets a trailing slash. A schemeless
    ``example.com/docs`` is read as host + path, while ``/docs`` is a path on
    ``localhost``.
    """
    raw = raw.strip()
    if "://" not in raw and not raw.startswith("/"):
        raw = "http://" + raw
    parts = _split(raw)

    scheme = (parts.scheme or "http").lower()
    if scheme not in _SUPPORTED_SCHEMES:
        raise UnsupportedSchemeError(f"unsupported scheme {scheme!r} in {raw!r}")

    base = BaseURL(
        scheme=scheme,
        host=parts.hostname or "localhost",
        port=parts.port,
        path=_with_trailing_slash(parts.path),
        query=parts.query,
        fragment=parts.fragment,
    )
    if ignore_query:
        base = replace(base, query="")
    if ignore_fragment:
        base = replace(base, fragment="")
    return base


def normalize(
    raw: str,
    base: BaseURL,
    *,
    ignore_query: bool = True,
    ignore_fragment: bool = True,
    page_url: Optional[str] = None,
) -> str:
    """Return the canonical form of *raw* as found on a page of the crawl.

    Absolute URLs must share scheme, hostname and port with *base*. Relative
    references are resolved against *page_url* (the page that carried the
    link) or, without one, against *base*; the result is origin-checked too,
    so ``//other-host/`` is rejected like any foreign link.

    Raises :class:`URLSyntaxError` or :class:`CrossOriginError`.
    """
    parts = _split(raw)
    if not parts.scheme:
        parts = _split(urljoin(page_url or base.url, raw))

    if not base.same_origin(parts):
        raise CrossOriginError(f"URL {raw} is not on the same origin as {base}")

    return urlunsplit(
        (
            base.scheme,
            base.netloc,
            _with_trailing_slash(parts.path),
            "" if ignore_query else parts.query,
            "" if ignore_fragment else parts.fragment,
        )
    )


def to_fetch_url(url: str) -> str:
    """URL to request for a canonical *url*: trailing slash and fragment dropped."""
    parts = urlsplit(url)
    path = parts.path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return urlunsplit((parts.scheme, parts.netloc, path or "/", parts.query, ""))
