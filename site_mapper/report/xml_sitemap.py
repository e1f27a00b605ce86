"""site_mapper.report.xml_sitemap: Сериализация результатов обхода в XML по протоколу sitemaps.org."""

from __future__ import annotations

import io
from datetime import datetime, timedelta
from pathlib import Path
from typing import IO, Any, Iterable, List, Optional, Union

from jinja2 import Environment, select_autoescape

from site_mapper.crawler.models import SitemapEntry

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

# Byte-exact layout; no newline after </urlset>.
_SITEMAP_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<urlset xmlns="{{ namespace }}">\n'
    "{% for entry in entries %}"
    "  <url>\n"
    "    <loc>{{ entry.loc }}</loc>\n"
    "    <lastmod>{{ lastmod }}</lastmod>\n"
    '    <priority>{{ "%.1f"|format(entry.priority) }}</priority>'
    "{% if changefreq %}\n    <changefreq>{{ changefreq }}</changefreq>{% endif %}\n"
    "  </url>\n"
    "{% endfor %}"
    "</urlset>"
)

_env = Environment(
    autoescape=select_autoescape(enabled_extensions=("xml",), default_for_string=True),
)
_template = _env.from_string(_SITEMAP_TEMPLATE)


def format_rfc3339(moment: datetime) -> str:
    """RFC 3339 без долей секунды; UTC выводится как ``Z``, наивное время считается локальным."""
    if moment.tzinfo is None or moment.utcoffset() is None:
        moment = moment.astimezone()
    moment = moment.replace(microsecond=0)
    if moment.utcoffset() == timedelta(0):
        return moment.strftime("%Y-%m-%dT%H:%M:%SZ")
    return moment.isoformat()


def sort_entries(entries: Iterable[SitemapEntry]) -> List[SitemapEntry]:
    """Каноничный порядок: по глубине, затем по URL."""
    return sorted(entries, key=SitemapEntry.sort_key)


def write_sitemap(
    sink: IO[Any],
    entries: Iterable[SitemapEntry],
    *,
    change_freq: str = "",
    last_mod: Optional[datetime] = None,
) -> None:
    """
    Пишет карту сайта в sink по частям.

    :param sink: текстовый или бинарный поток (бинарный получает UTF-8)
    :param entries: валидные записи реестра в любом порядке
    :param change_freq: значение <changefreq>; пустое — элемент не выводится
    :param last_mod: общий <lastmod>; по умолчанию — текущее время

    Ошибки записи пробрасываются сразу; уже записанное не откатывается.
    """
    binary = isinstance(sink, (io.RawIOBase, io.BufferedIOBase))
    stream = _template.generate(
        namespace=SITEMAP_NAMESPACE,
        entries=sort_entries(entries),
        lastmod=format_rfc3339(last_mod or datetime.now().astimezone()),
        changefreq=change_freq,
    )
    for chunk in stream:
        sink.write(chunk.encode("utf-8") if binary else chunk)


def render_sitemap(
    entries: Iterable[SitemapEntry],
    output_path: Union[Path, str],
    *,
    change_freq: str = "",
    last_mod: Optional[datetime] = None,
) -> Path:
    """Сохраняет карту сайта в файл и возвращает его путь."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8", newline="") as f:
        write_sitemap(f, entries, change_freq=change_freq, last_mod=last_mod)
    return output


__all__ = [
    "SITEMAP_NAMESPACE",
    "format_rfc3339",
    "render_sitemap",
    "sort_entries",
    "write_sitemap",
]
