"""site_mapper.report: Вывод результатов обхода (XML-карта сайта) для CLI и тестов."""

from __future__ import annotations

from site_mapper.report.xml_sitemap import (
    SITEMAP_NAMESPACE,
    format_rfc3339,
    render_sitemap,
    sort_entries,
    write_sitemap,
)

__all__ = ["SITEMAP_NAMESPACE", "format_rfc3339", "render_sitemap", "sort_entries", "write_sitemap"]
