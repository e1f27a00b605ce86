import io
import re
from datetime import datetime, timedelta, timezone

import pytest

from site_mapper.crawler.models import SitemapEntry, priority_for_depth
from site_mapper.report.xml_sitemap import format_rfc3339, render_sitemap, sort_entries, write_sitemap

from conftest import FIXED_LASTMOD

HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
)

ENTRIES = [
    SitemapEntry("http://localhost:9876/terms-and-conditions/", 1),
    SitemapEntry("http://localhost:9876/", 0),
    SitemapEntry("http://localhost:9876/about-us/", 1),
]


def render(entries, **kwargs) -> str:
    sink = io.StringIO()
    kwargs.setdefault("last_mod", FIXED_LASTMOD)
    write_sitemap(sink, entries, **kwargs)
    return sink.getvalue()


@pytest.mark.parametrize(
    "depth,expected",
    [(0, "1.0"), (1, "0.9"), (3, "0.7"), (8, "0.2"), (9, "0.1"), (12, "0.1")],
)
def test_priority_by_depth(depth, expected):
    assert f"{priority_for_depth(depth):.1f}" == expected
    assert f"{SitemapEntry('http://x/', depth).priority:.1f}" == expected


def test_sitemap_exact_output():
    expected = (
        HEADER
        + "  <url>\n"
        "    <loc>http://localhost:9876/</loc>\n"
        "    <lastmod>2023-01-01T00:00:00Z</lastmod>\n"
        "    <priority>1.0</priority>\n"
        "  </url>\n"
        "  <url>\n"
        "    <loc>http://localhost:9876/about-us/</loc>\n"
        "    <lastmod>2023-01-01T00:00:00Z</lastmod>\n"
        "    <priority>0.9</priority>\n"
        "  </url>\n"
        "  <url>\n"
        "    <loc>http://localhost:9876/terms-and-conditions/</loc>\n"
        "    <lastmod>2023-01-01T00:00:00Z</lastmod>\n"
        "    <priority>0.9</priority>\n"
        "  </url>\n"
        "</urlset>"
    )
    assert render(ENTRIES) == expected


def test_empty_sitemap():
    assert render([]) == HEADER + "</urlset>"


def test_changefreq_omitted_when_empty():
    out = render(ENTRIES)
    assert "changefreq" not in out
    assert not out.endswith("\n")


def test_changefreq_on_every_entry():
    out = render(ENTRIES, change_freq="monthly")
    assert out.count("<changefreq>monthly</changefreq>") == len(ENTRIES)
    assert (
        "    <priority>1.0</priority>\n"
        "    <changefreq>monthly</changefreq>\n"
        "  </url>\n"
    ) in out


def test_entries_sorted_by_depth_then_url():
    entries = [
        SitemapEntry("http://e.com/b/", 2),
        SitemapEntry("http://e.com/z/", 1),
        SitemapEntry("http://e.com/a/", 2),
        SitemapEntry("http://e.com/", 0),
        SitemapEntry("http://e.com/c/", 1),
    ]
    assert [e.loc for e in sort_entries(entries)] == [
        "http://e.com/",
        "http://e.com/c/",
        "http://e.com/z/",
        "http://e.com/a/",
        "http://e.com/b/",
    ]
    locs = re.findall(r"<loc>(.*?)</loc>", render(entries))
    assert locs == [e.loc for e in sort_entries(entries)]


def test_loc_is_xml_escaped():
    out = render([SitemapEntry("http://e.com/?a=1&b=<2>", 0)])
    assert "<loc>http://e.com/?a=1&amp;b=&lt;2&gt;</loc>" in out


def test_lastmod_defaults_to_now():
    out = render(ENTRIES, last_mod=None)
    stamps = set(re.findall(r"<lastmod>(.*?)</lastmod>", out))
    assert len(stamps) == 1
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d(Z|[+-]\d\d:\d\d)", stamps.pop())


@pytest.mark.parametrize(
    "moment,expected",
    [
        (datetime(2023, 1, 1, tzinfo=timezone.utc), "2023-01-01T00:00:00Z"),
        (datetime(2023, 6, 5, 7, 8, 9, 123456, tzinfo=timezone.utc), "2023-06-05T07:08:09Z"),
        (
            datetime(2023, 6, 5, 7, 8, 9, tzinfo=timezone(timedelta(hours=2))),
            "2023-06-05T07:08:09+02:00",
        ),
        (
            datetime(2023, 6, 5, 7, 8, 9, tzinfo=timezone(timedelta(hours=-5, minutes=-30))),
            "2023-06-05T07:08:09-05:30",
        ),
    ],
)
def test_format_rfc3339(moment, expected):
    assert format_rfc3339(moment) == expected


def test_binary_sink_gets_utf8():
    sink = io.BytesIO()
    write_sitemap(sink, ENTRIES[:1], last_mod=FIXED_LASTMOD)
    assert sink.getvalue().decode("utf-8") == render(ENTRIES[:1])


class FailingSink:
    def __init__(self, fail_after: int) -> None:
        self.fail_after = fail_after
        self.written: list[str] = []

    def write(self, chunk: str) -> int:
        if len(self.written) >= self.fail_after:
            raise OSError("disk full")
        self.written.append(chunk)
        return len(chunk)


def test_sink_error_aborts_and_keeps_partial_output():
    sink = FailingSink(fail_after=2)
    with pytest.raises(OSError, match="disk full"):
        write_sitemap(sink, ENTRIES, last_mod=FIXED_LASTMOD)
    assert len(sink.written) == 2
    assert "".join(sink.written).startswith('<?xml version="1.0"')


def test_render_sitemap_to_file(tmp_path):
    path = render_sitemap(ENTRIES, tmp_path / "out" / "sitemap.xml", last_mod=FIXED_LASTMOD)
    assert path.exists()
    assert path.read_bytes().decode("utf-8") == render(ENTRIES)
