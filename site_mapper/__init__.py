# site_mapper/__init__.py
"""
SiteMapper package initializer.
Defines package version and exposes the sitemap generator.
The click entry point lives in :mod:`site_mapper.cli`.
"""
__version__ = "0.1.0"

from site_mapper.engine import crawl_site, generate  # noqa: E402

__all__ = ["__version__", "crawl_site", "generate"]
