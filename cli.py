# cli.py

"""
Запуск SiteMapper из корня репозитория без установки пакета.

Пример запуска:
    python cli.py generate http://localhost:8080 --changefreq monthly -o sitemap.xml
"""
from site_mapper.cli import cli

if __name__ == '__main__':
    cli()
