# === FILE: site_mapper/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска генератора карты сайта SiteMapper через командную строку.

Команды:
  generate URL   Обойти сайт и вывести/сохранить XML-карту сайта
  config         Показать текущие настройки

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/sitemap.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда generate опции:
  --output PATH                      Файл для карты сайта ("-" — stdout)
  --ignore-query/--keep-query        Отбрасывать query-строку в URL
  --ignore-fragment/--keep-fragment  Отбрасывать фрагмент (#...) в URL
  --changefreq VALUE                 Значение <changefreq> для всех URL
  --lastmod DATETIME                 Значение <lastmod> (ISO 8601) для всех URL
  --timeout SEC                      Таймаут одного запроса
  --verbose, -V                      Подробные логи обхода

Дополнительно:
  --version, -v       Показать версию SiteMapper

Пример:
  site-mapper generate http://localhost:8080 --changefreq monthly -o sitemap.xml
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_mapper import __version__
from site_mapper.config import load_config, override
from site_mapper.crawler.urls import URLError
from site_mapper.engine import generate
from site_mapper.logger import init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteMapper CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('generate', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--output', '-o', 'output',
    default='-',
    show_default=True,
    type=click.File('w', encoding='utf-8', lazy=True),
    help='Файл для карты сайта ("-" — stdout)'
)
@click.option('--ignore-query/--keep-query', 'ignore_query', default=None,
              help='Отбрасывать query-строку в URL (по умолчанию — да)')
@click.option('--ignore-fragment/--keep-fragment', 'ignore_fragment', default=None,
              help='Отбрасывать фрагмент в URL (по умолчанию — да)')
@click.option('--changefreq', 'change_freq', default=None,
              help='Значение <changefreq> для всех URL')
@click.option('--lastmod', 'last_mod', default=None,
              help='Значение <lastmod> в ISO 8601 (по умолчанию — текущее время)')
@click.option('--timeout', 'timeout', type=float, default=None,
              help='Таймаут одного запроса (секунд)')
@click.option('--verbose', '-V', 'verbose', is_flag=True, default=None,
              help='Подробные логи обхода')
@click.pass_context
def generate_cmd(ctx, url, output, ignore_query, ignore_fragment, change_freq, last_mod, timeout, verbose):
    """Обойти сайт начиная с URL и записать XML-карту сайта."""
    try:
        options = override(
            ctx.obj['config'],
            ignore_query=ignore_query,
            ignore_fragment=ignore_fragment,
            change_freq=change_freq,
            last_mod=last_mod,
            timeout=timeout,
            verbose=verbose,
        )
    except ValidationError as e:
        print_error(f'Некорректные параметры: {e}')

    try:
        asyncio.run(generate(output, url, options))
    except URLError as e:
        print_error(f'Некорректный URL: {e}')
    except OSError as e:
        print_error(f'Ошибка записи карты сайта: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
