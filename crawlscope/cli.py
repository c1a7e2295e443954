#!/usr/bin/env python3
"""
Точка входа для запуска краулера CrawlScope через командную строку.

Команды:
  crawl     Обойти сайт по конфигу и вывести/сохранить отчёт
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --seed URL          Стартовый URL (override base_url)
  --pattern TEXT      Фрагмент области обхода (override scope_pattern)
  --literal           Считать фрагмент обычным текстом, а не регулярным выражением
  --limit INT         Макс. число URL (override max_pages)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)

Команда crawl опции:
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию CrawlScope

Пример:
  crawlscope --seed https://example.com/blog --pattern example.com/blog crawl --json report.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from crawlscope import __version__
from crawlscope.config import DEFAULT_CONFIG, CrawlConfig, load_config
from crawlscope.engine import start_crawl
from crawlscope.logger import init_logging
from crawlscope.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='CrawlScope, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON (по умолчанию configs/default.yaml, если он есть).'
)
@click.option('--seed', '-s', 'seed', default=None, help='Стартовый URL (override base_url)')
@click.option('--pattern', '-p', 'pattern', default=None, help='Фрагмент области обхода (override scope_pattern)')
@click.option('--literal', is_flag=True, default=False, help='Фрагмент как обычный текст, а не regex')
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число URL для обхода (override max_pages)'
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
@click.pass_context
def cli(ctx, config_path, seed, pattern, literal, limit, log_level, log_file):
    """Группа команд CrawlScope CLI."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    overrides = {
        'base_url': seed,
        'scope_pattern': pattern,
        'pattern_mode': 'literal' if literal else None,
        'max_pages': limit,
    }
    if config_path is None and DEFAULT_CONFIG.is_file():
        config_path = DEFAULT_CONFIG
    try:
        if config_path is not None:
            cfg = load_config(config_path, **overrides)
        else:
            cfg = CrawlConfig(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        print_error(f'Неверная конфигурация: {e}')
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, json_output, pretty, crawl_timeout):
    """Обойти сайт и вывести отчёт."""
    cfg = ctx.obj['config']
    click.echo(f'Starting crawl: {cfg.base_url} (scope {cfg.scope_pattern!r})', err=True)
    try:
        if crawl_timeout:
            report = asyncio.run(asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout))
        else:
            report = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if json_output:
        try:
            saved = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}', err=True)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
    else:
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2 if pretty else None))

    if not report.completed:
        print_error(f'Обход прерван: {report.base_url}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
