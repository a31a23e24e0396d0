# === FILE: focus_crawler/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска обходчика FocusCrawler через командную строку.

Команды:
  crawl     Обойти сайт от стартового URL и вывести/сохранить результат
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязательно)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только консоль, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  SEED                Стартовый URL (или seed_url в конфиге)
  --max-depth INT     Максимальная глубина (по умолчанию 2)
  --keyword TEXT      Ключевое слово релевантности (можно повторять)
  --json PATH         Сохранить JSON в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --save              Сохранить JSON в scraped_<домен>.json
  --urls-only         Печатать только список посещённых URL
  --crawl-timeout SEC Таймаут всего обхода (возвращается частичный результат)

Дополнительно:
  --version, -v       Показать версию FocusCrawler

Пример:
  focus-crawler crawl https://www.cam.ac.uk/ --base-domain cam.ac.uk \
      -k graduate -k postgraduate --max-depth 2 --save
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
from pydantic import ValidationError

from focus_crawler import __version__
from focus_crawler.config import CrawlerConfig, load_config
from focus_crawler.engine import start_crawl
from focus_crawler.exceptions import ConfigurationError
from focus_crawler.logger import DEFAULT_FORMAT, init_logging
from focus_crawler.report.html_report import render_html
from focus_crawler.report.json_report import default_output_name, render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str) -> NoReturn:
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def build_config(config_path: Optional[Path], **overrides: Any) -> CrawlerConfig:
    """Собирает конфиг из файла и опций CLI; любые ошибки -> ConfigurationError."""
    try:
        cfg = load_config(config_path, **overrides)
    except ValidationError as exc:
        missing_seed = any(
            err.get("type") == "missing" and err.get("loc", ())[:1] == ("seed_url",) for err in exc.errors()
        )
        if missing_seed:
            raise ConfigurationError("Не задан стартовый URL (аргумент SEED или seed_url в конфиге)") from exc
        raise ConfigurationError(_format_validation_error(exc)) from exc
    except (OSError, ValueError, TypeError) as exc:
        raise ConfigurationError(str(exc)) from exc
    return cfg


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='FocusCrawler, version %(version)s')
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
    help='Путь к файлу логов (только консоль, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд FocusCrawler CLI."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed', required=False)
@click.option('--base-domain', '-d', default=None, help='Базовый домен (по умолчанию: хост SEED без www.)')
@click.option('--max-depth', '-m', type=int, default=None, help='Максимальная глубина обхода')
@click.option('--keyword', '-k', 'keywords', multiple=True, help='Ключевое слово релевантности')
@click.option(
    '--relevance-mode', type=click.Choice(['substring', 'token']), default=None,
    help='Режим сравнения ключевых слов'
)
@click.option('--exclude-ext', 'exclude_ext', multiple=True, help='Исключаемое расширение (заменяет список)')
@click.option('--exclude-host', 'exclude_host', multiple=True, help='Исключаемый шаблон хоста (заменяет список)')
@click.option('--concurrency', '-n', type=int, default=None, help='Число параллельных воркеров')
@click.option('--fetch-timeout-ms', type=int, default=None, help='Таймаут загрузки страницы (мс)')
@click.option('--crawl-timeout', type=float, default=None, help='Таймаут всего обхода (секунд)')
@click.option('--max-pages', type=int, default=None, help='Макс. число страниц')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном report.html.j2'
)
@click.option('--save', is_flag=True, help='Сохранить JSON в scraped_<домен>.json')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--urls-only', is_flag=True, help='Печатать в stdout только список URL')
@click.pass_context
def crawl(ctx, seed, base_domain, max_depth, keywords, relevance_mode, exclude_ext, exclude_host,
          concurrency, fetch_timeout_ms, crawl_timeout, max_pages, json_output, html_output,
          template_dir, save, pretty, urls_only):
    """Обойти сайт от SEED и сохранить/вывести результат."""
    try:
        cfg = build_config(
            ctx.obj['config_path'],
            seed_url=seed,
            base_domain=base_domain,
            max_depth=max_depth,
            relevance_keywords=list(keywords) or None,
            relevance_mode=relevance_mode,
            excluded_extensions=list(exclude_ext) or None,
            excluded_host_patterns=list(exclude_host) or None,
            concurrency=concurrency,
            fetch_timeout_ms=fetch_timeout_ms,
            crawl_timeout=crawl_timeout,
            max_pages=max_pages,
        )
    except ConfigurationError as e:
        print_error(f'Ошибка конфигурации: {e}')

    click.echo(f'Starting crawl at: {cfg.seed_url}', err=True)
    try:
        result = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if not result:
        click.echo('No data was scraped.', err=True)
    if result.cancelled:
        click.echo(f'Crawl stopped early, partial result: {len(result)} pages', err=True)

    if json_output or html_output or save:
        targets = []
        if json_output:
            targets.append(json_output)
        if save:
            targets.append(Path(default_output_name(cfg.base_domain)))
        for target in targets:
            try:
                saved = render_json(result, target, pretty=pretty)
                click.echo(f'JSON saved: {saved}', err=True)
            except OSError as e:
                print_error(f'Ошибка при сохранении JSON: {e}')
        if html_output:
            try:
                saved_html = render_html(result, template_dir, html_output)
                click.echo(f'HTML report: {saved_html}', err=True)
            except Exception as e:
                print_error(f'Ошибка при сохранении HTML: {e}')
        return

    data = result.urls if urls_only else result.to_records()
    click.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('seed', required=False)
@click.pass_context
def show_config(ctx, seed):
    """Показать итоговую конфигурацию в JSON."""
    try:
        cfg = build_config(ctx.obj['config_path'], seed_url=seed)
    except ConfigurationError as e:
        print_error(f'Ошибка конфигурации: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
