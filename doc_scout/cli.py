# === FILE: doc_scout/cli.py ===
"""
Командная строка DocScout.

    doc-scout [--config PATH] [--log-level LEVEL] crawl [--entry-url URL] [--max-depth N]
    doc-scout scrape URL [URL ...]
    doc-scout config

Логи пишутся в stderr (и в --log-file, если задан), итоговая сводка в JSON в stdout.
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from doc_scout import __version__
from doc_scout.config import CrawlerConfig, load_config
from doc_scout.engine import start_crawl, start_scrape
from doc_scout.logger import DEFAULT_FORMAT, init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _override(cfg: CrawlerConfig, **changes: Any) -> CrawlerConfig:
    """Новый конфиг с заменёнными полями (модель заморожена); None значит «не менять»."""
    update: Dict[str, Any] = {k: v for k, v in changes.items() if v is not None}
    if not update:
        return cfg
    return CrawlerConfig(**{**cfg.model_dump(), **update})


def _run_job(job, timeout_message: str, failure_prefix: str) -> None:
    try:
        summary = asyncio.run(job)
    except asyncio.TimeoutError:
        print_error(timeout_message)
    except Exception as e:
        print_error(f'{failure_prefix}: {e}')
    click.echo(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='DocScout, version %(version)s')
@click.option('--config', '-c', 'config_path', default='configs/default.yaml', show_default=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='YAML/JSON файл с настройками обхода.')
@click.option('--log-level', default='INFO', show_default=True, type=click.Choice(LOG_LEVELS),
              help='Минимальный уровень сообщений.')
@click.option('--log-file', default=None, type=click.Path(dir_okay=False, path_type=Path),
              help='Дублировать логи в файл с ротацией.')
@click.option('--log-format', default=DEFAULT_FORMAT, help='Формат строки лога (logging.Formatter).')
@click.pass_context
def cli(ctx, config_path: Path, log_level: str, log_file: Optional[Path], log_format: str):
    """DocScout: обход сайта документации и выгрузка контента в JSON."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.obj = {'config': cfg}


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--entry-url', '-e', default=None, help='Стартовый URL обхода.')
@click.option('--max-depth', '-d', type=click.IntRange(min=0), default=None, help='Максимальная глубина.')
@click.option('--output', '-o', default=None, type=click.Path(dir_okay=False, path_type=Path),
              help='Файл, в который дописываются записи.')
@click.option('--crawl-timeout', type=float, default=None, help='Таймаут всего обхода (секунд).')
@click.pass_obj
def crawl(obj, entry_url: Optional[str], max_depth: Optional[int], output: Optional[Path],
          crawl_timeout: Optional[float]):
    """Обойти документацию и дописать записи в файл."""
    try:
        cfg = _override(
            obj['config'],
            entry_url=entry_url,
            max_depth=max_depth,
            crawl_timeout=crawl_timeout,
            output_dir=output.parent if output else None,
            output_filename=output.name if output else None,
        )
    except Exception as e:
        print_error(f'Некорректные параметры: {e}')
    click.echo(f'Starting crawl at: {cfg.start_url}', err=True)
    _run_job(start_crawl(cfg), f'Обход не завершён за {cfg.crawl_timeout} секунд', 'Ошибка при обходе')


@cli.command('scrape', context_settings=CONTEXT_SETTINGS)
@click.argument('urls', nargs=-1, required=True)
@click.pass_obj
def scrape(obj, urls):
    """Извлечь контент заданных страниц без перехода по ссылкам."""
    cfg = obj['config']
    _run_job(start_scrape(cfg, urls), f'Извлечение не завершено за {cfg.crawl_timeout} секунд',
             'Ошибка при извлечении')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_obj
def show_config(obj):
    """Показать действующую конфигурацию в JSON."""
    click.echo(obj['config'].model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
