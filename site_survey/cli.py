#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteSurvey через командную строку.

Команды:
  crawl HOST  Обойти сайт и вывести/сохранить карту страниц и ошибки
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH        Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --concurrency INT    Число одновременных загрузок (override concurrency)
  --log-level LEVEL    Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH      Файл для логов (stderr, если не указан)

Команда crawl опции:
  --format yaml|json   Формат вывода в stdout (default: yaml)
  --pretty             Преформатировать JSON-вывод (отступ 2)
  --json PATH          Сохранить JSON-отчёт в файл
  --html PATH          Сохранить HTML-отчёт в файл
  --template DIR       Папка со своим report.html.j2
  --no-progress        Не печатать строку прогресса в stderr

Дополнительно:
  --version, -v        Показать версию SiteSurvey

Пример:
  site-survey crawl example.org --json reports/example.json
"""
import asyncio
import sys
from pathlib import Path

import click

from site_survey import __version__
from site_survey.config import load_config
from site_survey.crawler.errors import InvalidTargetError
from site_survey.crawler.models import CrawlStatus
from site_survey.logger import configure, end_progress, show_progress
from site_survey.report.html_report import render_html
from site_survey.report.json_report import render_json
from site_survey.scanner import start_crawl

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def print_status(status: CrawlStatus) -> None:
    show_progress(status.line())


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteSurvey, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Число одновременных загрузок (override concurrency)'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
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
def cli(ctx, config_path, concurrency, log_level, log_file):
    """Группа команд SiteSurvey CLI."""
    configure(level=log_level, log_file=str(log_file) if log_file else None)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if concurrency is not None:
        cfg = cfg.model_copy(update={'concurrency': concurrency})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('host')
@click.option(
    '--format', '-f', 'output_format',
    default='yaml', show_default=True,
    type=click.Choice(['yaml', 'json']),
    help='Формат вывода в stdout'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
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
    help='Папка со своим шаблоном report.html.j2'
)
@click.option(
    '--progress/--no-progress', default=True, show_default=True,
    help='Печатать строку Pages/Queue/Errors в stderr'
)
@click.pass_context
def crawl(ctx, host, output_format, pretty, json_output, html_output, template_dir, progress):
    """Обойти сайт HOST и вывести карту страниц и список ошибок."""
    cfg = ctx.obj['config']
    try:
        result = asyncio.run(start_crawl(host, cfg, print_status if progress else None))
    except InvalidTargetError as e:
        print_error(str(e))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')
    if progress:
        end_progress()

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output and not html_output:
        if output_format == 'json':
            click.echo(result.json(pretty=pretty))
        else:
            click.echo(result.yaml(), nl=False)
        return

    # JSON-отчёт
    if json_output:
        try:
            saved_json = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    # HTML-отчёт
    if html_output:
        try:
            saved_html = render_html(result, html_output, template_dir)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
