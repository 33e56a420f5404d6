# site_survey/report/json_report.py

"""
Генерация JSON- и YAML-отчётов для проекта SiteSurvey.

Сериализация объекта CrawlResult в файл.
"""
from pathlib import Path

from site_survey.crawler.models import CrawlResult


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода в формате JSON по указанному пути.

    :param result: объект CrawlResult с картой страниц и ошибками
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_survey.report.json_report import render_json
    report_path = render_json(result, 'reports/example.org.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.json(pretty=pretty), encoding='utf-8')
    return output


def render_yaml(result: CrawlResult, output_path: Path | str) -> Path:
    """
    Сохраняет результат обхода в формате YAML: сначала pages, затем errors.
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.yaml(), encoding='utf-8')
    return output
