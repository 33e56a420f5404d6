"""site_survey.report: Генерация отчётов (JSON, YAML и HTML) для CLI и тестов."""

from site_survey.report.html_report import render_html
from site_survey.report.json_report import render_json, render_yaml

__all__ = ["render_json", "render_yaml", "render_html"]
