# File: tests/test_cli.py
"""Тесты для CLI (`site_survey.cli`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import importlib
import json

import pytest
import yaml
from click.testing import CliRunner
from site_survey.cli import cli
from site_survey.crawler.errors import InvalidTargetError
from site_survey.crawler.models import Assets, CrawlResult, CrawlStatus, Links, PageRecord

# the package re-exports the click group as ``site_survey.cli``
cli_module = importlib.import_module("site_survey.cli")


def make_result() -> CrawlResult:
    return CrawlResult(
        target="http://example.org/",
        pages={
            "http://example.org/": PageRecord(
                links=Links(local=["http://example.org/a"], remote=["http://other.com/"]),
                assets=Assets(js=["/a.js"], css=["/a.css"]),
            ),
            "http://example.org/a": None,
        },
        errors=["Error: 404 Not Found -- http://example.org/a"],
    )


@pytest.fixture()
def fake_crawl(monkeypatch):
    """Патчим start_crawl: запоминаем аргументы и возвращаем готовый результат."""
    calls = []

    async def fake(host, cfg, on_progress=None):
        calls.append((host, cfg))
        if on_progress is not None:
            on_progress(CrawlStatus(2, 0, 1))
        return make_result()

    monkeypatch.setattr(cli_module, "start_crawl", fake)
    return calls


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteSurvey" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("max_redirects: 2\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "--concurrency", "4", "config"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["max_redirects"] == 2
    assert data["concurrency"] == 4


def test_bad_config_file(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("max_redirects: lots\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_crawl_prints_yaml(fake_crawl, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "example.org", "--no-progress"])
    assert result.exit_code == 0
    data = yaml.safe_load(result.stdout)
    assert list(data) == ["pages", "errors"]
    assert data["pages"]["http://example.org/a"] is None
    assert data["pages"]["http://example.org/"]["assets"] == {"js": ["/a.js"], "css": ["/a.css"]}
    assert data["errors"] == ["Error: 404 Not Found -- http://example.org/a"]
    assert fake_crawl[0][0] == "example.org"


def test_crawl_prints_json(fake_crawl, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "example.org", "--format", "json", "--no-progress"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == make_result().to_dict()


def test_crawl_progress_goes_to_stderr(fake_crawl, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "example.org", "--format", "json"])
    assert result.exit_code == 0
    assert "Pages:   2  Queue:   0  Errors:   1" in result.output


def test_crawl_json_and_html_files(fake_crawl, tmp_path):
    out_json = tmp_path / "out" / "report.json"
    out_html = tmp_path / "out" / "report.html"
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["crawl", "example.org", "--no-progress", "--json", str(out_json), "--html", str(out_html)],
    )
    assert result.exit_code == 0
    assert json.loads(out_json.read_text(encoding="utf-8"))["errors"] == make_result().errors
    assert "http://example.org/a" in out_html.read_text(encoding="utf-8")
    assert f"JSON report: {out_json}" in result.stdout


def test_crawl_invalid_host(monkeypatch):
    async def invalid(host, cfg, on_progress=None):
        raise InvalidTargetError(f"Invalid seed host: {host!r}")

    monkeypatch.setattr(cli_module, "start_crawl", invalid)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "example!org", "--no-progress"])
    assert result.exit_code == 1
    assert "Invalid seed host" in result.output


def test_crawl_invalid_host_without_network():
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "exa mple.org", "--no-progress"])
    assert result.exit_code == 1
    assert "Invalid seed host" in result.output


def test_crawl_progress_line_is_terminated(fake_crawl, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "example.org", "--format", "json"])
    assert result.exit_code == 0
    assert "\rPages:   2  Queue:   0  Errors:   1\n" in result.output
