# File: tests/conftest.py
from typing import Dict, Union

import pytest

from site_survey.config import CrawlConfig
from site_survey.crawler.errors import TransportError
from site_survey.crawler.models import ErrorLog, NormalizedURI
from site_survey.crawler.uri import make_target
from site_survey.logger import configure
from site_survey.parser.html_parser import parse_html


class FakeProvider:
    """
    In-memory fetch provider.
    Routes map a URI to markup or to an exception instance to raise;
    unknown URIs fail like a 404.
    """

    def __init__(self, routes: Dict[str, Union[str, BaseException]]) -> None:
        self.routes = dict(routes)
        self.calls: list[str] = []

    async def get(self, uri: str) -> str:
        self.calls.append(uri)
        outcome = self.routes.get(uri)
        if outcome is None:
            raise TransportError("404 Not Found")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture()
def target() -> NormalizedURI:
    """Crawl target for http://example.org."""
    return make_target("example.org")


@pytest.fixture()
def error_log() -> ErrorLog:
    return ErrorLog()


@pytest.fixture()
def provider_factory():
    """Return the FakeProvider class so tests can build their own routes."""
    return FakeProvider


@pytest.fixture()
def basic_config() -> CrawlConfig:
    """
    Return a basic valid CrawlConfig for crawler tests.
    """
    return CrawlConfig(timeout=2.0, user_agent="TestAgent/1.0")


@pytest.fixture()
def mock_document():
    """
    Provide a parsed page with local, remote and asset references.
    """
    html = (
        '<html><head>'
        '<script src="/a.js"></script><link rel="stylesheet" href="/a.css">'
        '</head><body>'
        '<a href="/foo/bar">Foo</a>'
        '<a href="http://example.org">Home</a>'
        '<a href="http://other.com">Other</a>'
        '</body></html>'
    )
    return parse_html(html)


@pytest.fixture(autouse=True)
def _rebind_logging():
    """CliRunner swaps sys.stderr; point the project logger back at the real one."""
    yield
    configure(level="WARNING")
