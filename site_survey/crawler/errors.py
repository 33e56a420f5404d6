# site_survey/crawler/errors.py
"""
Exceptions raised inside the crawl core.

None of them escape a crawl: the Fetcher and the Normalizer turn them into
:class:`~site_survey.crawler.models.ErrorLog` entries. ``InvalidTargetError``
is the only one a caller sees, and only before the crawl starts.
"""
from __future__ import annotations


class CrawlError(Exception):
    """Base class for crawler exceptions."""


class MalformedURIError(CrawlError, ValueError):
    """An href that cannot be parsed as a URI."""

    def __init__(self, raw: str, reason: str = "") -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {raw}" if reason else raw)


class InvalidTargetError(CrawlError, ValueError):
    """The seed host cannot be turned into a crawl target."""


class RedirectForbidden(CrawlError):
    """Transport refused to follow a redirect: ``source -> target``."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"redirection forbidden: {source} -> {target}")


class TransportError(CrawlError):
    """Network or HTTP failure other than a redirect."""
