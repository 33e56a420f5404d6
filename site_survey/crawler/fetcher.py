# site_survey/crawler/fetcher.py
"""
Fetcher module: turns HTTP outcomes into Document / Redirect / FetchError
signals and follows redirects within a fixed budget.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol, Union
from urllib.parse import urljoin

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_survey.config import CrawlConfig
from site_survey.crawler.errors import RedirectForbidden, TransportError
from site_survey.crawler.models import (
    Document,
    ErrorKind,
    ErrorLog,
    FetchError,
    FetchOutcome,
    NormalizedURI,
    Redirect,
)
from site_survey.crawler.uri import normalize
from site_survey.parser.html_parser import parse_html

__all__ = ("FetchProvider", "HttpProvider", "Fetcher", "DEFAULT_MAX_REDIRECTS")

logger = logging.getLogger("SiteSurvey")

DEFAULT_MAX_REDIRECTS = 5


class FetchProvider(Protocol):
    """Transport contract: markup, or RedirectForbidden / TransportError."""

    async def get(self, uri: str) -> str: ...


class HttpProvider:
    """aiohttp transport that reports redirects instead of following them."""

    def __init__(self, config: CrawlConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> HttpProvider:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
            self.session = None

    async def get(self, uri: str) -> str:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(uri, allow_redirects=False) as resp:
                if 300 <= resp.status < 400:
                    location = resp.headers.get("Location")
                    if location:
                        raise RedirectForbidden(uri, urljoin(uri, location))
                    raise TransportError(f"{resp.status} {resp.reason} without Location")
                if resp.status >= 400:
                    raise TransportError(f"{resp.status} {resp.reason}")
                return await resp.text(errors="replace")
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc


class Fetcher:
    """Resolve a URI to a parsed document, following redirects.

    Every failure ends up as a :class:`FetchError` plus an entry in the shared
    :class:`ErrorLog`; nothing but task cancellation escapes :meth:`fetch`.
    """

    def __init__(
        self,
        provider: FetchProvider,
        target: NormalizedURI,
        errors: ErrorLog,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        parser: Callable[[str], object] = parse_html,
    ) -> None:
        self.provider = provider
        self.target = target
        self.errors = errors
        if max_redirects < 1:
            raise ValueError(f"max_redirects must be >= 1, got {max_redirects}")
        self.max_redirects = max_redirects
        self.parser = parser

    async def fetch(self, uri: str, budget: Optional[int] = None) -> FetchOutcome:
        """
        Fetch *uri*, making at most *budget* provider calls along a redirect chain.

        Returns Document on success, FetchError otherwise.
        """
        remaining = self.max_redirects if budget is None else budget
        current = uri
        while remaining > 0:
            remaining -= 1
            outcome = await self._attempt(current)
            if not isinstance(outcome, Redirect):
                return outcome
            logger.debug("  `- %s -> %s", outcome.source, outcome.target)
            nxt = normalize(outcome.target, self.target, self.errors)
            if nxt is None:
                return FetchError(current, f"bad redirect target {outcome.target}")
            current = str(nxt)

        self.errors.add(ErrorKind.REDIRECT_LOOP, f"Possible infinite loop: skipping {current}")
        return FetchError(current, "redirect budget exhausted")

    async def _attempt(self, uri: str) -> Union[Document, Redirect, FetchError]:
        logger.debug("get %s", uri)
        try:
            markup = await self.provider.get(uri)
            return Document(url=uri, soup=self.parser(markup))
        except RedirectForbidden as exc:
            return Redirect(source=exc.source, target=exc.target)
        except TransportError as exc:
            return self._fail(uri, str(exc))
        except Exception as exc:
            logger.debug("Unexpected failure fetching %s", uri, exc_info=True)
            return self._fail(uri, f"{type(exc).__name__}: {exc}")

    def _fail(self, uri: str, detail: str) -> FetchError:
        self.errors.add(ErrorKind.TRANSPORT, f"Error: {detail} -- {uri}")
        return FetchError(uri, detail)
