# === FILE: site_survey/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque, Dict, Iterable, Optional, Set

from site_survey.config import CrawlConfig
from site_survey.crawler.fetcher import Fetcher, FetchProvider, HttpProvider
from site_survey.crawler.link_extractor import classify
from site_survey.crawler.models import (
    CrawlResult,
    CrawlStatus,
    ErrorLog,
    FetchError,
    FetchOutcome,
    PageRecord,
)
from site_survey.crawler.uri import make_target

__all__ = ("Crawler",)

ProgressCallback = Callable[[CrawlStatus], None]


class Crawler:
    """Breadth-first crawl of one site: pages, links, assets and errors.

    Frontier, page map and error log belong to the crawler alone and are only
    mutated on the event loop between awaits, so "already seen?" and "record"
    never interleave even with several fetches in flight.
    """

    def __init__(
        self,
        host: str,
        config: Optional[CrawlConfig] = None,
        provider: Optional[FetchProvider] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.config = config or CrawlConfig()
        self.target = make_target(host)
        self.pages: Dict[str, Optional[PageRecord]] = {}
        self.frontier: Deque[str] = deque([str(self.target)])
        self.errors = ErrorLog()
        self.logger = logging.getLogger("SiteSurvey")
        # queued, in flight or recorded
        self._seen: Set[str] = {str(self.target)}
        self._stopping = False
        self._on_progress = on_progress
        self._http: Optional[HttpProvider] = None
        self.fetcher: Optional[Fetcher] = None
        if provider is not None:
            self.fetcher = self._make_fetcher(provider)

    async def __aenter__(self) -> Crawler:
        if self.fetcher is None:
            self._http = HttpProvider(self.config)
            await self._http.__aenter__()
            self.fetcher = self._make_fetcher(self._http)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._http is not None:
            await self._http.__aexit__(exc_type, exc, tb)
            self._http = None
            self.fetcher = None

    def _make_fetcher(self, provider: FetchProvider) -> Fetcher:
        return Fetcher(provider, self.target, self.errors, max_redirects=self.config.max_redirects)

    def _require_fetcher(self) -> Fetcher:
        if self.fetcher is None:
            raise RuntimeError("Crawler has no provider; use 'async with Crawler(...)'")
        return self.fetcher

    async def crawl(self) -> CrawlResult:
        """Crawl until the frontier is empty or :meth:`stop` is called.

        Calling it again after a stop resumes from the remaining frontier.
        """
        fetcher = self._require_fetcher()
        self._stopping = False
        self.logger.info("Старт обхода: %s", self.target)
        start = time.monotonic()
        in_flight: Dict[asyncio.Task[FetchOutcome], str] = {}
        try:
            while True:
                while self.frontier and len(in_flight) < self.config.concurrency and not self._stopping:
                    uri = self.frontier.popleft()
                    self._report()
                    if uri in self.pages:
                        continue
                    in_flight[asyncio.create_task(fetcher.fetch(uri))] = uri
                if not in_flight:
                    break
                done, _ = await asyncio.wait(set(in_flight), return_when=asyncio.FIRST_COMPLETED)
                # record in launch order so the frontier stays deterministic
                for task in [t for t in in_flight if t in done]:
                    uri = in_flight.pop(task)
                    self._record(uri, task.result())
                    self._report()
        finally:
            for task in in_flight:
                task.cancel()
            if in_flight:
                await asyncio.gather(*in_flight, return_exceptions=True)

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с, ошибок: %d", len(self.pages), duration, len(self.errors)
        )
        if self._stopping and self.frontier:
            self.logger.info("Остановлено, в очереди осталось: %d", len(self.frontier))
        return self.result()

    # alias for compatibility
    run = crawl

    async def visit(self, uri: str) -> Optional[PageRecord]:
        """Fetch, classify and record one URI. A URI already in the page map is a no-op."""
        if uri in self.pages:
            return self.pages[uri]
        self._seen.add(uri)
        outcome = await self._require_fetcher().fetch(uri)
        return self._record(uri, outcome)

    def stop(self) -> None:
        """Stop taking URIs from the frontier; fetches in flight still complete."""
        self._stopping = True

    def status(self) -> CrawlStatus:
        return CrawlStatus(len(self.pages), len(self.frontier), len(self.errors))

    def result(self) -> CrawlResult:
        return CrawlResult(
            target=str(self.target), pages=dict(self.pages), errors=self.errors.messages()
        )

    def _record(self, uri: str, outcome: FetchOutcome) -> Optional[PageRecord]:
        if uri in self.pages:
            return self.pages[uri]
        if isinstance(outcome, FetchError):
            self.pages[uri] = None
            return None
        record = classify(outcome.soup, self.target, self.errors, self.config.blacklist)
        self.pages[uri] = record
        self._enqueue(record.links.local)
        return record

    def _enqueue(self, links: Iterable[str]) -> None:
        for link in links:
            if link in self._seen or link in self.pages:
                continue
            self._seen.add(link)
            self.frontier.append(link)

    def _report(self) -> None:
        if self._on_progress is not None:
            self._on_progress(self.status())
