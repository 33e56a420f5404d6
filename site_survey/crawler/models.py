# site_survey/crawler/models.py
"""
Data models for the SiteSurvey crawler.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Union

import yaml

logger = logging.getLogger("SiteSurvey")

HTTP_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class NormalizedURI:
    """Canonical, immutable URI used as page identity.

    HTTP(S) URIs always carry an absolute path and never a query or fragment.
    Other schemes keep their remainder verbatim in ``opaque``.
    """

    scheme: str
    host: str = ""
    path: str = "/"
    port: Optional[int] = None
    opaque: Optional[str] = None

    @property
    def is_http(self) -> bool:
        return self.scheme in HTTP_SCHEMES

    def __str__(self) -> str:
        if self.opaque is not None:
            return f"{self.scheme}:{self.opaque}"
        netloc = self.host if self.port is None else f"{self.host}:{self.port}"
        return f"{self.scheme}://{netloc}{self.path}"


@dataclass(slots=True)
class Links:
    local: List[str] = field(default_factory=list)
    remote: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Assets:
    js: List[str] = field(default_factory=list)
    css: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PageRecord:
    """Classified links and assets of a successfully visited page."""

    links: Links = field(default_factory=Links)
    assets: Assets = field(default_factory=Assets)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class Document:
    """Parsed page returned by the Fetcher. ``url`` is the URI after redirects."""

    url: str
    soup: Any


@dataclass(slots=True)
class Redirect:
    source: str
    target: str


@dataclass(slots=True)
class FetchError:
    url: str
    detail: str


FetchOutcome = Union[Document, FetchError]


class ErrorKind(str, Enum):
    MALFORMED_URI = "malformed_uri"
    REDIRECT_LOOP = "redirect_loop"
    TRANSPORT = "transport"


class ErrorEntry(NamedTuple):
    kind: ErrorKind
    message: str


class ErrorLog:
    """Append-only, ordered sink of crawl diagnostics."""

    def __init__(self) -> None:
        self._entries: List[ErrorEntry] = []

    def add(self, kind: ErrorKind, message: str) -> ErrorEntry:
        entry = ErrorEntry(kind, message)
        self._entries.append(entry)
        logger.info(message)
        return entry

    @property
    def entries(self) -> List[ErrorEntry]:
        return list(self._entries)

    def messages(self) -> List[str]:
        return [e.message for e in self._entries]

    def of_kind(self, kind: ErrorKind) -> List[ErrorEntry]:
        return [e for e in self._entries if e.kind is kind]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(list(self._entries))


class CrawlStatus(NamedTuple):
    """Live counters reported while crawling."""

    pages: int
    queue: int
    errors: int

    def line(self) -> str:
        return "Pages: %3d  Queue: %3d  Errors: %3d" % self


@dataclass(slots=True)
class CrawlResult:
    """Final page map and error list of one crawl."""

    target: str
    pages: Dict[str, Optional[PageRecord]] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def failed(self) -> List[str]:
        return [uri for uri, record in self.pages.items() if record is None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages": {
                uri: None if record is None else record.to_dict()
                for uri, record in self.pages.items()
            },
            "errors": list(self.errors),
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)

    def yaml(self) -> str:
        return yaml.safe_dump(
            self.to_dict(), sort_keys=False, allow_unicode=True, default_flow_style=False
        )
