# site_survey/crawler/uri.py
"""
URI canonicalisation for SiteSurvey.

Every page key, frontier entry and link produced by the crawler comes out of
:func:`normalize`. The rules are deliberately simple: missing scheme/host are
taken from the crawl target, query and fragment are dropped and the path is
forced to be absolute. Relative paths are *not* resolved against the page they
appear on, they are anchored at the site root.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional, Tuple
from urllib.parse import urlsplit

from site_survey.crawler.errors import InvalidTargetError, MalformedURIError
from site_survey.crawler.models import (
    DEFAULT_PORTS,
    HTTP_SCHEMES,
    ErrorKind,
    ErrorLog,
    NormalizedURI,
)

__all__ = (
    "DEFAULT_BLACKLIST",
    "make_target",
    "parse_uri",
    "normalize",
    "is_followable",
)

logger = logging.getLogger("SiteSurvey")

#: links to these extensions are never followed
DEFAULT_BLACKLIST: Tuple[str, ...] = (".zip", ".jpg", ".jpeg", ".gif", ".png", ".eps")

_URI_CHARS_RE = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*$")
_BAD_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_HOSTNAME_RE = re.compile(r"^[A-Za-z0-9\-.]+$")
_IPV6_RE = re.compile(r"^\[[0-9A-Fa-f:.]+\]$")


def _split_netloc(raw: str, netloc: str) -> Tuple[str, Optional[str]]:
    """Return ``(host, port)`` from *netloc*, userinfo discarded."""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        host, sep, rest = hostport.partition("]")
        if not sep:
            raise MalformedURIError(raw, "unterminated IPv6 literal")
        host += "]"
        if rest and not rest.startswith(":"):
            raise MalformedURIError(raw, "garbage after IPv6 literal")
        port = rest[1:] if rest else None
    else:
        host, sep, port_text = hostport.partition(":")
        port = port_text if sep else None

    if not (_HOSTNAME_RE.match(host) or _IPV6_RE.match(host)):
        raise MalformedURIError(raw, "invalid host")
    return host.lower(), port


def _parse_port(raw: str, port: Optional[str], scheme: str) -> Optional[int]:
    if not port:
        return None
    if not port.isdigit() or int(port) > 65535:
        raise MalformedURIError(raw, "invalid port")
    value = int(port)
    return None if DEFAULT_PORTS.get(scheme) == value else value


def parse_uri(raw: object, target: Optional[NormalizedURI]) -> NormalizedURI:
    """Parse *raw* into a :class:`NormalizedURI` relative to *target*.

    Raises :class:`MalformedURIError` when *raw* is not a syntactically valid
    URI, or when it is relative and no *target* is given.
    """
    text = str(raw).strip()
    if not _URI_CHARS_RE.match(text) or _BAD_PERCENT_RE.search(text):
        raise MalformedURIError(text, "illegal character")
    try:
        parts = urlsplit(text)
    except ValueError as exc:
        raise MalformedURIError(text, str(exc)) from exc

    scheme = parts.scheme.lower()
    if scheme and not _SCHEME_RE.match(scheme):
        raise MalformedURIError(text, "invalid scheme")

    # mailto:, tel:, javascript: ... are valid but never crawled
    if scheme and scheme not in HTTP_SCHEMES:
        return NormalizedURI(scheme=scheme, host="", path="", opaque=text[len(scheme) + 1 :])

    if parts.netloc:
        host, port_text = _split_netloc(text, parts.netloc)
        scheme = scheme or (target.scheme if target else "")
        port = _parse_port(text, port_text, scheme)
    elif target is not None:
        scheme = scheme or target.scheme
        host, port = target.host, target.port
    else:
        raise MalformedURIError(text, "relative URI without target")

    if not scheme:
        raise MalformedURIError(text, "missing scheme")

    path = parts.path
    if not path.startswith("/"):
        path = "/" + path
    return NormalizedURI(scheme=scheme, host=host, path=path, port=port)


def normalize(
    raw: object, target: NormalizedURI, errors: Optional[ErrorLog] = None
) -> Optional[NormalizedURI]:
    """Canonicalise *raw* against *target*; ``None`` for a malformed href.

    A malformed href is recorded as ``Bad URI: <raw>`` in *errors*.
    """
    try:
        return parse_uri(raw, target)
    except MalformedURIError as exc:
        message = f"Bad URI: {raw}"
        if errors is not None:
            errors.add(ErrorKind.MALFORMED_URI, message)
        else:
            logger.info("%s (%s)", message, exc.reason)
        return None


def make_target(host: str) -> NormalizedURI:
    """Build the crawl target from a seed host, with or without a scheme."""
    seed = host.strip()
    if not seed.lower().startswith(("http://", "https://")):
        seed = "http://" + seed
    try:
        return parse_uri(seed, None)
    except MalformedURIError as exc:
        raise InvalidTargetError(f"Invalid seed host: {host!r} ({exc.reason})") from exc


def is_followable(
    uri: NormalizedURI,
    target: NormalizedURI,
    blacklist: Iterable[str] = DEFAULT_BLACKLIST,
) -> bool:
    """True for same-site (host or ``www.`` host) HTTP links not blacklisted."""
    if not uri.is_http:
        return False
    if uri.host not in (target.host, "www." + target.host):
        return False
    return not uri.path.lower().endswith(tuple(e.lower() for e in blacklist))
