# site_survey/crawler/link_extractor.py
"""
Link and static-asset classification for SiteSurvey.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from site_survey.crawler.models import Assets, ErrorLog, Links, NormalizedURI, PageRecord
from site_survey.crawler.uri import DEFAULT_BLACKLIST, is_followable, normalize
from site_survey.parser.html_parser import QueryableDocument, select_attr

__all__ = ("extract_links", "extract_assets", "classify")

LINK_SELECTOR = "a[href]"
ASSET_SELECTOR = "script[src], link[href]"


def extract_links(
    doc: QueryableDocument,
    target: NormalizedURI,
    errors: Optional[ErrorLog] = None,
    blacklist: Iterable[str] = DEFAULT_BLACKLIST,
) -> Links:
    """
    Collect anchor hrefs, normalized and split into local and remote.

    Malformed hrefs are logged to *errors* and dropped. Both lists are
    deduplicated by canonical string and sorted.
    """
    unique: Dict[str, NormalizedURI] = {}
    for _, href in select_attr(doc, LINK_SELECTOR, "href"):
        uri = normalize(href, target, errors)
        if uri is not None:
            unique.setdefault(str(uri), uri)

    blacklist = tuple(blacklist)
    local: List[str] = []
    remote: List[str] = []
    for key, uri in unique.items():
        if is_followable(uri, target, blacklist):
            local.append(key)
        else:
            remote.append(key)
    return Links(local=sorted(local), remote=sorted(remote))


def extract_assets(doc: QueryableDocument) -> Assets:
    """
    Collect script and stylesheet references as written in the markup.

    An element with ``src`` is a script, one with only ``href`` a stylesheet.
    """
    js: Dict[str, None] = {}
    css: Dict[str, None] = {}
    for element in doc.select(ASSET_SELECTOR):
        src = element.get("src")
        if src is not None:
            js.setdefault(str(src), None)
            continue
        href = element.get("href")
        if href is not None:
            css.setdefault(str(href), None)
    return Assets(js=sorted(js), css=sorted(css))


def classify(
    doc: QueryableDocument,
    target: NormalizedURI,
    errors: Optional[ErrorLog] = None,
    blacklist: Iterable[str] = DEFAULT_BLACKLIST,
) -> PageRecord:
    """Build the page record for *doc*: classified links and assets."""
    return PageRecord(
        links=extract_links(doc, target, errors, blacklist),
        assets=extract_assets(doc),
    )
