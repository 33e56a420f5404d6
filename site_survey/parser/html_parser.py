# === FILE: site_survey/parser/html_parser.py ===
"""HTML parsing for SiteSurvey.

The crawl core never looks at raw markup: it asks a document for elements by
CSS selector (``doc.select("a[href]")``) and reads attributes with
``element.get("href")``.  :func:`parse_html` produces such a document from
markup using BeautifulSoup, and :func:`select_attr` is the one query helper
the classifier needs.

Any object exposing the same ``select``/``get`` pair can stand in for a
BeautifulSoup tree, which keeps the classifier testable without a network.
"""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Protocol, Union

from bs4 import BeautifulSoup

__all__: Sequence[str] = ("QueryableDocument", "parse_html", "select_attr")

#: parser backend handed to BeautifulSoup
DEFAULT_FEATURES = "html.parser"


class QueryableDocument(Protocol):
    """Minimal document contract consumed by the classifier."""

    def select(self, selector: str) -> Sequence[Any]: ...


def parse_html(markup: Union[str, bytes], features: str = DEFAULT_FEATURES) -> BeautifulSoup:
    """Parse *markup* into a queryable BeautifulSoup tree.

    Parameters
    ----------
    markup
        Page body as returned by the fetch provider.
    features
        BeautifulSoup tree builder; ``"html.parser"`` needs no extra packages.
    """
    return BeautifulSoup(markup, features)


def select_attr(doc: QueryableDocument, selector: str, attr: str) -> Iterator[tuple[Any, str]]:
    """Yield ``(element, value)`` for elements matching *selector* carrying *attr*.

    Multi-valued attributes (which BeautifulSoup returns as lists) are joined
    with a space, mirroring how they appear in the markup.
    """
    for element in doc.select(selector):
        value = element.get(attr)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        yield element, str(value)
