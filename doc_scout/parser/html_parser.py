# === FILE: doc_scout/parser/html_parser.py ===
"""HTML parsing helpers for DocScout.

The crawler, the page filter and the content extractor all work on one
:class:`bs4.BeautifulSoup` tree per page; this module builds it and offers the
two text accessors they share.

``lxml`` is the default tree builder: like a browser it wraps markup fragments
in ``<html><body>``, so the "missing body" check only fires for documents that
really have none.
"""
from __future__ import annotations

from collections.abc import Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("parse_html", "element_text", "body_text", "page_title")


def parse_html(html: str, parser: str = "lxml") -> BeautifulSoup:
    """Parse raw HTML markup into a soup."""
    return BeautifulSoup(html, parser)


def element_text(tag: Tag) -> str:
    """Text of *tag* with runs of whitespace collapsed to single spaces."""
    return " ".join(tag.get_text().split())


def body_text(soup: BeautifulSoup) -> str:
    """Whitespace-collapsed text of ``<body>``, or ``""`` when there is none."""
    body = soup.body
    if body is None:
        return ""
    return " ".join(body.get_text(" ").split())


def page_title(soup: BeautifulSoup) -> str:
    title = soup.title
    return title.get_text(strip=True) if title else ""
