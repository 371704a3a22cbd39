# === FILE: doc_scout/parser/page_filter.py ===
"""Structural page filters.

Every predicate takes a parsed page and answers one question. :class:`PageFilter`
runs them in a fixed order and returns a tagged :class:`PageVerdict`:

* ``SKIP`` – nothing is extracted and no links are followed
  (missing body / PDF rendering, embedded PDF viewer, PGP public key);
* ``NAVIGATE`` – the page is a hub: no content, but its links are crawled
  (decision guide, landing page, glossary);
* ``EXTRACT`` – none of the above matched.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import List, Tuple

from bs4 import BeautifulSoup

from doc_scout.crawler.models import PageVerdict, Verdict
from doc_scout.parser.html_parser import body_text, page_title

__all__: Sequence[str] = (
    "PageFilter",
    "is_missing_body",
    "has_embedded_pdf",
    "has_pgp_key_block",
    "is_decision_guide",
    "is_landing_page",
    "is_glossary_page",
    "PGP_BEGIN",
    "PGP_END",
)

PDF_TITLE = "PDF Document"
PDF_VIEWER_TYPES = frozenset({"application/x-google-chrome-pdf", "application/pdf"})
PGP_BEGIN = "-----BEGIN PGP PUBLIC KEY BLOCK-----"
PGP_END = "-----END PGP PUBLIC KEY BLOCK-----"

_PGP_RE = re.compile(re.escape(PGP_BEGIN) + r"(?:[\s\S]*?" + re.escape(PGP_END) + r")?")

Predicate = Callable[[BeautifulSoup], bool]


def _has_meta(soup: BeautifulSoup, name: str, content: str) -> bool:
    return soup.find("meta", attrs={"name": name, "content": content}) is not None


def is_missing_body(soup: BeautifulSoup) -> bool:
    """No ``<body>`` at all, or the title of a browser PDF rendering."""
    return soup.body is None or page_title(soup).lower() == PDF_TITLE.lower()


def has_embedded_pdf(soup: BeautifulSoup) -> bool:
    for tag in soup.find_all(["embed", "object"]):
        if str(tag.get("type", "")).strip().lower() in PDF_VIEWER_TYPES:
            return True
    return False


def has_pgp_key_block(soup: BeautifulSoup) -> bool:
    return _PGP_RE.search(body_text(soup)) is not None


def is_decision_guide(soup: BeautifulSoup) -> bool:
    return _has_meta(soup, "guide", "AWS Decision Guide")


def is_landing_page(soup: BeautifulSoup) -> bool:
    return _has_meta(soup, "guide-name", "Landing Page")


def is_glossary_page(soup: BeautifulSoup) -> bool:
    return _has_meta(soup, "product", "AWS Glossary")


_DEFAULT_CHAIN: Tuple[Tuple[str, Predicate, Verdict], ...] = (
    ("missing-body", is_missing_body, Verdict.SKIP),
    ("embedded-pdf", has_embedded_pdf, Verdict.SKIP),
    ("pgp-key-block", has_pgp_key_block, Verdict.SKIP),
    ("decision-guide", is_decision_guide, Verdict.NAVIGATE),
    ("landing-page", is_landing_page, Verdict.NAVIGATE),
    ("glossary-page", is_glossary_page, Verdict.NAVIGATE),
)


class PageFilter:
    """Ordered predicate chain; the first match decides the verdict."""

    def __init__(self, chain: Sequence[Tuple[str, Predicate, Verdict]] = _DEFAULT_CHAIN) -> None:
        self.chain: List[Tuple[str, Predicate, Verdict]] = list(chain)

    def evaluate(self, soup: BeautifulSoup) -> PageVerdict:
        for name, predicate, action in self.chain:
            if predicate(soup):
                return PageVerdict(action, name)
        return PageVerdict(Verdict.EXTRACT)
