# doc_scout/crawler/link_extractor.py
"""
Link discovery for DocScout.

Works on the raw HTML string rather than a parse tree so that links hidden in
the landing-page XML payload (an ``<input id="landing-page-xml">`` whose value
is a percent-encoded XML document) are found as well.
"""
from __future__ import annotations

import re
from typing import List
from urllib.parse import unquote_plus

from lxml import etree

from doc_scout.logger import get_logger

__all__ = ("extract_links", "extract_anchor_links", "extract_landing_page_links")

logger = get_logger("links")
_ANCHOR_RE = re.compile(r"""<a\s(?:[^>]*?\s)?href\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_ANCHOR_RE = re.compile(r"""<a\s[^>]*?\bhref\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_IGNORED_SCHEMES = ("mailto:", "javascript:")
_INPUT_RE = re.compile(r"<input\b[^>]*>", re.IGNORECASE)
_LANDING_ID_RE = re.compile(r"""\bid\s*=\s*["']landing-page-xml["']""", re.IGNORECASE)
_VALUE_RE = re.compile(r"""\bvalue\s*=\s*(?:"([^"]+)"|'([^']+)')""", re.IGNORECASE)


def extract_anchor_links(html: str) -> List[str]:
    """``href`` of every ``<a>`` tag, in source order; mailto: and javascript: are ignored."""
    return [
        href for href in (m.group(1).strip() for m in _ANCHOR_RE.finditer(html))
        if href and not href.lower().startswith(_IGNORED_SCHEMES)
    ]


def _parse_landing_xml(encoded: str) -> List[str]:
    decoded = unquote_plus(encoded, errors="strict")
    parser = etree.XMLParser(ns_clean=True, resolve_entities=False, no_network=True)
    root = etree.fromstring(decoded.encode("utf-8"), parser=parser)
    return [node.get("href") for node in root.iter("list-card-item") if node.get("href")]


def extract_landing_page_links(html: str) -> List[str]:
    """Links from every ``list-card-item`` in landing-page XML payloads.

    A payload that fails to decode or parse contributes no links; other
    payloads on the same page are still read.
    """
    links: List[str] = []
    for tag in _INPUT_RE.finditer(html):
        markup = tag.group(0)
        if not _LANDING_ID_RE.search(markup):
            continue
        value = _VALUE_RE.search(markup)
        if value is None:
            continue
        try:
            links.extend(_parse_landing_xml(value.group(1) or value.group(2)))
        except (etree.XMLSyntaxError, UnicodeDecodeError, ValueError) as exc:
            logger.warning("Error decoding or parsing landing-page XML: %s", exc)
    return links


def extract_links(html: str) -> List[str]:
    """All outbound links of a page: anchors first, then landing-page XML links.

    Duplicates are kept; deduplication belongs to the crawler's visited set.
    """
    links = extract_anchor_links(html)
    try:
        links.extend(extract_landing_page_links(html))
    except Exception as exc:  # pragma: no cover
        logger.error("Link extraction failed, keeping %d anchor links: %s", len(links), exc)
    return links
