# === FILE: doc_scout/parser/content_extractor.py ===
"""Structured content extraction from a documentation page.

:class:`ContentExtractor` turns a parsed page into a :class:`PageContent`
(text, tables, code blocks, images, title) without any I/O;
:func:`build_record` serializes that into an immutable
:class:`~doc_scout.crawler.models.CrawlRecord`.

Record fields are reduced to printable ASCII. This drops every non-Latin
character and every newline (paragraph joins included) and is intentional.
"""
from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from doc_scout.crawler.models import CrawlRecord
from doc_scout.parser.html_parser import body_text, element_text, page_title
from doc_scout.utils import sanitize_ascii

__all__: Sequence[str] = ("PageContent", "ContentExtractor", "build_record")

Table = List[Dict[str, str]]


@dataclass(slots=True)
class PageContent:
    """Everything extracted from one page, in document order."""

    title: str = ""
    text: str = ""
    tables: List[Table] = field(default_factory=list)
    code: List[Dict[str, str]] = field(default_factory=list)
    images: List[Dict[str, str]] = field(default_factory=list)


class ContentExtractor:
    """Extracts text, tables, code and images.

    Parameters
    ----------
    content_selector
        CSS selector of the element(s) holding the article. Paragraphs inside
        them make up the text; if nothing matches (or the selector is ``None``)
        the whole body text is used.
    code_selector
        CSS selector of code blocks.
    """

    def __init__(self, content_selector: Optional[str] = "div.awsdocs-container", code_selector: str = "code, pre") -> None:
        self.content_selector = content_selector
        self.code_selector = code_selector

    def extract(self, soup: BeautifulSoup) -> PageContent:
        return PageContent(
            title=page_title(soup),
            text=self.extract_text(soup),
            tables=self.extract_tables(soup),
            code=self.extract_code(soup),
            images=self.extract_images(soup),
        )

    def extract_text(self, soup: BeautifulSoup) -> str:
        containers = soup.select(self.content_selector) if self.content_selector else []
        if not containers:
            return body_text(soup)
        return "\n".join(
            "\n".join(element_text(p) for p in container.find_all("p"))
            for container in containers
        )

    @staticmethod
    def extract_tables(soup: BeautifulSoup) -> List[Table]:
        tables: List[Table] = []
        for table in soup.find_all("table"):
            headers = [element_text(th) for th in table.find_all("th")]
            rows = table.find_all("tr")[1:]  # first row holds the headers
            # zip() stops at the shorter side: cells without a header are dropped
            tables.append([
                dict(zip(headers, (element_text(td) for td in row.find_all("td"))))
                for row in rows
            ])
        return tables

    def extract_code(self, soup: BeautifulSoup) -> List[Dict[str, str]]:
        return [
            {"code": block.get_text(), "language": " ".join(block.get("class", []))}
            for block in soup.select(self.code_selector)
        ]

    @staticmethod
    def extract_images(soup: BeautifulSoup) -> List[Dict[str, str]]:
        return [
            {"src": str(img.get("src", "")), "alt": str(img.get("alt", ""))}
            for img in soup.find_all("img")
        ]


def _dump(value: object) -> str:
    return sanitize_ascii(json.dumps(value, ensure_ascii=False))


def build_record(url: str, page_type: str, content: PageContent) -> CrawlRecord:
    """Serialize *content* into a record; empty sequences serialize as ``[]``."""
    return CrawlRecord(
        url=url,
        page_type=page_type,
        title=sanitize_ascii(content.title),
        text_content=sanitize_ascii(content.text),
        table_content=_dump(content.tables),
        code_content=_dump(content.code),
        image_content=_dump(content.images),
    )
