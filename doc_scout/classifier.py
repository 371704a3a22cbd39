# File: doc_scout/classifier.py
"""doc_scout.classifier: Определение типа страницы по её URL."""

from __future__ import annotations

import re
from typing import List, Mapping, Pattern, Protocol, Tuple

__all__ = ["PageClassifier", "UrlPatternClassifier", "GENERIC_PAGE"]

GENERIC_PAGE = "GenericPage"


class PageClassifier(Protocol):
    """Anything that maps a normalized URL to a page type tag."""

    async def classify(self, url: str) -> str:
        ...


class UrlPatternClassifier:
    """Классификатор на регулярных выражениях: первое совпавшее правило задаёт тип."""

    def __init__(self, rules: Mapping[str, str], default: str = GENERIC_PAGE) -> None:
        self.rules: List[Tuple[Pattern[str], str]] = [
            (re.compile(pattern, re.IGNORECASE), page_type) for pattern, page_type in rules.items()
        ]
        self.default = default

    async def classify(self, url: str) -> str:
        for pattern, page_type in self.rules:
            if pattern.search(url):
                return page_type
        return self.default
