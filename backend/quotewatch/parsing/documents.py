"""
Parsed-document capability used by the selector fallback chain.

A document only needs to answer two questions: "what text sits at this
rule?" and "what is your whole text?". Extraction rules stay plain strings
so they can live in configuration.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Protocol

from bs4 import BeautifulSoup


class Document(Protocol):
    def select_text(self, rule: str) -> Optional[str]:
        ...

    def full_text(self) -> str:
        ...


class HtmlDocument:
    """HTML page searchable by CSS selectors."""

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html, "lxml")

    def select_text(self, rule: str) -> Optional[str]:
        element = self.soup.select_one(rule)
        if element is None:
            return None
        text = element.get_text(" ", strip=True)
        return text or None

    def full_text(self) -> str:
        return self.soup.get_text(" ", strip=True)


class JsonDocument:
    """Decoded JSON payload searchable by dotted paths such as ``quote.0.last``."""

    def __init__(self, payload: Any):
        self.payload = payload

    def _walk(self, rule: str) -> Any:
        node = self.payload
        for part in rule.split("."):
            if isinstance(node, dict):
                if part not in node:
                    return None
                node = node[part]
            elif isinstance(node, list):
                try:
                    node = node[int(part)]
                except (ValueError, IndexError):
                    return None
            else:
                return None
        return node

    def select_text(self, rule: str) -> Optional[str]:
        value = self._walk(rule)
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float, str)):
            return str(value)
        return None

    def full_text(self) -> str:
        return json.dumps(self.payload, ensure_ascii=False)


def parse_document(body: str, fmt: str = "html") -> Optional[Document]:
    if fmt == "json":
        try:
            return JsonDocument(json.loads(body))
        except (json.JSONDecodeError, TypeError, ValueError):
            return None
    return HtmlDocument(body)
