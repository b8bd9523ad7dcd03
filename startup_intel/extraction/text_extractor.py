"""Reduce raw HTML to a bounded plain-text excerpt."""

import re
from typing import Optional

import structlog
from bs4 import BeautifulSoup

from ..config.settings import settings

logger = structlog.get_logger()

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


class TextExtractor:
    """Extract readable page text with BeautifulSoup."""

    # Non-content markup stripped before any text is read
    REMOVE_SELECTORS = [
        "script", "style", "nav", "footer", "header", "aside",
        ".ad", ".ads", ".advert", ".advertisement", ".sponsored",
    ]

    # Content areas in priority order, first one with enough text wins
    CONTENT_SELECTORS = [
        "main",
        "article",
        '[role="main"]',
        ".content",
        ".main-content",
        "body",
    ]

    def __init__(self, max_chars: int = None, min_section_chars: int = None):
        self.max_chars = max_chars if max_chars is not None else settings.extract_max_chars
        self.min_section_chars = (
            min_section_chars if min_section_chars is not None else settings.extract_min_section_chars
        )

    def extract(self, html: str) -> str:
        """Return normalized page text, cut to at most max_chars characters."""
        soup = BeautifulSoup(html or "", "html.parser")

        for element in soup.select(", ".join(self.REMOVE_SELECTORS)):
            element.decompose()

        for selector in self.CONTENT_SELECTORS:
            text = self._section_text(soup, selector)
            if text is not None and len(text) > self.min_section_chars:
                logger.debug("content_section_selected", selector=selector, chars=len(text))
                break
        else:
            root = soup.body or soup
            text = normalize_text(root.get_text(separator=" "))

        return text[:self.max_chars]

    def _section_text(self, soup: BeautifulSoup, selector: str) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        return normalize_text(element.get_text(separator=" "))
