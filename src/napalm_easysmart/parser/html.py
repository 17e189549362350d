"""Base HTML parsing utilities shared across all parsers."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup


def parse_html(html: str, parser: str = "lxml") -> BeautifulSoup:
    """Parse an HTML string and return a BeautifulSoup document.

    Args:
        html: Raw HTML content from the switch response.
        parser: Parser library to use (default: ``lxml``).

    Returns:
        Parsed BeautifulSoup document.
    """
    return BeautifulSoup(html, parser)


def normalize_text(s: str) -> str:
    """Strip surrounding whitespace and collapse internal runs.

    Args:
        s: Raw text extracted from an HTML element.

    Returns:
        Cleaned string with single spaces between words.
    """
    return re.sub(r"\s+", " ", s).strip()


def page_text(html: str, limit: int = 200) -> str:
    """Return the visible text of a console page on a single line.

    Scripts and styles are dropped, so a rejected submission reads as the
    tip the console would show the user.

    Args:
        html: Raw HTML from the switch.
        limit: Maximum length of the returned text.

    Returns:
        Normalised visible text, truncated to *limit* characters.
    """
    soup = parse_html(html)
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = normalize_text(soup.get_text(" "))
    return text[:limit]
