"""Utility functions for text cleanup."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup

MAX_TOPIC_LENGTH = 100
URL_ATTRIBUTES = {"href", "src", "xlink:href", "action", "formaction"}
SAFE_URL_SCHEMES = {"", "http", "https", "mailto"}


def sanitize_topic(topic: str) -> str:
    """Reduce user-supplied topic text to safe plain words.

    Script and style elements are dropped with their contents, remaining
    markup is reduced to its text, and only word characters, whitespace and
    ``.,-`` survive. The result is capped at 100 characters.
    """
    if not topic:
        return ""

    soup = BeautifulSoup(topic, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()

    cleaned = re.sub(r"[^\w\s.,-]", "", soup.get_text())
    return cleaned.strip()[:MAX_TOPIC_LENGTH]


def plain_text_excerpt(text: str, limit: int) -> str:
    """Collapse markdown into a single plain-text line of at most ``limit`` chars."""
    if not text:
        return ""

    plain = re.sub(r"[#>*_`]+", " ", text)
    plain = " ".join(plain.split())
    if len(plain) <= limit:
        return plain
    return plain[:limit].rstrip()


def _is_safe_url(value: str) -> bool:
    # Browsers ignore control characters and whitespace inside a scheme
    compact = re.sub(r"[\x00-\x20]+", "", value or "")
    try:
        scheme = urlparse(compact).scheme
    except ValueError:
        return False
    return scheme.lower() in SAFE_URL_SCHEMES


def strip_unsafe_html(html: str) -> str:
    """Drop script-like elements, inline event handlers and unsafe URLs.

    URL attributes survive only when they are relative or use one of
    ``SAFE_URL_SCHEMES``, so ``javascript:``, ``vbscript:`` and ``data:``
    links are removed.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for element in soup(["script", "style", "iframe", "object", "embed"]):
        element.decompose()
    for tag in soup.find_all(True):
        for attribute in list(tag.attrs):
            name = attribute.lower()
            if name.startswith("on"):
                del tag[attribute]
            elif name in URL_ATTRIBUTES and not _is_safe_url(tag[attribute]):
                del tag[attribute]
    return str(soup)
