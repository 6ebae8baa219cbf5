"""Normalize stored article content into clean, renderable markdown.

Stored content may be plain markdown, JSON (sometimes nested) whose
``content`` field holds the markdown, text with escaped ``\\n`` sequences, or
text with single newlines where paragraphs were meant. ``normalize_content``
resolves all of these and is idempotent, so already-normalized content passes
through unchanged.
"""

import json
import math
import re
from typing import Optional

import markdown

MAX_UNWRAP_DEPTH = 5
WORDS_PER_MINUTE = 200

_JSON_WRAPPER = re.compile(r"^\{.*\}$", re.DOTALL)
_CONTENT_FIELD = re.compile(r'^\{.*?"content"\s*:\s*"((?:[^"\\]|\\.)*)', re.DOTALL)
_LINE_BREAK = re.compile(r"\r*\n")
_BLOCK_MARKER = re.compile(r"^\s*(#|\*|-|\d+\.|>)")
_BLANK_RUN = re.compile(r"\n{2,}")
_EDGE_CHARS = "{} \t\r\n"


def unwrap_json_content(text: str, max_depth: int = MAX_UNWRAP_DEPTH) -> str:
    """Follow nested ``{"content": ...}`` wrappers, at most ``max_depth`` levels."""
    for _ in range(max_depth):
        try:
            parsed = json.loads(text, strict=False)
        except (ValueError, RecursionError):
            break
        if not isinstance(parsed, dict) or not isinstance(parsed.get("content"), str):
            break
        text = parsed["content"]
    return text


def strip_json_wrapper(text: str) -> str:
    """Cut the ``content`` string out of malformed JSON that still wraps it."""
    if not _JSON_WRAPPER.match(text):
        return text
    found = _CONTENT_FIELD.match(text)
    if found is None:
        return text
    return found.group(1).replace('\\"', '"')


def _split_paragraphs(text: str) -> str:
    lines = []
    for line in text.split("\n"):
        if _BLOCK_MARKER.match(line):
            lines.append(line)
        elif not line.strip():
            lines.append("")
        else:
            lines.append(line + "\n")
    return _BLANK_RUN.sub("\n\n", "\n".join(lines))


def normalize_content(content: Optional[str]) -> str:
    """Resolve stored article content to clean markdown.

    Args:
        content: Content field as persisted

    Returns:
        Markdown with real newlines and blank lines between paragraphs
    """
    if not content:
        return ""

    text = unwrap_json_content(content)
    text = strip_json_wrapper(text)
    text = _LINE_BREAK.sub("\n", text.replace("\\n", "\n"))
    text = text.strip(_EDGE_CHARS)

    if "\n\n" not in text:
        text = _split_paragraphs(text)

    return text.strip(_EDGE_CHARS)


def render_markdown(content: Optional[str]) -> str:
    """Render stored content as HTML after normalizing it."""
    return markdown.markdown(
        normalize_content(content), extensions=["extra", "sane_lists"]
    )


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimated reading time in whole minutes, rounded up."""
    return math.ceil(count_words(text) / words_per_minute)
