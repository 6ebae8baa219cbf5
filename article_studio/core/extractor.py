"""Recover structured fields from loosely formatted model replies.

Models are asked for a single JSON object but regularly wrap it in code
fences, escape it twice, add commentary around it or ignore the format
entirely. Extraction is an ordered chain of parsers over the cleaned reply;
the first one producing acceptable fields wins. Article extraction always
ends in a line-pattern fallback, so it never fails.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from article_studio.models.article import (
    ArticleIdeas,
    ExtractedArticle,
    ExtractionMethod,
    GenerationRequest,
    SeoMetadata,
)

logger = logging.getLogger(__name__)

MAX_IDEA_TITLES = 10
MAX_IDEA_KEYWORDS = 20

_FENCE_OPEN = re.compile(r"^```(?:json)?[ \t]*[\r\n]*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"[\r\n]*```$")
_OUTER_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

JsonParser = Callable[[str], Optional[Dict[str, Any]]]


def strip_code_fences(raw: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    text = (raw or "").strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text)
    return text.strip()


def clean_model_output(raw: str) -> str:
    """Strip code fences and turn escaped newlines and quotes into literals."""
    text = strip_code_fences(raw)
    return text.replace("\\n", "\n").replace('\\"', '"').strip()


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse the whole text as a JSON object, or return None."""
    try:
        parsed = json.loads(text, strict=False)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_json_substring(text: str) -> Optional[Dict[str, Any]]:
    """Parse the span from the first ``{`` to the last ``}`` as JSON."""
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last <= first:
        return None
    return parse_json_object(text[first : last + 1])


JSON_PARSERS: Tuple[Tuple[ExtractionMethod, JsonParser], ...] = (
    (ExtractionMethod.JSON, parse_json_object),
    (ExtractionMethod.JSON_SUBSTRING, parse_json_substring),
)


def _candidates(raw: str) -> List[str]:
    # Unescaping breaks replies whose JSON strings hold escaped quotes, so the
    # fence-stripped text is tried as-is after the cleaned one.
    cleaned = clean_model_output(raw)
    fenced = strip_code_fences(raw)
    return [cleaned] if fenced == cleaned else [cleaned, fenced]


def first_accepted(
    texts: Sequence[str], accept: Callable[[Dict[str, Any]], bool]
) -> Optional[Tuple[ExtractionMethod, Dict[str, Any]]]:
    """Run the JSON parser chain over each text and return the first accepted object."""
    for method, parser in JSON_PARSERS:
        for text in texts:
            parsed = parser(text)
            if parsed is not None and accept(parsed):
                return method, parsed
    return None


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _has_article_fields(parsed: Dict[str, Any]) -> bool:
    return all(_non_empty_string(parsed.get(key)) for key in ("title", "content", "summary"))


def _has_seo_fields(parsed: Dict[str, Any]) -> bool:
    return _non_empty_string(parsed.get("seoTitle")) and _non_empty_string(
        parsed.get("seoDescription")
    )


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


def find_labelled_value(lines: Sequence[str], label: str) -> str:
    """Return the text after ``label:`` on the first line mentioning it.

    The match is case-insensitive and may sit anywhere in the line, so prose
    containing e.g. "title:" is picked up too. Markdown emphasis around the
    value is removed; quotes are kept.
    """
    marker = re.compile(rf"{label}:", re.IGNORECASE)
    for line in lines:
        if marker.search(line):
            value = re.sub(rf".*{label}:\s*", "", line, count=1, flags=re.IGNORECASE)
            return value.strip().strip("*").strip()
    return ""


def extract_article(raw: str, request: GenerationRequest) -> ExtractedArticle:
    """Extract title, content, summary and keywords from a model reply.

    Args:
        raw: Model reply text, possibly fenced, escaped or not JSON at all
        request: The originating request, used for fallback values

    Returns:
        A populated article; ``method`` tells which layer produced it
    """
    texts = _candidates(raw)
    match = first_accepted(texts, _has_article_fields)
    if match is not None:
        method, parsed = match
        return ExtractedArticle(
            title=parsed["title"],
            content=parsed["content"].replace("\\n", "\n"),
            summary=parsed["summary"],
            keywords=_string_list(parsed.get("keywords")),
            method=method,
        )

    cleaned = texts[0]
    lines = cleaned.split("\n")
    logger.debug("No JSON object found in model reply, using line-pattern fallback")
    return ExtractedArticle(
        title=find_labelled_value(lines, "title") or request.topic,
        content=cleaned,
        summary=find_labelled_value(lines, "summary")
        or f"Article about {request.topic}",
        keywords=list(request.keywords),
        method=ExtractionMethod.LINE_PATTERN,
    )


def extract_seo_metadata(raw: str) -> Optional[SeoMetadata]:
    """Extract ``seoTitle``/``seoDescription`` from a reply, or None."""
    match = first_accepted(_candidates(raw), _has_seo_fields)
    if match is None:
        return None
    _, parsed = match
    return SeoMetadata(
        seo_title=parsed["seoTitle"].strip(),
        seo_description=parsed["seoDescription"].strip(),
    )


def extract_ideas(raw: str) -> ArticleIdeas:
    """Extract title and keyword ideas; empty lists when nothing parses."""
    found = _OUTER_OBJECT.search(raw or "")
    parsed = parse_json_object(found.group(0)) if found else None
    if parsed is None:
        return ArticleIdeas()
    return ArticleIdeas(
        titles=_string_list(parsed.get("titles"))[:MAX_IDEA_TITLES],
        keywords=_string_list(parsed.get("keywords"))[:MAX_IDEA_KEYWORDS],
    )
