"""Context snippets for matched rows.

Snippets are short, whitespace-collapsed excerpts centred on the match so the
email stays readable even when the matching column holds a whole post body.
"""
import re
from typing import Iterable

ELLIPSIS = "…"

_WHITESPACE_RE = re.compile(r"\s+")


def strip_wildcards(pattern: str) -> str:
    """'%.wpengine.com%' -> '.wpengine.com'"""
    return pattern.replace("%", "")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def trim_text(text: str, max_len: int) -> str:
    """Collapse whitespace and cut to max_len, marking the cut with an ellipsis."""
    text = collapse_whitespace(text)
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + ELLIPSIS


def context_snippet(text: str, start: int, match_len: int, max_len: int) -> str:
    """Window of text around [start, start + match_len).

    The window extends `half = max(20, max_len // 2)` characters on each side,
    clamped to the text. An ellipsis marks each side that was clamped.
    """
    half = max(20, max_len // 2)
    win_start = max(0, start - half)
    win_end = min(len(text), start + match_len + half)

    snippet = collapse_whitespace(text[win_start:win_end])
    if win_start > 0:
        snippet = ELLIPSIS + snippet
    if win_end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet


def _find_ignore_case(text: str, needle: str) -> int:
    """Offset of needle in text (case-insensitive), or -1. Offsets index `text` itself."""
    match = re.search(re.escape(needle), text, re.IGNORECASE)
    return match.start() if match else -1


def snippet_from_url(text: str, url: str, max_len: int) -> str:
    pos = _find_ignore_case(text, url)
    if pos < 0:
        return trim_text(text, max_len)
    return context_snippet(text, pos, len(url), max_len)


def snippet_from_patterns(text: str, patterns: Iterable[str], max_len: int) -> str:
    """Fallback snippet around the earliest literal pattern occurrence.

    Used when the SQL LIKE matched but no full URL could be parsed, e.g. a
    scheme-less 'mysite.wpengine.com/path' in serialized meta.
    """
    positions = []
    for pattern in patterns:
        needle = strip_wildcards(pattern)
        if not needle:
            continue
        pos = _find_ignore_case(text, needle)
        if pos >= 0:
            positions.append(pos)

    if not positions:
        return trim_text(text, max_len)
    return context_snippet(text, min(positions), 0, max_len)
