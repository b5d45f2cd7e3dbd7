"""Pull full dev-host URLs out of raw column text."""
import re
from typing import Any, Iterable, List

URL_RE = re.compile(r"https?://[^\s\"'<>]+", re.IGNORECASE)

TRAILING_PUNCTUATION = ".,);]"


def extract_urls(text: Any, markers: Iterable[str]) -> List[str]:
    """Return URLs in `text` containing any marker fragment, in document order.

    Duplicates are kept; see dedupe_urls.
    """
    if not isinstance(text, str) or not text:
        return []

    lowered_markers = [m.lower() for m in markers if m]
    urls: List[str] = []
    for match in URL_RE.finditer(text):
        url = match.group(0).rstrip(TRAILING_PUNCTUATION)
        lowered = url.lower()
        if any(marker in lowered for marker in lowered_markers):
            urls.append(url)
    return urls


def dedupe_urls(urls: Iterable[str], limit: int) -> List[str]:
    """First-seen order, no duplicates, at most `limit` entries."""
    seen = set()
    unique: List[str] = []
    for url in urls:
        if url in seen:
            continue
        seen.add(url)
        unique.append(url)
        if len(unique) >= limit:
            break
    return unique
