from __future__ import annotations

import re
from dataclasses import dataclass
from html import escape
from typing import List


@dataclass(frozen=True)
class Segment:
    text: str
    is_match: bool = False


def highlight_segments(text: str, query: str) -> List[Segment]:
    """Split ``text`` around case-insensitive occurrences of ``query``.

    The query is matched literally. Matches are non-overlapping and found
    left to right; matched pieces keep the casing of ``text``. Joining the
    segment texts always gives back ``text``.
    """
    if not text:
        return []
    if not query or not query.strip():
        return [Segment(text)]

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    segments: List[Segment] = []
    pos = 0
    for m in pattern.finditer(text):
        if m.start() > pos:
            segments.append(Segment(text[pos:m.start()]))
        segments.append(Segment(m.group(0), is_match=True))
        pos = m.end()
    if pos < len(text):
        segments.append(Segment(text[pos:]))
    return segments


def highlight_html(text: str, query: str) -> str:
    parts = []
    for seg in highlight_segments(text, query):
        safe = escape(seg.text)
        parts.append(f'<mark class="cb-mark">{safe}</mark>' if seg.is_match else safe)
    return "".join(parts)
