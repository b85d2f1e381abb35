from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from .models import NewsItem
from .scoring import score_item


def _content(item: NewsItem) -> str:
    return f"{item.title} {item.description}".lower()


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    # text is already lowercased by _content
    return any(k.lower() in text for k in keywords)


def matches_keywords(item: NewsItem, keywords: Iterable[str]) -> bool:
    """
    True when the lowercased title + description contains any keyword.

    Matching is plain substring containment, so "spain" also hits inside
    longer words and multi-word keywords such as "pedro sánchez" work as-is.
    """
    return _contains_any(_content(item), keywords)


def filter_relevant(
    items: Iterable[NewsItem],
    keywords: Sequence[str],
    *,
    now: Optional[datetime] = None,
) -> List[NewsItem]:
    """Keep items matching at least one keyword and attach their relevance score."""
    out: List[NewsItem] = []
    for item in items:
        if not matches_keywords(item, keywords):
            continue
        item.score = score_item(item, keywords, now=now)
        out.append(item)
    return out
