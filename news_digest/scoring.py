from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from .models import NewsItem

# (max age in whole hours, exclusive) -> bonus
RECENCY_BONUSES = ((1, 100), (6, 50), (12, 25))
KEYWORD_WEIGHT = 10
TITLE_KEYWORD_WEIGHT = 20


def _age_hours(item: NewsItem, now: datetime) -> int:
    # int() truncates toward zero, so items dated slightly in the future count as 0h
    return int((now - item.published_at).total_seconds() / 3600)


def score_item(item: NewsItem, keywords: Sequence[str], *, now: Optional[datetime] = None) -> int:
    """
    Relevance score used for ranking.

    - recency: <1h +100, <6h +50, <12h +25
    - +10 for every keyword found in title + description
    - +20 more for every keyword found in the title
    """
    now = now or datetime.now(timezone.utc)
    score = 0

    hours = _age_hours(item, now)
    for limit, bonus in RECENCY_BONUSES:
        if hours < limit:
            score += bonus
            break

    content = f"{item.title} {item.description}".lower()
    title = item.title.lower()
    for keyword in keywords:
        kw = keyword.lower()
        if kw in content:
            score += KEYWORD_WEIGHT
        if kw in title:
            score += TITLE_KEYWORD_WEIGHT

    return score


def rank_items(items: Iterable[NewsItem], max_items: int = 5) -> List[NewsItem]:
    """Order by score, highest first; equal scores keep their input order."""
    ranked = sorted(items, key=lambda x: x.score, reverse=True)
    if max_items and max_items > 0:
        ranked = ranked[:max_items]
    return ranked
