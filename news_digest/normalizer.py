from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from .exceptions import ParseError
from .models import NewsItem

FRESHNESS_WINDOW = timedelta(hours=24)


def to_news_item(entry: Dict[str, Any], *, source: str, now: Optional[datetime] = None) -> NewsItem:
    """
    Convert a parsed record dict into a NewsItem.
    Requires:
    - title (non-empty)
    - link (non-empty)
    Optional:
    - description (defaults to "")
    - published_at (defaults to `now`)
    """
    title = (entry.get("title") or "").strip()
    description = (entry.get("description") or "").strip()
    link = (entry.get("link") or "").strip()

    if not title or not link:
        raise ParseError("Record lacks required fields for NewsItem: title/link")

    published_at = entry.get("published_at") or now or datetime.now(timezone.utc)

    return NewsItem(
        title=title,
        description=description,
        link=link,
        source=source,
        published_at=published_at,
    )


def is_fresh(item: NewsItem, *, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now - item.published_at <= FRESHNESS_WINDOW
