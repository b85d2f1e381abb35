from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .models import AggregationResult, NewsItem

DESCRIPTION_LIMIT = 150
MAX_DISPLAY_TRENDS = 10
RULE = "━━━━━━━━━━━━━━━━━━━━━━━━━━━━"


def truncate(text: str, limit: int) -> str:
    """Cut `text` to at most `limit` chars plus "...", preferring the last space before the limit."""
    if len(text) <= limit:
        return text
    last_space = text.rfind(" ", 0, limit)
    if last_space > 0:
        return text[:last_space] + "..."
    return text[:limit] + "..."


def _stamp(dt: datetime) -> str:
    # e.g. "January 2, 2006 - 15:04 UTC"
    return f"{dt:%B} {dt.day}, {dt:%Y - %H:%M} {dt.tzname() or ''}".rstrip()


def format_digest(
    top_items: Sequence[NewsItem],
    trends: Sequence[str],
    *,
    generated_at: Optional[datetime] = None,
    headline: str = "TOP NEWS",
    trends_heading: str = "TRENDING NOW",
    sources: Sequence[str] = (),
    trend_sources: Sequence[str] = (),
    description_limit: int = DESCRIPTION_LIMIT,
) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    lines: List[str] = [
        f"📰 **{headline}**",
        f"📅 {_stamp(generated_at)}",
        RULE,
        "",
    ]

    for rank, item in enumerate(top_items, start=1):
        lines.append(f"📰 **{rank}. {item.display_title}**")
        lines.append(f"📍 Source: {item.source}")
        description = item.display_description
        if description:
            lines.append(f"📝 {truncate(description, description_limit)}")
        lines.append(f"🔗 {item.link}")
        lines.append("")

    lines.append(RULE)
    lines.append(f"🔥 **{trends_heading}** 🔥")
    lines.append("")
    if not trends:
        lines.append("No trending topics available at this time.")
    else:
        lines.extend(f"• {t}" for t in trends[:MAX_DISPLAY_TRENDS])

    lines.append("")
    lines.append(RULE)
    lines.append(f"📊 Sources: {', '.join(sources) if sources else 'none'}")
    if trend_sources:
        lines.append(f"🔍 Trends: {', '.join(trend_sources)}")
    return "\n".join(lines)


def build_summary(result: AggregationResult) -> str:
    """One-line summary carried by the JSON payload."""
    n = len(result.top_items)
    lead = f"{n} top {'story' if n == 1 else 'stories'} from {len(result.sources)} sources"
    if result.top_items:
        lead += f", led by \"{result.top_items[0].display_title}\""
    return f"{lead}; {len(result.trends)} trending topics."


def _item_payload(item: NewsItem) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "title": item.title,
        "description": item.description,
        "link": item.link,
        "source": item.source,
        "publish_date": item.published_at.isoformat(),
        "score": item.score,
    }
    if item.translated_title is not None:
        out["title_translated"] = item.translated_title
    if item.translated_description is not None:
        out["description_translated"] = item.translated_description
    return out


def to_payload(result: AggregationResult) -> Dict[str, Any]:
    """Structured webhook document for JSON consumers."""
    return {
        "timestamp": result.generated_at.isoformat(),
        "news": [_item_payload(it) for it in result.top_items],
        "trends": list(result.trends),
        "summary": build_summary(result),
    }
