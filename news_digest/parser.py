from __future__ import annotations

import calendar
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import feedparser
from bs4 import BeautifulSoup

from .models import ExtractionRule


def _to_datetime(entry: Dict[str, Any]) -> Optional[datetime]:
    """
    Convert feed entry date fields to timezone-aware UTC datetime.
    Priority: published_parsed -> updated_parsed -> created_parsed -> None.
    """
    for key in ("published_parsed", "updated_parsed", "created_parsed"):
        val = entry.get(key)
        if isinstance(val, time.struct_time):
            try:
                # feedparser normalizes *_parsed to UTC
                return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
            except (OverflowError, ValueError):
                continue
    for key in ("published", "updated", "created"):
        s = entry.get(key)
        if isinstance(s, str) and s:
            parsed = feedparser._parse_date(s)  # type: ignore[attr-defined]
            if isinstance(parsed, time.struct_time):
                return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
    return None


def parse_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a raw feed entry (from feedparser) to a dict with the common fields:
    title, description, link, published_at (datetime|None).
    """
    title = (entry.get("title") or "").strip()
    description = (entry.get("summary") or entry.get("description") or "").strip()
    link = (entry.get("link") or entry.get("feedburner_origlink") or "").strip()

    return {
        "title": title,
        "description": description,
        "link": link,
        "published_at": _to_datetime(entry),
    }


def _text(node) -> str:
    if node is None:
        return ""
    return node.get_text(" ", strip=True)


def extract_articles(html: str, rule: ExtractionRule) -> List[Dict[str, Any]]:
    """
    Default page extraction: pull repeated article records out of a listing page.

    Each record carries `title`, `link` (raw href, possibly relative) and
    `description`. Records lacking a title or a link are skipped and at most
    `rule.limit` records are returned.
    """
    soup = BeautifulSoup(html, "html.parser")
    out: List[Dict[str, Any]] = []

    for block in soup.select(rule.container):
        if len(out) >= rule.limit:
            break

        title_node = None
        for sel in rule.title:
            title_node = block.select_one(sel)
            if title_node is not None:
                break
        title = _text(title_node)

        if rule.link:
            link_node = block.select_one(rule.link)
        else:
            link_node = title_node
        href = (link_node.get("href") or "").strip() if link_node is not None else ""

        description = ""
        for sel in rule.description:
            description = _text(block.select_one(sel))
            if description:
                break

        if not title or not href:
            continue
        out.append({"title": title, "link": href, "description": description})

    return out
