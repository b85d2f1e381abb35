"""
news_digest

Aggregates news items and trending topics from RSS feeds and web pages,
keeps the ones relevant to a keyword set, ranks them, optionally translates
them and delivers a formatted digest to a webhook.

Core ideas:
- Input: source descriptors (feeds or pages with extraction rules, each with an optional fallback)
- Process: fetch → normalize → filter & score → rank → [translate] → format → publish
- Output: one digest per run, as plain text or JSON

Example
-------
from news_digest import NewsAggregator, load_settings

settings = load_settings()
aggregator = NewsAggregator(settings, keywords=["madrid", "barcelona"])
result = aggregator.aggregate()

for item in result.top_items:
    print(item.score, item.source, item.title)
"""
from .config import Settings, load_settings
from .core import NewsAggregator
from .models import (
    AggregationResult,
    ExtractionRule,
    FeedSource,
    NewsItem,
    PageSource,
    TrendRule,
    TrendSource,
)

__all__ = [
    "AggregationResult",
    "ExtractionRule",
    "FeedSource",
    "NewsAggregator",
    "NewsItem",
    "PageSource",
    "Settings",
    "TrendRule",
    "TrendSource",
    "load_settings",
]
