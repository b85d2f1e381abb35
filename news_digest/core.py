from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

from .classifier import filter_relevant
from .config import Settings
from .exceptions import NoItemsError, PublishError
from .fetcher import fetch_many
from .formatter import format_digest, to_payload
from .models import AggregationResult, NewsItem, SourceDescriptor, TrendSource
from .publisher import WebhookPublisher
from .scoring import rank_items
from .sources import DEFAULT_SOURCES, DEFAULT_TREND_SOURCES, HEADLINE, SPAIN_KEYWORDS, TRENDS_HEADING
from .translators import Translator, build_translator, translate_items
from .trends import collect_trends

logger = logging.getLogger(__name__)


class NewsAggregator:
    """
    High-level API: one aggregation pass from sources to webhook.

    Pipeline: fetch (parallel) → filter & score → rank → [translate] → format → publish
    Trends are collected independently and merged into the result.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        sources: Optional[Sequence[SourceDescriptor]] = None,
        keywords: Optional[Sequence[str]] = None,
        trend_sources: Optional[Sequence[TrendSource]] = None,
        session: Optional[requests.Session] = None,
        translator: Optional[Translator] = None,
        publisher: Optional[WebhookPublisher] = None,
        headline: str = HEADLINE,
        trends_heading: str = TRENDS_HEADING,
    ) -> None:
        self.settings = settings
        self.sources = list(DEFAULT_SOURCES if sources is None else sources)
        self.keywords = [k.lower() for k in (SPAIN_KEYWORDS if keywords is None else keywords)]
        self.trend_sources = list(DEFAULT_TREND_SOURCES if trend_sources is None else trend_sources)
        self.session = session or settings.make_session()
        # Built up front so a missing provider key fails before any request goes out
        self.translator = translator or build_translator(settings, session=self.session)
        self.publisher = publisher or WebhookPublisher(
            settings.webhook_url, session=self.session, timeout_sec=settings.request_timeout
        )
        self.headline = headline
        self.trends_heading = trends_heading

    def aggregate(self, *, now: Optional[datetime] = None) -> AggregationResult:
        now = now or datetime.now(timezone.utc)
        results = fetch_many(
            self.session,
            self.sources,
            timeout=self.settings.request_timeout,
            max_workers=self.settings.max_workers,
            now=now,
        )

        all_items: List[NewsItem] = []
        contributing: List[str] = []
        for descriptor, items in results:
            relevant = filter_relevant(items, self.keywords, now=now)
            logger.info("%s: %d fetched, %d relevant", descriptor.label, len(items), len(relevant))
            if relevant and descriptor.label not in contributing:
                contributing.append(descriptor.label)
            all_items.extend(relevant)

        if not all_items:
            raise NoItemsError("no news items could be fetched from any source")

        top_items = rank_items(all_items, self.settings.max_items)

        if self.settings.translate:
            top_items = translate_items(
                top_items,
                self.translator,
                source_lang=self.settings.source_lang,
                target_lang=self.settings.target_lang,
            )

        trends, trend_labels = collect_trends(
            self.session,
            self.trend_sources,
            timeout=self.settings.request_timeout,
            max_workers=self.settings.max_workers,
        )

        return AggregationResult(
            top_items=top_items,
            trends=trends,
            generated_at=now,
            sources=contributing,
            trend_sources=trend_labels,
        )

    def format(self, result: AggregationResult) -> str:
        return format_digest(
            result.top_items,
            result.trends,
            generated_at=result.generated_at,
            headline=self.headline.format(n=len(result.top_items)),
            trends_heading=self.trends_heading,
            sources=result.sources,
            trend_sources=result.trend_sources,
        )

    def payload(self, result: AggregationResult, message: str) -> Union[str, Dict[str, Any]]:
        if self.settings.webhook_mode == "json":
            return to_payload(result)
        return message

    def run(self, *, now: Optional[datetime] = None, publish: bool = True) -> str:
        """
        Aggregate, format and deliver one digest; returns the formatted text.

        Raises NoItemsError when nothing relevant was fetched and PublishError
        when the webhook rejects the delivery; the PublishError carries the
        formatted text as `digest`. The text is logged before publishing either way.
        """
        result = self.aggregate(now=now)
        logger.info(
            "Aggregated %d news items and %d trending topics",
            len(result.top_items),
            len(result.trends),
        )

        message = self.format(result)
        logger.info("Formatted message:\n%s", message)

        if publish:
            try:
                self.publisher.publish(self.payload(result, message))
            except PublishError as e:
                e.digest = message
                raise
        return message
