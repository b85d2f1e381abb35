from __future__ import annotations

import concurrent.futures as _fut
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlparse

import feedparser
import requests

from .exceptions import ParseError, SourceFetchError
from .models import FeedSource, NewsItem, PageSource, SourceDescriptor
from .normalizer import is_fresh, to_news_item
from .parser import extract_articles, parse_entry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def fetch_page(session: requests.Session, url: str, *, timeout: float = DEFAULT_TIMEOUT) -> requests.Response:
    """GET a URL through the run's session; network errors and non-2xx become SourceFetchError."""
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise SourceFetchError(f"Failed to fetch {url} ({e})") from e
    return resp


def fetch_feed_entries(session: requests.Session, url: str, *, timeout: float = DEFAULT_TIMEOUT) -> List[Dict[str, Any]]:
    """
    Fetch a single feed URL and return its raw entries.

    Raises SourceFetchError on network/parse issues. A feed flagged as
    malformed (bozo) is only rejected when nothing could be salvaged from it.
    """
    resp = fetch_page(session, url, timeout=timeout)
    feed = feedparser.parse(resp.content)

    entries = getattr(feed, "entries", None)
    if not entries and (getattr(feed, "bozo", 0) or not getattr(feed, "version", "")):
        exc = getattr(feed, "bozo_exception", None)
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise SourceFetchError(msg)

    if not isinstance(entries, list):
        raise SourceFetchError(f"Feed has no entries: {url}")
    return entries


def _origin(descriptor: PageSource) -> str:
    if descriptor.origin:
        return descriptor.origin
    parsed = urlparse(descriptor.url)
    return f"{parsed.scheme}://{parsed.netloc}"


def _to_items(records: Sequence[Dict[str, Any]], *, source: str, now: datetime) -> List[NewsItem]:
    items = []
    for rec in records:
        try:
            items.append(to_news_item(rec, source=source, now=now))
        except ParseError:
            # Skip malformed rows
            continue
    return items


def _fetch_feed(session: requests.Session, descriptor: FeedSource, *, timeout: float, now: datetime) -> List[NewsItem]:
    entries = fetch_feed_entries(session, descriptor.url, timeout=timeout)
    items = _to_items([parse_entry(e) for e in entries], source=descriptor.label, now=now)
    return [it for it in items if is_fresh(it, now=now)]


def _fetch_scraped(session: requests.Session, descriptor: PageSource, *, timeout: float, now: datetime) -> List[NewsItem]:
    resp = fetch_page(session, descriptor.url, timeout=timeout)
    extract = descriptor.extract or extract_articles
    try:
        records = extract(resp.text, descriptor.rule)
    except Exception as e:
        raise SourceFetchError(f"Failed to extract articles from {descriptor.url} ({e})") from e

    origin = _origin(descriptor)
    for rec in records:
        link = rec.get("link") or ""
        if link and not link.startswith("http"):
            rec["link"] = urljoin(origin + "/", link)
        # listing pages rarely expose a date
        rec["published_at"] = None
    return _to_items(records[: descriptor.rule.limit], source=descriptor.label, now=now)


def fetch_source(
    session: requests.Session,
    descriptor: SourceDescriptor,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    now: Optional[datetime] = None,
) -> List[NewsItem]:
    """
    Fetch one source, walking its fallback chain.

    The first strategy returning at least one item wins. Failures are logged
    and never raised: a source that cannot be read contributes nothing.
    """
    now = now or datetime.now(timezone.utc)
    for strategy in descriptor.strategies():
        try:
            if isinstance(strategy, FeedSource):
                items = _fetch_feed(session, strategy, timeout=timeout, now=now)
            else:
                items = _fetch_scraped(session, strategy, timeout=timeout, now=now)
        except SourceFetchError as e:
            logger.warning("Error fetching %s (%s): %s", strategy.label, strategy.url, e)
            continue
        if items:
            return items
        logger.info("No items from %s (%s)", strategy.label, strategy.url)
    return []


def fetch_many(
    session: requests.Session,
    descriptors: Sequence[SourceDescriptor],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = 8,
    now: Optional[datetime] = None,
) -> List[Tuple[SourceDescriptor, List[NewsItem]]]:
    """
    Fetch multiple sources in parallel.

    Results are returned in declaration order, paired with their descriptor,
    regardless of which fetch finished first.
    """
    now = now or datetime.now(timezone.utc)

    def _one(d: SourceDescriptor) -> List[NewsItem]:
        return fetch_source(session, d, timeout=timeout, now=now)

    max_workers = max(1, int(max_workers or 1))
    if max_workers == 1 or len(descriptors) <= 1:
        return [(d, _one(d)) for d in descriptors]

    with _fut.ThreadPoolExecutor(max_workers=max_workers) as ex:
        futures = [ex.submit(_one, d) for d in descriptors]
        return [(d, fu.result()) for d, fu in zip(descriptors, futures)]
