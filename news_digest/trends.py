from __future__ import annotations

import concurrent.futures as _fut
import logging
from typing import List, Sequence, Tuple

import requests
from bs4 import BeautifulSoup

from .dedup import dedup_trends
from .exceptions import SourceFetchError
from .fetcher import DEFAULT_TIMEOUT, fetch_page
from .models import TrendRule, TrendSource

logger = logging.getLogger(__name__)


def extract_trends(html: str, rule: TrendRule) -> List[str]:
    """Default trend extraction: text of the nodes matched by `rule`, capped at `rule.limit`."""
    soup = BeautifulSoup(html, "html.parser")
    out: List[str] = []
    for node in soup.select(rule.selector):
        if len(out) >= rule.limit:
            break
        if rule.inner:
            node = node.select_one(rule.inner)
            if node is None:
                continue
        label = node.get_text(" ", strip=True)
        if len(label) < rule.min_length:
            continue
        if any(x in label for x in rule.exclude):
            continue
        out.append(label)
    return out


def fetch_trends(session: requests.Session, source: TrendSource, *, timeout: float = DEFAULT_TIMEOUT) -> List[str]:
    """
    Fetch a trend page once and apply its rules in order.
    The first rule that yields anything wins.
    """
    resp = fetch_page(session, source.url, timeout=timeout)
    extract = source.extract or extract_trends
    for rule in source.rules:
        try:
            trends = extract(resp.text, rule)[: rule.limit]
        except Exception as e:
            raise SourceFetchError(f"Failed to extract trends from {source.url} ({e})") from e
        if trends:
            return trends
    return []


def collect_trends(
    session: requests.Session,
    sources: Sequence[TrendSource],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = 4,
) -> Tuple[List[str], List[str]]:
    """
    Gather trends from every source and merge them.

    Returns (trends, contributing source labels). Sources are merged in
    declaration order; a failing source is logged and contributes nothing.
    """

    def _one(src: TrendSource) -> List[str]:
        try:
            return fetch_trends(session, src, timeout=timeout)
        except SourceFetchError as e:
            logger.warning("Error fetching trends from %s: %s", src.label, e)
            return []

    max_workers = max(1, int(max_workers or 1))
    if max_workers == 1 or len(sources) <= 1:
        groups = [_one(s) for s in sources]
    else:
        with _fut.ThreadPoolExecutor(max_workers=max_workers) as ex:
            futures = [ex.submit(_one, s) for s in sources]
            groups = [fu.result() for fu in futures]

    labels = [s.label for s, g in zip(sources, groups) if g]
    return dedup_trends(groups), labels
