from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

# (html, rule) -> records; the default implementation lives in parser.extract_articles
Extractor = Callable[[str, "ExtractionRule"], List[Dict[str, Any]]]
TrendExtractor = Callable[[str, "TrendRule"], List[str]]


@dataclass
class NewsItem:
    """
    A normalized news item.

    `score` is a ranking aid filled in by the relevance filter; the translated
    fields are only set when a translator ran. Items live for a single run.
    """
    title: str
    description: str
    link: str
    source: str
    published_at: datetime
    score: int = 0
    translated_title: Optional[str] = None
    translated_description: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.translated_title or self.title

    @property
    def display_description(self) -> str:
        return self.translated_description or self.description


@dataclass(frozen=True)
class ExtractionRule:
    """CSS selectors describing how article records sit on a listing page."""
    container: str = "article"
    title: Sequence[str] = ("h3", "h2")
    link: Optional[str] = "a"
    description: Sequence[str] = ("p",)
    limit: int = 10


@dataclass(frozen=True)
class FeedSource:
    url: str
    label: str
    fallback: Optional["SourceDescriptor"] = None

    def strategies(self) -> Iterator["SourceDescriptor"]:
        yield from _chain(self)


@dataclass(frozen=True)
class PageSource:
    url: str
    label: str
    rule: ExtractionRule = field(default_factory=ExtractionRule)
    # scheme://host used to resolve relative links; derived from url when unset
    origin: Optional[str] = None
    fallback: Optional["SourceDescriptor"] = None
    extract: Optional[Extractor] = None

    def strategies(self) -> Iterator["SourceDescriptor"]:
        yield from _chain(self)


SourceDescriptor = Union[FeedSource, PageSource]


def _chain(descriptor: SourceDescriptor) -> Iterator[SourceDescriptor]:
    current: Optional[SourceDescriptor] = descriptor
    while current is not None:
        yield current
        current = current.fallback


@dataclass(frozen=True)
class TrendRule:
    selector: str
    # when set, the label is the text of the first match inside each selected node
    inner: Optional[str] = None
    limit: int = 10
    exclude: Tuple[str, ...] = ()
    min_length: int = 1


@dataclass(frozen=True)
class TrendSource:
    url: str
    label: str
    rules: Tuple[TrendRule, ...] = ()
    extract: Optional[TrendExtractor] = None


@dataclass(frozen=True)
class AggregationResult:
    top_items: List[NewsItem]
    trends: List[str]
    generated_at: datetime
    sources: List[str] = field(default_factory=list)
    trend_sources: List[str] = field(default_factory=list)
