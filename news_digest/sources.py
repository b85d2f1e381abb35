"""Default catalog: Spanish-language news sources, Spain keywords and trend pages."""
from __future__ import annotations

from typing import List

from .models import ExtractionRule, FeedSource, PageSource, SourceDescriptor, TrendRule, TrendSource

SPAIN_KEYWORDS = [
    "españa", "spain", "español", "española",
    "madrid", "barcelona", "valencia", "sevilla",
    "gobierno español", "pedro sánchez", "rey felipe",
    "la moncloa", "congreso de los diputados",
]

_LISTING = ExtractionRule()
_HEADLINE_ANCHOR = ExtractionRule(title=("h2 a", "h3 a"), link=None)


def _bbc_topic(path: str) -> PageSource:
    return PageSource(
        url=f"https://www.bbc.com/mundo/topics/{path}",
        label="BBC Mundo",
        rule=ExtractionRule(title=("h3",)),
        origin="https://www.bbc.com",
    )


def _cnn_section(url: str) -> PageSource:
    return PageSource(
        url=url,
        label="CNN en Español",
        rule=ExtractionRule(title=("h3 a",), link=None, description=(".news__excerpt", "p"), limit=15),
        origin="https://cnnespanol.cnn.com",
    )


DEFAULT_SOURCES: List[SourceDescriptor] = [
    FeedSource("https://feeds.bbci.co.uk/mundo/rss.xml", "BBC Mundo", fallback=_bbc_topic("c2lej05epw5t")),
    FeedSource("https://feeds.bbci.co.uk/mundo/noticias/rss.xml", "BBC Mundo", fallback=_bbc_topic("c7zp57yyz25t")),
    _cnn_section("https://cnnespanol.cnn.com/category/espana/"),
    _cnn_section("https://cnnespanol.cnn.com/latinoamerica/"),
    PageSource(
        "https://apnews.com/hub/latin-america",
        "AP News",
        rule=ExtractionRule(container="div[data-key='card-headline']"),
    ),
    PageSource("https://www.reuters.com/world/americas/", "Reuters", rule=_LISTING),
    PageSource("https://www.foxnews.com/category/world/world-regions/latin-america", "Fox News", rule=_LISTING),
    FeedSource(
        "https://www.eluniversal.com.mx/rss.xml",
        "El Universal México",
        fallback=PageSource("https://www.eluniversal.com.mx/", "El Universal México", rule=_HEADLINE_ANCHOR),
    ),
    FeedSource(
        "https://feeds.elpais.com/mrss-s/pages/ep/site/elpais.com/section/mexico/portada",
        "El País México",
        fallback=PageSource(
            "https://elpais.com/noticias/mexico/",
            "El País México",
            rule=ExtractionRule(title=("h2 a",), link=None),
        ),
    ),
    FeedSource("https://feeds.elpais.com/mrss-s/pages/ep/site/elpais.com/section/espana/portada", "El País"),
    FeedSource("https://www.europapress.es/rss/rss.aspx", "Europa Press"),
]

DEFAULT_TREND_SOURCES: List[TrendSource] = [
    TrendSource(
        "https://getdaytrends.com/spain/",
        "Google Trends Spain",
        rules=(
            TrendRule(".trend-name", exclude=("...",)),
            TrendRule("a[href*='/trend/']", exclude=("...",), min_length=3),
        ),
    ),
    TrendSource(
        "https://trends24.in/spain/",
        "X (Twitter) Spain",
        rules=(TrendRule(".trend-card__title", limit=5),),
    ),
    TrendSource(
        "https://trends24.in/mexico/",
        "Mexico Trends",
        rules=(
            TrendRule(".trend-card__title"),
            TrendRule("ol.trend-card__list li", inner="a", exclude=("#",)),
        ),
    ),
]

HEADLINE = "TOP {n} SPAIN NEWS"
TRENDS_HEADING = "TRENDING IN SPAIN"
