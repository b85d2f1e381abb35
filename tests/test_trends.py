import unittest

import requests

from news_digest.exceptions import SourceFetchError
from news_digest.models import TrendRule, TrendSource
from news_digest.trends import collect_trends, extract_trends, fetch_trends

from tests.fakes import FakeResponse, FakeSession

GETDAYTRENDS = """
<table>
  <tr><td class="trend-name">#Madrid</td></tr>
  <tr><td class="trend-name">Liga...</td></tr>
  <tr><td class="trend-name">Sánchez</td></tr>
</table>
"""

TRENDS24_ALT = """
<ol class="trend-card__list">
  <li><a href="/t/1">Real Madrid</a></li>
  <li><a href="/t/2">#Hashtag</a></li>
  <li><span>no anchor</span></li>
  <li><a href="/t/3">Barça</a></li>
</ol>
"""


class ExtractTrendsTests(unittest.TestCase):
    def test_exclude_and_cap(self):
        rule = TrendRule(".trend-name", exclude=("...",))
        self.assertEqual(extract_trends(GETDAYTRENDS, rule), ["#Madrid", "Sánchez"])
        self.assertEqual(extract_trends(GETDAYTRENDS, TrendRule(".trend-name", limit=1)), ["#Madrid"])

    def test_inner_selector(self):
        rule = TrendRule("ol.trend-card__list li", inner="a", exclude=("#",))
        self.assertEqual(extract_trends(TRENDS24_ALT, rule), ["Real Madrid", "Barça"])

    def test_min_length(self):
        html = '<a href="/trend/x">ab</a><a href="/trend/y">abc</a>'
        self.assertEqual(extract_trends(html, TrendRule("a[href*='/trend/']", min_length=3)), ["abc"])


class FetchTrendsTests(unittest.TestCase):
    def test_secondary_rule_used_when_primary_empty(self):
        session = FakeSession(get={"https://trends24.in/mexico/": FakeResponse(text=TRENDS24_ALT)})
        source = TrendSource(
            "https://trends24.in/mexico/",
            "Mexico Trends",
            rules=(
                TrendRule(".trend-card__title"),
                TrendRule("ol.trend-card__list li", inner="a", exclude=("#",)),
            ),
        )
        self.assertEqual(fetch_trends(session, source), ["Real Madrid", "Barça"])
        # page fetched once for both rules
        self.assertEqual(len(session.get_calls), 1)

    def test_extractor_error_becomes_fetch_error(self):
        session = FakeSession(get={"https://t.com/": FakeResponse(text="<li>x</li>")})
        source = TrendSource("https://t.com/", "T", rules=(TrendRule("li:nth-child("),))
        with self.assertRaises(SourceFetchError):
            fetch_trends(session, source)

    def test_injected_extractor_is_capped(self):
        session = FakeSession(get={"https://t.com/": FakeResponse(text="")})
        source = TrendSource(
            "https://t.com/", "T", rules=(TrendRule("x", limit=2),), extract=lambda html, rule: ["a", "b", "c"]
        )
        self.assertEqual(fetch_trends(session, source), ["a", "b"])


class CollectTrendsTests(unittest.TestCase):
    def test_merge_in_declaration_order_with_failure(self):
        pages = {
            "https://a.com/": FakeResponse(text='<p class="t">a</p><p class="t">b</p>'),
            "https://b.com/": requests.ConnectionError("down"),
            "https://c.com/": FakeResponse(text='<p class="t">b</p><p class="t">c</p>'),
        }
        sources = [TrendSource(url, url, rules=(TrendRule(".t"),)) for url in pages]
        session = FakeSession(get=pages)

        with self.assertLogs("news_digest.trends", level="WARNING"):
            trends, labels = collect_trends(session, sources, max_workers=3)

        self.assertEqual(trends, ["a", "b", "c"])
        self.assertEqual(labels, ["https://a.com/", "https://c.com/"])

    def test_invalid_selector_does_not_block_other_sources(self):
        pages = {
            "https://a.com/": FakeResponse(text="<li>x</li>"),
            "https://b.com/": FakeResponse(text='<p class="t">b</p>'),
        }
        sources = [
            TrendSource("https://a.com/", "A", rules=(TrendRule("li:nth-child("),)),
            TrendSource("https://b.com/", "B", rules=(TrendRule(".t"),)),
        ]

        with self.assertLogs("news_digest.trends", level="WARNING") as logs:
            trends, labels = collect_trends(FakeSession(get=pages), sources, max_workers=1)

        self.assertEqual(trends, ["b"])
        self.assertEqual(labels, ["B"])
        self.assertIn("trends from A", logs.output[0])

    def test_failing_injected_extractor_is_isolated(self):
        def broken(html, rule):
            raise ValueError("layout changed")

        pages = {
            "https://a.com/": FakeResponse(text=""),
            "https://b.com/": FakeResponse(text='<p class="t">b</p>'),
        }
        sources = [
            TrendSource("https://a.com/", "A", rules=(TrendRule("x"),), extract=broken),
            TrendSource("https://b.com/", "B", rules=(TrendRule(".t"),)),
        ]

        with self.assertLogs("news_digest.trends", level="WARNING"):
            trends, labels = collect_trends(FakeSession(get=pages), sources, max_workers=2)

        self.assertEqual((trends, labels), (["b"], ["B"]))


if __name__ == "__main__":
    unittest.main()
