import unittest
from datetime import datetime, timedelta, timezone

import requests

from news_digest.exceptions import SourceFetchError
from news_digest.fetcher import fetch_feed_entries, fetch_many, fetch_source
from news_digest.models import ExtractionRule, FeedSource, PageSource

from tests.fakes import FakeResponse, FakeSession, rss

NOW = datetime.now(timezone.utc).replace(microsecond=0)

PAGE = """
<article><h3>Madrid hoy</h3><a href="/mundo/articles/1">x</a><p>desc</p></article>
<article><h3>Sevilla</h3><a href="https://www.bbc.com/mundo/articles/2">x</a></article>
"""


class FeedTests(unittest.TestCase):
    def test_freshness_window(self):
        feed = rss([
            {"title": "Fresh", "link": "https://e.com/1", "published": NOW - timedelta(hours=2)},
            {"title": "Stale", "link": "https://e.com/2", "published": NOW - timedelta(hours=30)},
            {"title": "Undated", "link": "https://e.com/3", "published": None},
        ])
        session = FakeSession(get={"https://e.com/rss": FakeResponse(text=feed)})
        items = fetch_source(session, FeedSource("https://e.com/rss", "Example"), now=NOW)

        self.assertEqual([it.title for it in items], ["Fresh", "Undated"])
        self.assertEqual(items[0].published_at, NOW - timedelta(hours=2))
        self.assertEqual(items[1].published_at, NOW)
        self.assertTrue(all(it.source == "Example" for it in items))

    def test_http_error_raises(self):
        session = FakeSession(get={"https://e.com/rss": FakeResponse(status_code=503)})
        with self.assertRaises(SourceFetchError):
            fetch_feed_entries(session, "https://e.com/rss")

    def test_garbage_raises(self):
        session = FakeSession(get={"https://e.com/rss": FakeResponse(text="<html><p>not a feed")})
        with self.assertRaises(SourceFetchError):
            fetch_feed_entries(session, "https://e.com/rss")


class PageTests(unittest.TestCase):
    def test_relative_links_resolved_against_origin(self):
        session = FakeSession(get={"https://www.bbc.com/mundo/topics/x": FakeResponse(text=PAGE)})
        source = PageSource("https://www.bbc.com/mundo/topics/x", "BBC Mundo", rule=ExtractionRule(title=("h3",)))
        items = fetch_source(session, source, now=NOW)

        self.assertEqual(
            [it.link for it in items],
            ["https://www.bbc.com/mundo/articles/1", "https://www.bbc.com/mundo/articles/2"],
        )
        self.assertEqual(items[0].description, "desc")
        self.assertEqual(items[0].published_at, NOW)

    def test_injected_extractor(self):
        def extract(html, rule):
            return [{"title": f"t{i}", "link": f"/p/{i}", "description": ""} for i in range(20)]

        session = FakeSession(get={"https://site.com/list": FakeResponse(text="<html/>")})
        source = PageSource(
            "https://site.com/list", "Site", rule=ExtractionRule(limit=3), origin="https://cdn.site.com", extract=extract
        )
        items = fetch_source(session, source, now=NOW)
        self.assertEqual([it.link for it in items], [f"https://cdn.site.com/p/{i}" for i in range(3)])


class FallbackTests(unittest.TestCase):
    def test_falls_back_when_feed_fails(self):
        session = FakeSession(get={
            "https://feeds.e.com/rss": requests.ConnectionError("down"),
            "https://www.bbc.com/mundo/topics/x": FakeResponse(text=PAGE),
        })
        source = FeedSource(
            "https://feeds.e.com/rss",
            "BBC Mundo",
            fallback=PageSource("https://www.bbc.com/mundo/topics/x", "BBC Mundo", rule=ExtractionRule(title=("h3",))),
        )
        with self.assertLogs("news_digest.fetcher", level="WARNING"):
            items = fetch_source(session, source, now=NOW)
        self.assertEqual(len(items), 2)
        self.assertEqual(session.get_calls, ["https://feeds.e.com/rss", "https://www.bbc.com/mundo/topics/x"])

    def test_falls_back_when_feed_is_empty(self):
        old = rss([{"title": "Old", "link": "https://e.com/1", "published": NOW - timedelta(days=3)}])
        session = FakeSession(get={
            "https://feeds.e.com/rss": FakeResponse(text=old),
            "https://www.bbc.com/mundo/topics/x": FakeResponse(text=PAGE),
        })
        source = FeedSource(
            "https://feeds.e.com/rss",
            "BBC Mundo",
            fallback=PageSource("https://www.bbc.com/mundo/topics/x", "BBC Mundo", rule=ExtractionRule(title=("h3",))),
        )
        self.assertEqual(len(fetch_source(session, source, now=NOW)), 2)

    def test_primary_success_skips_fallback(self):
        feed = rss([{"title": "Fresh", "link": "https://e.com/1", "published": NOW}])
        session = FakeSession(get={"https://feeds.e.com/rss": FakeResponse(text=feed)})
        source = FeedSource("https://feeds.e.com/rss", "E", fallback=PageSource("https://e.com/", "E"))
        self.assertEqual(len(fetch_source(session, source, now=NOW)), 1)
        self.assertEqual(session.get_calls, ["https://feeds.e.com/rss"])

    def test_all_strategies_failing_yields_nothing(self):
        session = FakeSession()
        source = FeedSource("https://a.com/rss", "A", fallback=PageSource("https://a.com/", "A"))
        with self.assertLogs("news_digest.fetcher", level="WARNING") as logs:
            self.assertEqual(fetch_source(session, source, now=NOW), [])
        self.assertEqual(len(logs.records), 2)


class FetchManyTests(unittest.TestCase):
    def test_results_follow_declaration_order(self):
        feeds = {
            f"https://s{i}.com/rss": FakeResponse(text=rss([{"title": f"s{i}", "link": f"https://s{i}.com/1", "published": NOW}]))
            for i in range(5)
        }
        feeds["https://s2.com/rss"] = requests.Timeout("slow")
        session = FakeSession(get=feeds)
        descriptors = [FeedSource(f"https://s{i}.com/rss", f"S{i}") for i in range(5)]

        results = fetch_many(session, descriptors, max_workers=4, now=NOW)

        self.assertEqual([d.label for d, _ in results], ["S0", "S1", "S2", "S3", "S4"])
        self.assertEqual([len(items) for _, items in results], [1, 1, 0, 1, 1])


if __name__ == "__main__":
    unittest.main()
