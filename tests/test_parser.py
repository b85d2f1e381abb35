import time
import unittest
from datetime import datetime, timezone

from news_digest.models import ExtractionRule
from news_digest.parser import extract_articles, parse_entry

LISTING = """
<html><body>
  <article><h3>Madrid hosts summit</h3><a href="/news/1">read</a><p>Leaders meet in Madrid.</p></article>
  <article><h2>Fallback heading</h2><a href="https://other.com/2">read</a></article>
  <article><h3></h3><a href="/news/3">no title</a></article>
  <article><h3>No link here</h3></article>
  <article><h3>Fourth</h3><a href="/news/4">x</a><p>four</p></article>
</body></html>
"""

CNN_LIKE = """
<article><h3><a href="/2024/05/01/a">España hoy</a></h3>
  <p>first paragraph</p><div class="news__excerpt">the excerpt</div></article>
<article><h3><a href="/2024/05/01/b">Otra</a></h3><p>only paragraph</p></article>
"""


class ExtractArticlesTests(unittest.TestCase):
    def test_default_rule(self):
        records = extract_articles(LISTING, ExtractionRule())
        self.assertEqual(
            records,
            [
                {"title": "Madrid hosts summit", "link": "/news/1", "description": "Leaders meet in Madrid."},
                {"title": "Fallback heading", "link": "https://other.com/2", "description": ""},
                {"title": "Fourth", "link": "/news/4", "description": "four"},
            ],
        )

    def test_limit_counts_kept_records(self):
        records = extract_articles(LISTING, ExtractionRule(limit=2))
        self.assertEqual([r["title"] for r in records], ["Madrid hosts summit", "Fallback heading"])

    def test_title_anchor_and_excerpt(self):
        rule = ExtractionRule(title=("h3 a",), link=None, description=(".news__excerpt", "p"))
        records = extract_articles(CNN_LIKE, rule)
        self.assertEqual(records[0]["link"], "/2024/05/01/a")
        self.assertEqual(records[0]["description"], "the excerpt")
        self.assertEqual(records[1]["description"], "only paragraph")

    def test_no_matches(self):
        self.assertEqual(extract_articles("<html><body><div>nothing</div></body></html>", ExtractionRule()), [])


class ParseEntryTests(unittest.TestCase):
    def test_maps_fields(self):
        entry = {
            "title": " Madrid ",
            "summary": " resumen ",
            "link": "https://example.com/a ",
            "published_parsed": time.struct_time((2024, 5, 1, 10, 0, 0, 2, 122, 0)),
        }
        parsed = parse_entry(entry)
        self.assertEqual(parsed["title"], "Madrid")
        self.assertEqual(parsed["description"], "resumen")
        self.assertEqual(parsed["link"], "https://example.com/a")
        self.assertEqual(parsed["published_at"], datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc))

    def test_missing_date(self):
        parsed = parse_entry({"title": "x", "description": "d", "link": "https://e.com"})
        self.assertIsNone(parsed["published_at"])
        self.assertEqual(parsed["description"], "d")


if __name__ == "__main__":
    unittest.main()
