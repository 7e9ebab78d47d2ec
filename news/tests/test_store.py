import threading
import unittest
from datetime import datetime, timedelta, timezone

from news.errors import NotFound, ValidationError
from news.models import ArticleDraft, ArticleSource
from news.store import ArticleStore

BASE_TIME = datetime(2024, 11, 25, 12, 0, tzinfo=timezone.utc)


def _draft(title: str, hours_ago: int = 0, **overrides) -> ArticleDraft:
    values = dict(
        title=title,
        url=f"https://example.com/{title.replace(' ', '-').lower()}",
        published_at=BASE_TIME - timedelta(hours=hours_ago),
        source=ArticleSource(id="reuters", name="Reuters"),
        description="desc",
    )
    values.update(overrides)
    return ArticleDraft(**values)


class ArticleStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = ArticleStore()

    def test_create_then_get_returns_identical_fields(self):
        draft = _draft("Fed holds rates", country="us", category="business", author="Jane")
        created = self.store.create(draft)

        fetched = self.store.get_by_id(created.id)
        self.assertEqual(fetched, created)
        self.assertTrue(created.id)
        self.assertIsNotNone(created.created_at)
        self.assertIsNone(created.ai_summary)
        for name in ("title", "url", "published_at", "source", "description", "author", "country", "category"):
            self.assertEqual(getattr(fetched, name), getattr(draft, name))

    def test_ids_are_unique(self):
        first = self.store.create(_draft("One"))
        second = self.store.create(_draft("One"))
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(self.store), 2)

    def test_get_by_id_unknown_returns_none(self):
        self.assertIsNone(self.store.get_by_id("missing"))

    def test_update_overwrites_summary(self):
        record = self.store.create(_draft("Markets rally"))
        self.store.update(record.id, {"ai_summary": "X"})
        self.assertEqual(self.store.get_by_id(record.id).ai_summary, "X")

        self.store.update(record.id, {"ai_summary": "Y"})
        updated = self.store.get_by_id(record.id)
        self.assertEqual(updated.ai_summary, "Y")
        self.assertEqual(updated.created_at, record.created_at)

    def test_update_unknown_id_raises_not_found(self):
        with self.assertRaises(NotFound):
            self.store.update("missing", {"ai_summary": "X"})

    def test_update_rejects_immutable_fields(self):
        record = self.store.create(_draft("Immutable"))
        with self.assertRaises(ValidationError):
            self.store.update(record.id, {"created_at": BASE_TIME})
        with self.assertRaises(ValidationError):
            self.store.update(record.id, {"id": "other"})

    def test_summary_cannot_be_cleared(self):
        record = self.store.create(_draft("Sticky"))
        self.store.update(record.id, {"ai_summary": "kept"})
        with self.assertRaises(ValidationError):
            self.store.update(record.id, {"ai_summary": None})

    def test_previously_read_record_is_not_mutated_by_update(self):
        record = self.store.create(_draft("Snapshot"))
        self.store.update(record.id, {"ai_summary": "new"})
        self.assertIsNone(record.ai_summary)

    def test_get_all_filters_by_country_and_sorts_newest_first(self):
        self.store.create(_draft("Old US", hours_ago=5, country="us"))
        self.store.create(_draft("GB story", hours_ago=1, country="gb"))
        self.store.create(_draft("New US", hours_ago=0, country="us"))

        results = self.store.get_all(country="us")
        self.assertEqual([r.title for r in results], ["New US", "Old US"])
        self.assertTrue(all(r.country == "us" for r in results))

    def test_get_all_keeps_insertion_order_for_equal_timestamps(self):
        for title in ("first", "second", "third"):
            self.store.create(_draft(title, hours_ago=2))
        self.assertEqual([r.title for r in self.store.get_all()], ["first", "second", "third"])

    def test_get_all_matches_sources_by_name_or_id(self):
        self.store.create(_draft("By id", source=ArticleSource(id="bbc-news", name="BBC News")))
        self.store.create(_draft("By name", source=ArticleSource(id=None, name="The Verge")))
        self.store.create(_draft("Other", source=ArticleSource(id="cnn", name="CNN")))

        results = self.store.get_all(sources=["bbc-news", "The Verge"])
        self.assertEqual(sorted(r.title for r in results), ["By id", "By name"])

    def test_naive_and_offset_timestamps_sort_together(self):
        naive = self.store.create(_draft("Naive", published_at=datetime(2024, 11, 25, 10, 0)))
        offset = self.store.create(
            _draft("Offset", published_at=datetime(2024, 11, 25, 12, 30, tzinfo=timezone(timedelta(hours=2))))
        )
        self.store.create(_draft("Aware"))

        self.assertEqual(naive.published_at.tzinfo, timezone.utc)
        self.assertEqual(offset.published_at, datetime(2024, 11, 25, 10, 30, tzinfo=timezone.utc))
        self.assertEqual([a.title for a in self.store.get_all()], ["Aware", "Offset", "Naive"])

    def test_get_all_filters_by_category(self):
        self.store.create(_draft("Tech", category="technology"))
        self.store.create(_draft("Sport", category="sports"))
        self.assertEqual([r.title for r in self.store.get_all(category="sports")], ["Sport"])

    def test_concurrent_updates_apply_whole_values(self):
        record = self.store.create(_draft("Race"))
        values = [f"summary-{i}" for i in range(20)]
        threads = [
            threading.Thread(target=self.store.update, args=(record.id, {"ai_summary": value})) for value in values
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertIn(self.store.get_by_id(record.id).ai_summary, values)


if __name__ == "__main__":
    unittest.main()
