import unittest
from datetime import datetime, timedelta, timezone

from app import create_app
from news import build_services
from news.errors import ProviderError
from news.models import ProviderResponse
from news.settings import NewsSettings
from news.summarize import FALLBACK_SUMMARY

BASE_TIME = datetime(2024, 11, 25, 12, 0, tzinfo=timezone.utc)


def _raw(index: int):
    return {
        "source": {"id": None, "name": f"Outlet {index}"},
        "author": None,
        "title": f"Story {index}",
        "description": f"Description {index}",
        "url": f"https://example.com/{index}",
        "urlToImage": f"https://example.com/{index}.jpg",
        "publishedAt": (BASE_TIME - timedelta(hours=index)).isoformat(),
        "content": f"Content {index}",
    }


class _StubProvider:
    name = "stub"

    def __init__(self, articles, error=None):
        self.articles = articles
        self.error = error
        self.last_filters = None

    def _respond(self, filters):
        self.last_filters = filters
        if self.error:
            raise self.error
        return ProviderResponse(status="ok", total_results=len(self.articles), articles=list(self.articles))

    fetch_top_headlines = _respond
    search_everything = _respond

    def list_sources(self, country=None, category=None):
        return [{"id": "bbc-news", "name": "BBC News", "country": country}]


class _StubEngine:
    name = "stub-engine"

    def __init__(self, fail=False):
        self.fail = fail

    def generate(self, prompt, model_hint=None):
        if self.fail:
            raise RuntimeError("engine down")
        if "sentiment" in prompt:
            return '{"rating": 4, "confidence": 0.8}'
        return "Generated summary."


class ApiRoutesTests(unittest.TestCase):
    def _client(self, provider=None, engine=None):
        self.provider = provider or _StubProvider([_raw(i) for i in range(3)])
        self.services = build_services(NewsSettings(), provider=self.provider, engine=engine or _StubEngine())
        app = create_app(self.services)
        app.testing = True
        return app.test_client()

    def test_headlines_return_stored_articles(self):
        client = self._client()
        resp = client.get("/api/articles?country=gb&pageSize=3")
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["totalResults"], 3)
        self.assertEqual([a["title"] for a in data["articles"]], ["Story 0", "Story 1", "Story 2"])
        self.assertEqual(data["articles"][0]["country"], "gb")
        self.assertEqual(data["articles"][0]["imageUrl"], "https://example.com/0.jpg")
        self.assertIsNone(data["articles"][0]["aiSummary"])

    def test_invalid_page_size_is_bad_request(self):
        client = self._client()
        resp = client.get("/api/articles/search?pageSize=500")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["kind"], "validation")

    def test_repeated_sources_params_are_merged(self):
        client = self._client()
        client.get("/api/articles?sources=cnn&sources=bbc-news")
        self.assertEqual(self.provider.last_filters.sources, ["cnn", "bbc-news"])

    def test_provider_error_is_retryable(self):
        client = self._client(provider=_StubProvider([], error=ProviderError("News API error (500): down", status=500)))
        resp = client.get("/api/articles")
        self.assertEqual(resp.status_code, 502)
        body = resp.get_json()
        self.assertTrue(body["retryable"])
        self.assertEqual(body["upstreamStatus"], 500)

    def test_sources_route(self):
        resp = self._client().get("/api/sources?country=gb")
        self.assertEqual(resp.get_json()["sources"][0]["country"], "gb")

    def test_summarize_article_updates_store(self):
        client = self._client()
        article_id = client.get("/api/articles").get_json()["articles"][1]["id"]

        resp = client.post(f"/api/summarize-article/{article_id}", json={"summaryLength": "short"})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["summary"], "Generated summary.")
        self.assertEqual(data["article"]["aiSummary"], data["summary"])
        self.assertFalse(data["degraded"])

        stored = client.get(f"/api/articles/{article_id}").get_json()
        self.assertEqual(stored["aiSummary"], "Generated summary.")

    def test_summarize_article_without_body_uses_default_length(self):
        client = self._client()
        article_id = client.get("/api/articles").get_json()["articles"][0]["id"]
        self.assertEqual(client.post(f"/api/summarize-article/{article_id}").status_code, 200)

    def test_summarize_unknown_article_is_404(self):
        resp = self._client().post("/api/summarize-article/nope", json={})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["kind"], "not_found")

    def test_engine_failure_still_returns_200(self):
        client = self._client(engine=_StubEngine(fail=True))
        resp = client.post("/api/summarize", json={"articles": [{"title": "a", "content": "b"}, {"title": "c", "content": ""}]})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["summaries"], [FALLBACK_SUMMARY, FALLBACK_SUMMARY])

    def test_summarize_requires_json_body(self):
        resp = self._client().post("/api/summarize", data="not json", content_type="text/plain")
        self.assertEqual(resp.status_code, 400)

    def test_topic_summary_returns_citations(self):
        client = self._client(engine=_StubEngine(fail=True))
        resp = client.post("/api/topic-summary", json={"topic": "inflation"})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["topic"], "inflation")
        self.assertEqual(data["totalArticles"], 3)
        self.assertEqual(len(data["sourceLinks"]), 3)
        self.assertEqual(data["sourceLinks"][0], {"title": "Story 0", "url": "https://example.com/0", "source": "Outlet 0"})
        self.assertTrue(data["degraded"])
        self.assertEqual(self.provider.last_filters.query, "inflation")

    def test_stored_articles_filter(self):
        client = self._client()
        client.get("/api/articles?country=gb")
        client.get("/api/articles?country=us")
        data = client.get("/api/articles/stored?country=gb").get_json()
        self.assertEqual(data["totalResults"], 3)
        self.assertTrue(all(a["country"] == "gb" for a in data["articles"]))

    def test_sentiment(self):
        data = self._client().post("/api/sentiment", json={"text": "Markets soar"}).get_json()
        self.assertEqual((data["rating"], data["confidence"], data["degraded"]), (4, 0.8, False))

    def test_voice_command(self):
        client = self._client()
        data = client.post("/api/voice-command", json={"transcript": "Show me technology news from USA"}).get_json()
        self.assertEqual(data["query"], "technology news from USA")
        self.assertIsNone(client.post("/api/voice-command", json={"transcript": "find"}).get_json()["query"])

    def test_system_health(self):
        client = self._client()
        client.get("/api/articles")
        data = client.get("/api/system-health").get_json()
        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["store"]["articles"], 3)
        self.assertEqual(data["summarizer"]["engine"], "stub-engine")
        self.assertTrue(data["pipeline"]["health"][0]["healthy"])

    def test_unknown_route_is_json_404(self):
        resp = self._client().get("/api/unknown")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["kind"], "http")


if __name__ == "__main__":
    unittest.main()
