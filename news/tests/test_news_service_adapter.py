import unittest
from unittest.mock import MagicMock, patch

import requests

from news.adapters.news_service import NewsServiceAdapter
from news.errors import ProviderError, UpstreamTimeout
from news.http_client import HttpClient
from news.rate_limiter import RateLimiter
from news.schemas import FilterSpec

SAMPLE_PAYLOAD = {
    "status": "ok",
    "totalResults": 37,
    "articles": [
        {
            "source": {"id": "reuters", "name": "Reuters"},
            "author": "Jane Doe",
            "title": "Stocks gain as inflation cools",
            "description": "Investors react to the latest CPI report.",
            "url": "https://example.com/markets/fed",
            "urlToImage": None,
            "publishedAt": "2024-11-25T12:00:00Z",
            "content": "Full text",
        }
    ],
}


class NewsServiceAdapterTests(unittest.TestCase):
    @patch("news.adapters.news_service.HttpClient.get")
    def test_headlines_send_resolved_params(self, mock_get):
        mock_get.return_value = SAMPLE_PAYLOAD
        adapter = NewsServiceAdapter(api_key="test-key", base_url="https://news.test/v2")

        response = adapter.fetch_top_headlines(
            FilterSpec.from_params({"country": "gb", "category": "business", "pageSize": "5"})
        )

        self.assertEqual(response.total_results, 37)
        self.assertEqual(len(response.articles), 1)
        url = mock_get.call_args.args[0]
        params = mock_get.call_args.kwargs["params"]
        headers = mock_get.call_args.kwargs["headers"]
        self.assertEqual(url, "https://news.test/v2/top-headlines")
        self.assertEqual(params, {"country": "gb", "category": "business", "pageSize": 5, "page": 1})
        self.assertEqual(headers, {"X-Api-Key": "test-key"})

    @patch("news.adapters.news_service.HttpClient.get")
    def test_search_sends_search_params_only(self, mock_get):
        mock_get.return_value = {"status": "ok", "totalResults": 0, "articles": []}
        adapter = NewsServiceAdapter(api_key="test-key")

        adapter.search_everything(
            FilterSpec.from_params(
                {"q": "ai", "from": "2024-11-01", "to": "2024-11-02", "sortBy": "relevancy", "country": "us"}
            )
        )

        params = mock_get.call_args.kwargs["params"]
        self.assertEqual(mock_get.call_args.args[0], "https://newsapi.org/v2/everything")
        self.assertEqual(params["q"], "ai")
        self.assertEqual(params["sortBy"], "relevancy")
        self.assertEqual((params["from"], params["to"]), ("2024-11-01", "2024-11-02"))
        self.assertNotIn("country", params)

    @patch("news.adapters.news_service.HttpClient.get")
    def test_list_sources(self, mock_get):
        mock_get.return_value = {"status": "ok", "sources": [{"id": "bbc-news", "name": "BBC News"}, "junk"]}
        sources = NewsServiceAdapter(api_key="k").list_sources(country="gb")
        self.assertEqual(sources, [{"id": "bbc-news", "name": "BBC News"}])
        self.assertEqual(mock_get.call_args.kwargs["params"], {"country": "gb"})

    @patch("news.adapters.news_service.HttpClient.get")
    def test_missing_key_fails_without_request(self, mock_get):
        with self.assertRaises(ProviderError) as ctx:
            NewsServiceAdapter(api_key=None).fetch_top_headlines(FilterSpec())
        self.assertEqual(ctx.exception.status, 401)
        mock_get.assert_not_called()

    @patch("news.adapters.news_service.HttpClient.get")
    def test_error_status_in_body_raises(self, mock_get):
        mock_get.return_value = {"status": "error", "code": "parametersMissing", "message": "Required parameters are missing."}
        with self.assertRaises(ProviderError) as ctx:
            NewsServiceAdapter(api_key="k").search_everything(FilterSpec())
        self.assertIn("parametersMissing", ctx.exception.message)


class HttpClientTests(unittest.TestCase):
    def _response(self, status, payload=None, text=""):
        response = MagicMock()
        response.status_code = status
        response.text = text
        response.json.return_value = payload
        return response

    def test_non_success_status_raises_provider_error_with_status(self):
        client = HttpClient()
        client.session.request = MagicMock(
            return_value=self._response(401, {"status": "error", "message": "Your API key is invalid."}, "apiKey=abc")
        )
        with self.assertRaises(ProviderError) as ctx:
            client.get("https://news.test/v2/everything")
        self.assertEqual(ctx.exception.status, 401)
        self.assertIn("Your API key is invalid.", ctx.exception.message)

    def test_timeout_maps_to_upstream_timeout(self):
        client = HttpClient(timeout=1)
        client.session.request = MagicMock(side_effect=requests.Timeout("read timed out"))
        with self.assertRaises(UpstreamTimeout):
            client.get("https://news.test/v2/everything")

    def test_connection_error_maps_to_provider_error(self):
        client = HttpClient()
        client.session.request = MagicMock(side_effect=requests.ConnectionError("refused"))
        with self.assertRaises(ProviderError) as ctx:
            client.get("https://news.test")
        self.assertIsNone(ctx.exception.status)

    def test_success_returns_json(self):
        client = HttpClient()
        client.session.request = MagicMock(return_value=self._response(200, {"status": "ok"}))
        self.assertEqual(client.post("https://engine.test", {"a": 1}), {"status": "ok"})
        self.assertEqual(client.session.request.call_args.kwargs["json"], {"a": 1})


class RateLimiterTests(unittest.TestCase):
    def test_spaces_calls_by_min_interval(self):
        now = [100.0]
        sleeps = []

        def fake_sleep(seconds):
            sleeps.append(seconds)
            now[0] += seconds

        limiter = RateLimiter(sleep=fake_sleep, clock=lambda: now[0])
        limiter.configure("news-service", 1.0)

        self.assertEqual(limiter.wait("news-service"), 0.0)
        now[0] += 0.25
        self.assertAlmostEqual(limiter.wait("news-service"), 0.75)
        self.assertEqual(len(sleeps), 1)

    def test_unconfigured_key_never_waits(self):
        limiter = RateLimiter(sleep=lambda s: self.fail("should not sleep"))
        limiter.configure("news-service", 0)
        self.assertEqual(limiter.wait("news-service"), 0.0)


if __name__ == "__main__":
    unittest.main()
