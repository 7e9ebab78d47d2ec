"""API routes for NewsDigest."""
from __future__ import annotations

import logging
from typing import Any, Dict

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from app_utils import get_current_timestamp
from news import NewsServices
from news.errors import NewsError, NotFound, ValidationError
from news.schemas import (
    FilterSpec,
    SentimentRequest,
    SummarizeArticleRequest,
    SummarizeRequest,
    TopicSummaryRequest,
    VoiceCommandRequest,
    parse_model,
)
from news.status import build_status
from news.voice import normalize_voice_command

logger = logging.getLogger("newsdigest")


def _filter_params() -> Dict[str, Any]:
    params: Dict[str, Any] = request.args.to_dict()
    sources = request.args.getlist("sources")
    if len(sources) > 1:
        params["sources"] = sources
    return params


def _json_body(required: bool = True) -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        if required or request.get_data(cache=True):
            raise ValidationError("Request body must be a JSON object")
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def register_routes(app, services: NewsServices):
    """Register all API routes with the Flask app.

    Args:
        app: Flask app instance.
        services: Wired store, pipeline and summarizer shared by every request.
    """

    @app.errorhandler(NewsError)
    def handle_news_error(exc: NewsError):
        if exc.http_status >= 500:
            logger.error("%s failed: %s", request.path, exc.message)
        else:
            logger.info("%s rejected (%s): %s", request.path, exc.kind, exc.message)
        return jsonify(exc.to_dict()), exc.http_status

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return jsonify({"status": "error", "kind": "http", "message": exc.description}), exc.code
        logger.error("Unhandled error on %s: %s", request.path, exc, exc_info=True)
        return jsonify({"status": "error", "kind": "internal", "message": "Internal server error"}), 500

    @app.route("/api/articles")
    def api_headlines():
        """Top headlines through the aggregation pipeline."""
        filters = FilterSpec.from_params(_filter_params())
        logger.info("Headlines request country=%s category=%s sources=%s", filters.country, filters.category, filters.sources)
        return jsonify(services.pipeline.fetch_headlines(filters).to_dict())

    @app.route("/api/articles/search")
    def api_search():
        """Full-text search through the aggregation pipeline."""
        filters = FilterSpec.from_params(_filter_params())
        logger.info("Search request q=%s sources=%s sortBy=%s", filters.query, filters.sources, filters.sort_by)
        return jsonify(services.pipeline.search_articles(filters).to_dict())

    @app.route("/api/articles/stored")
    def api_stored_articles():
        filters = FilterSpec.from_params(_filter_params())
        articles = services.store.get_all(country=filters.country, category=filters.category, sources=filters.sources)
        return jsonify({"status": "ok", "totalResults": len(articles), "articles": [a.to_dict() for a in articles]})

    @app.route("/api/articles/<article_id>")
    def api_article(article_id: str):
        article = services.store.get_by_id(article_id)
        if article is None:
            raise NotFound(f"Article with id {article_id} not found")
        return jsonify(article.to_dict())

    @app.route("/api/sources")
    def api_sources():
        country = request.args.get("country") or None
        category = request.args.get("category") or None
        return jsonify({"sources": services.pipeline.list_sources(country, category)})

    @app.route("/api/summarize", methods=["POST"])
    def api_summarize():
        """Independent summaries for caller-supplied articles, in input order."""
        body = parse_model(SummarizeRequest, _json_body())
        outcomes = services.summarizer.summarize_texts(body.articles, body.summary_length)
        logger.info("Summarized %s articles (%s degraded)", len(outcomes), sum(o.degraded for o in outcomes))
        return jsonify({"summaries": [outcome.text for outcome in outcomes]})

    @app.route("/api/summarize-article/<article_id>", methods=["POST"])
    def api_summarize_article(article_id: str):
        body = parse_model(SummarizeArticleRequest, _json_body(required=False))
        article, outcome = services.summarizer.summarize_one(article_id, body.summary_length)
        return jsonify({"article": article.to_dict(), "summary": outcome.text, "degraded": outcome.degraded})

    @app.route("/api/topic-summary", methods=["POST"])
    def api_topic_summary():
        body = parse_model(TopicSummaryRequest, _json_body())
        logger.info("Topic summary requested for '%s'", body.topic)
        result = services.topic_summary(body.topic, body.max_articles)
        return jsonify(result.to_dict())

    @app.route("/api/sentiment", methods=["POST"])
    def api_sentiment():
        body = parse_model(SentimentRequest, _json_body())
        return jsonify(services.summarizer.analyze_sentiment(body.text).to_dict())

    @app.route("/api/voice-command", methods=["POST"])
    def api_voice_command():
        """Map a finalized transcript to a search query; ``query`` is null when nothing is left."""
        body = parse_model(VoiceCommandRequest, _json_body())
        return jsonify({"transcript": body.transcript, "query": normalize_voice_command(body.transcript)})

    @app.route("/api/system-health")
    def api_system_health():
        """API endpoint for system health status."""
        payload = build_status(services)
        payload["status"] = "ok"
        payload["timestamp"] = get_current_timestamp()
        return jsonify(payload)
