"""
HTTP helper shared by the provider adapter and the summarization engines.

Unlike a best-effort fetcher, failures are raised: callers need the upstream
status to decide between ``ProviderError`` and ``UpstreamTimeout``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from news.errors import ProviderError, UpstreamTimeout
from utils.security import redact_secrets

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "NewsDigest/1.0"


class HttpClient:
    def __init__(
        self,
        timeout: float = 10,
        max_retries: int = 0,
        user_agent: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=max_retries,
            backoff_factor=0.6,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS", "POST"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update(
            {
                "User-Agent": user_agent or DEFAULT_USER_AGENT,
                "Accept": "application/json",
            }
        )
        if headers:
            self.session.headers.update(headers)

    def get(
        self, url: str, params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._request("GET", url, params=params, headers=headers)

    def post(self, url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return self._request("POST", url, json=payload, headers=headers)

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            logger.warning("HTTP %s timed out after %ss: %s", method, self.timeout, redact_secrets(str(exc)))
            raise UpstreamTimeout(f"Upstream request timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            message = redact_secrets(str(exc))
            logger.error("HTTP %s exception %s", method, message)
            raise ProviderError(f"Upstream request failed: {message}") from exc

        if resp.status_code != 200:
            body = redact_secrets(resp.text[:500])
            logger.warning("HTTP %s failed %s %s", method, resp.status_code, body[:200])
            raise ProviderError(f"Upstream error ({resp.status_code}): {_error_message(resp, body)}", status=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProviderError("Upstream returned a non-JSON body", status=resp.status_code) from exc
        if not isinstance(payload, dict):
            raise ProviderError("Upstream returned an unexpected JSON shape", status=resp.status_code)
        return payload


def _error_message(resp: requests.Response, fallback: str) -> str:
    try:
        data = resp.json()
    except ValueError:
        return fallback
    if not isinstance(data, dict):
        return fallback
    # NewsAPI: {"message": ...}; Gemini/OpenAI: {"error": {"message": ...}}
    message = data.get("message")
    error = data.get("error")
    if not message and isinstance(error, dict):
        message = error.get("message")
    return redact_secrets(str(message)) if message else fallback
