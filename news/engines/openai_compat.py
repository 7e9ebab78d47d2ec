from __future__ import annotations

from typing import Any, Optional

import openai
from openai import OpenAI

from news.errors import EngineError, EngineTimeout
from utils.security import redact_secrets

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAICompatibleEngine:
    """
    Chat-completions through the ``openai`` client. Works with OpenAI and
    compatible endpoints such as DeepSeek by pointing ``base_url`` elsewhere.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout: float = 20,
        temperature: float = 0.3,
        max_tokens: int = 800,
        client: Optional[Any] = None,
    ) -> None:
        if not api_key:
            raise ValueError("OPENAI_API_KEY (or DEEPSEEK_API_KEY) is required for the openai backend")
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        # retries stay with the caller; the orchestrator owns the overall deadline
        self.client = client or OpenAI(api_key=api_key, base_url=self.base_url, timeout=timeout, max_retries=0)

    def generate(self, prompt: str, model_hint: Optional[str] = None) -> str:
        try:
            response = self.client.chat.completions.create(
                model=model_hint or self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError as exc:
            raise EngineTimeout(f"Chat completion timed out: {redact_secrets(str(exc))}") from exc
        except openai.APIError as exc:
            raise EngineError(f"Chat completion failed: {redact_secrets(str(exc))}") from exc

        if not response.choices:
            raise EngineError("Chat completion returned no choices")
        return (response.choices[0].message.content or "").strip()
