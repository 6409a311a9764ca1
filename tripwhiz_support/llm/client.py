"""
OpenAI chat LLM client.
"""

from __future__ import annotations

from typing import Any, Dict, List

from openai import OpenAI

from tripwhiz_support.config import settings

DEFAULT_LLM_MODEL = settings.llm_model_name
DEFAULT_TEMPERATURE = settings.llm_temperature
DEFAULT_MAX_TOKENS = settings.llm_max_tokens


class LLMClient:
    def __init__(
        self,
        model: str = DEFAULT_LLM_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
        self.client = client or OpenAI(
            api_key=api_key,
            timeout=settings.request_timeout_sec,
            max_retries=settings.max_retries,
        )

    def chat(self, messages: List[Dict[str, Any]]) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            messages=messages,
        )
        choice = response.choices[0].message
        return choice.content or ""


__all__ = ["LLMClient", "DEFAULT_LLM_MODEL", "DEFAULT_TEMPERATURE", "DEFAULT_MAX_TOKENS"]
