from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

from softvibe.config.schema import TutorConfig
from softvibe.errors import CredentialMissingError, TutorUnavailableError


class LLMClient:
    """Minimal helper for issuing chat completions.

    The OpenAI client is built on first use so a missing credential surfaces as
    `CredentialMissingError` at call time instead of breaking application startup.
    """

    def __init__(self, config: TutorConfig, api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        self.config = config
        self._api_key = api_key
        self.client = client

    def _resolve_client(self) -> OpenAI:
        if self.client is not None:
            return self.client
        key = self._api_key or os.getenv(self.config.api_key_env)
        if not key:
            raise CredentialMissingError(f"{self.config.api_key_env} must be set to use the AI tutor.")
        self.client = OpenAI(api_key=key, base_url=self.config.base_url)
        return self.client

    def generate(self, messages: List[Dict[str, Any]], **kwargs: Any) -> str:
        client = self._resolve_client()
        params = {
            "model": self.config.name,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_output_tokens,
        }
        params.update(kwargs)
        try:
            response = client.chat.completions.create(messages=messages, **params)
        except OpenAIError as exc:
            raise TutorUnavailableError(f"Tutor request failed: {exc}") from exc
        return response.choices[0].message.content or ""
