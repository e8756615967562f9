"""
Chat completion client used for query rewriting and re-ranking.
"""

from __future__ import annotations

import os
from typing import Any

from google.genai import Client as GenAIClient
from google.genai.types import HttpOptions

from .config import DEFAULT_CHAT_MODEL, SearchSettings


class LanguageModel:
    """Single-turn text completion via Google GenAI."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        timeout_ms: int | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model or os.getenv("PREP_SEARCH_CHAT_MODEL", DEFAULT_CHAT_MODEL)

        if client is not None:
            self._client = client
        else:
            resolved_key = api_key or os.getenv("GOOGLE_API_KEY")
            if resolved_key is None:
                raise ValueError(
                    "GOOGLE_API_KEY not found. "
                    "Provide api_key or set the environment variable."
                )
            self._client = GenAIClient(
                api_key=resolved_key,
                http_options=HttpOptions(timeout=timeout_ms),
            )

    @classmethod
    def from_settings(
        cls, settings: SearchSettings, *, client: Any | None = None
    ) -> LanguageModel:
        return cls(
            api_key=settings.api_key,
            model=settings.chat_model,
            timeout_ms=settings.request_timeout_ms,
            client=client,
        )

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Return the trimmed response text, or an empty string if there is none."""
        response = self._client.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config={
                "system_instruction": system_prompt,
                "temperature": temperature,
                "max_output_tokens": max_tokens,
            },
        )
        return (response.text or "").strip()
