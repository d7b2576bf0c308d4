from __future__ import annotations

import json
import os
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI

from careercompass.ai.config import openai_api_key
from careercompass.ai.types import ChatMessage, ExternalServiceUnavailable


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        self._api_key = (api_key or openai_api_key() or "").strip()
        self._base_url = base_url or os.getenv("OPENAI_BASE_URL") or None
        self._timeout_s = float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s)))
        self._max_retries = int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries)))
        self._client: AsyncOpenAI | None = None

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        if not self._api_key:
            raise ExternalServiceUnavailable("OPENAI_API_KEY is missing", code="llm_missing_key")
        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout_s,
            max_retries=self._max_retries,
        )
        return self._client

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": payload,
            "temperature": self._temperature,
        }
        if max_tokens is not None:
            create_kwargs["max_tokens"] = max_tokens
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        response = await self._get_client().chat.completions.create(**create_kwargs)
        content = response.choices[0].message.content if response.choices else ""
        if not content or not content.strip():
            raise ExternalServiceUnavailable("Empty completion", code="llm_empty")
        return content.strip()

    async def complete_json(
        self,
        messages: Sequence[ChatMessage],
        *,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        content = await self.complete(messages, max_tokens=max_tokens, json_mode=True)
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ExternalServiceUnavailable("Completion is not valid JSON", code="llm_invalid") from exc
        if not isinstance(parsed, dict):
            raise ExternalServiceUnavailable("Completion is not a JSON object", code="llm_invalid")
        return parsed
