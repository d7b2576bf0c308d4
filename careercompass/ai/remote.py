from __future__ import annotations

import asyncio
import math
from typing import Any, Awaitable, Sequence, TypeVar

from pydantic import ValidationError

from careercompass.ai.config import AIConfig, load_ai_config
from careercompass.ai.prompts import (
    CHAT_MAX_TOKENS,
    build_advice_messages,
    build_match_messages,
    build_profile_messages,
)
from careercompass.ai.providers.openai_provider import OpenAIProvider
from careercompass.ai.types import ChatMessage, ExternalServiceUnavailable
from careercompass.schemas.match import MatchResult
from careercompass.schemas.opportunity import Opportunity
from careercompass.schemas.profile import Profile

T = TypeVar("T")


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(item) for item in value if item is not None and str(item).strip()]
    raise ExternalServiceUnavailable("Expected a list of strings", code="llm_invalid")


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _clamp_percentage(value: Any) -> int:
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ExternalServiceUnavailable("match_percentage is not a number", code="llm_invalid") from exc
    if math.isnan(number):
        raise ExternalServiceUnavailable("match_percentage is NaN", code="llm_invalid")
    return int(math.floor(max(0.0, min(100.0, number)) + 0.5))


class RemoteAdvisor:
    """Career advisor backed by an external chat-completion provider."""

    name = "remote"

    def __init__(self, provider: OpenAIProvider, config: AIConfig | None = None):
        self._provider = provider
        self._config = config or load_ai_config()

    @property
    def model(self) -> str:
        return self._provider.model

    def _ensure_enabled(self) -> None:
        if not self._config.enabled:
            raise ExternalServiceUnavailable("AI is disabled", code="llm_disabled")

    async def _bounded(self, call: Awaitable[T]) -> T:
        return await asyncio.wait_for(call, timeout=self._config.timeout_s)

    async def extract_profile(self, text: str) -> Profile:
        self._ensure_enabled()
        payload = await self._bounded(self._provider.complete_json(build_profile_messages(text)))
        try:
            return Profile(
                skills=_as_list(payload.get("skills")),
                experience=str(payload.get("experience") or ""),
                education=_as_list(payload.get("education")),
                domains=_as_list(payload.get("domains")),
                strengths=_as_list(payload.get("strengths")),
                career_goals=_as_list(_first(payload, "career_goals", "careerGoals")),
                matching_keywords=_as_list(_first(payload, "matching_keywords", "matchingKeywords")),
            )
        except ValidationError as exc:
            raise ExternalServiceUnavailable("Profile payload did not validate", code="llm_invalid") from exc

    async def score_match(self, opportunity: Opportunity, profile: Profile) -> MatchResult:
        self._ensure_enabled()
        payload = await self._bounded(
            self._provider.complete_json(build_match_messages(opportunity, profile))
        )
        reasoning = str(payload.get("reasoning") or "").strip() or "No reasoning provided"
        return MatchResult(
            percentage=_clamp_percentage(_first(payload, "match_percentage", "matchPercentage", "percentage")),
            reasoning=reasoning,
            skills_alignment=_as_list(_first(payload, "skills_alignment", "skillsAlignment")),
            missing_skills=_as_list(_first(payload, "missing_skills", "missingSkills")),
            recommendations=_as_list(payload.get("recommendations")),
        )

    async def respond(self, history: Sequence[ChatMessage], profile: Profile) -> str:
        self._ensure_enabled()
        return await self._bounded(
            self._provider.complete(build_advice_messages(history, profile), max_tokens=CHAT_MAX_TOKENS)
        )
