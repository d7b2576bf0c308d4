from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Sequence, TypeVar

from careercompass.ai.types import CareerAdvisor, ChatMessage
from careercompass.analytics.db import log_ai_run
from careercompass.schemas.match import MatchResult
from careercompass.schemas.opportunity import Opportunity
from careercompass.schemas.profile import Profile

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_code(exc: BaseException) -> str:
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code:
        return code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return "llm_timeout"
    return "llm_exception"


class FallbackAdvisor:
    """Try the primary advisor; on any failure answer from the fallback instead."""

    def __init__(self, primary: CareerAdvisor, fallback: CareerAdvisor):
        self._primary = primary
        self._fallback = fallback

    def _model(self) -> str:
        return str(getattr(self._primary, "model", getattr(self._primary, "name", "unknown")))

    def _record(self, **kwargs: Any) -> None:
        try:
            log_ai_run(model=self._model(), **kwargs)
        except Exception:  # pragma: no cover - analytics must not break AI responses
            logger.debug("ai_run_logging_failed", exc_info=True)

    async def _dispatch(
        self,
        operation: str,
        primary: Callable[[], Awaitable[T]],
        fallback: Callable[[], Awaitable[T]],
    ) -> T:
        run_id = uuid.uuid4().hex
        started = time.perf_counter()
        try:
            result = await primary()
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            code = _error_code(exc)
            latency_ms = int((time.perf_counter() - started) * 1000)
            logger.warning(
                json.dumps(
                    {
                        "event": "advisor_fallback",
                        "operation": operation,
                        "error_code": code,
                        "error": str(exc) or exc.__class__.__name__,
                        "duration_ms": latency_ms,
                    }
                )
            )
            self._record(
                run_id=run_id,
                operation=operation,
                path="fallback",
                status="fallback",
                error_code=code,
                latency_ms=latency_ms,
            )
            return await fallback()

        self._record(
            run_id=run_id,
            operation=operation,
            path="remote",
            status="success",
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        return result

    async def extract_profile(self, text: str) -> Profile:
        return await self._dispatch(
            "extract_profile",
            lambda: self._primary.extract_profile(text),
            lambda: self._fallback.extract_profile(text),
        )

    async def score_match(self, opportunity: Opportunity, profile: Profile) -> MatchResult:
        return await self._dispatch(
            "score_match",
            lambda: self._primary.score_match(opportunity, profile),
            lambda: self._fallback.score_match(opportunity, profile),
        )

    async def respond(self, history: Sequence[ChatMessage], profile: Profile) -> str:
        return await self._dispatch(
            "respond",
            lambda: self._primary.respond(history, profile),
            lambda: self._fallback.respond(history, profile),
        )
