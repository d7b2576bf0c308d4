from __future__ import annotations

import asyncio
import json
import logging
import time

from careercompass.ai.factory import get_advisor
from careercompass.ai.types import CareerAdvisor
from careercompass.schemas.match import Match, MatchGenerationResponse, MatchResult
from careercompass.schemas.opportunity import Opportunity
from careercompass.services.errors import ProfileNotReady, UserNotFound
from careercompass.storage import db

logger = logging.getLogger(__name__)

ACCEPTANCE_THRESHOLD = 50


def is_accepted(result: MatchResult) -> bool:
    return result.percentage >= ACCEPTANCE_THRESHOLD


def _persist(user_id: int, opportunity: Opportunity, result: MatchResult) -> Match:
    existing = db.find_match(user_id, opportunity.id)
    if existing is not None:
        # Keep the user's status; only the score and reasoning are refreshed.
        refreshed = db.refresh_match(existing.id, percentage=result.percentage, reasoning=result.reasoning)
        if refreshed is not None:
            return refreshed
        # Row deleted between lookup and update.
    return db.create_match(
        user_id=user_id,
        opportunity_id=opportunity.id,
        percentage=result.percentage,
        reasoning=result.reasoning,
        status="suggested",
    )


async def generate_matches(user_id: int, *, advisor: CareerAdvisor | None = None) -> MatchGenerationResponse:
    started_at = time.perf_counter()
    user = db.get_user(user_id)
    if user is None:
        raise UserNotFound(user_id)
    if user.profile is None:
        raise ProfileNotReady(user_id)

    profile = user.profile
    advisor = advisor or get_advisor()
    opportunities = db.list_opportunities(active_only=True)

    results = await asyncio.gather(
        *(advisor.score_match(opportunity, profile) for opportunity in opportunities),
        return_exceptions=True,
    )

    accepted: list[Match] = []
    failed = 0
    for opportunity, result in zip(opportunities, results):
        if isinstance(result, Exception):
            failed += 1
            logger.error(
                "match_scoring_failed user_id=%s opportunity_id=%s: %s",
                user_id,
                opportunity.id,
                result,
                exc_info=result,
            )
            continue
        if isinstance(result, BaseException):
            raise result
        if not is_accepted(result):
            continue
        accepted.append(_persist(user_id, opportunity, result))

    logger.info(
        json.dumps(
            {
                "event": "matches_generated",
                "user_id": user_id,
                "considered": len(opportunities),
                "accepted": len(accepted),
                "failed": failed,
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )
    return MatchGenerationResponse(
        user_id=user_id,
        considered=len(opportunities),
        accepted=len(accepted),
        matches=accepted,
    )
