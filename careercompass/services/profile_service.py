from __future__ import annotations

import json
import logging
import re
import time

from careercompass.ai.factory import get_advisor
from careercompass.ai.types import CareerAdvisor
from careercompass.core.redaction import short_hash
from careercompass.schemas.profile import Profile
from careercompass.schemas.user import ProfileSubmissionResponse
from careercompass.services.errors import UserNotFound
from careercompass.services.match_service import generate_matches
from careercompass.storage import db

logger = logging.getLogger(__name__)

MIN_TEXT_CHARS = 10
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def prepare_resume_text(text: str | None, filename: str | None = None) -> str:
    """Strip control characters; substitute a placeholder for near-empty input."""
    cleaned = _CONTROL_CHARS_RE.sub("", text or "")
    if len(cleaned.strip()) < MIN_TEXT_CHARS:
        return f"{filename or 'profile'} - CV uploaded successfully"
    return cleaned


async def extract_profile(
    text: str | None,
    *,
    filename: str | None = None,
    advisor: CareerAdvisor | None = None,
) -> Profile:
    advisor = advisor or get_advisor()
    return await advisor.extract_profile(prepare_resume_text(text, filename))


async def submit_profile(
    user_id: int,
    text: str | None,
    *,
    filename: str | None = None,
    advisor: CareerAdvisor | None = None,
) -> ProfileSubmissionResponse:
    started_at = time.perf_counter()
    if db.get_user(user_id) is None:
        raise UserNotFound(user_id)

    advisor = advisor or get_advisor()
    cleaned = prepare_resume_text(text, filename)
    profile = await advisor.extract_profile(cleaned)
    db.save_user_profile(user_id, profile, resume_text=cleaned, resume_filename=filename)

    generation = await generate_matches(user_id, advisor=advisor)

    logger.info(
        json.dumps(
            {
                "event": "profile_submitted",
                "user_id": user_id,
                "text_len": len(cleaned),
                "text_hash": short_hash(cleaned),
                "filename_hash": short_hash(filename),
                "skills": len(profile.skills),
                "matches": generation.accepted,
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )
    return ProfileSubmissionResponse(user_id=user_id, profile=profile, matches=generation.matches)
