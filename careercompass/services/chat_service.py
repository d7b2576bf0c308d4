from __future__ import annotations

import json
import logging
import time

from careercompass.ai.factory import get_advisor
from careercompass.ai.types import CareerAdvisor, ChatMessage
from careercompass.core.config import settings
from careercompass.core.redaction import short_hash
from careercompass.schemas.chat import ChatResponse, ConversationMessage
from careercompass.schemas.profile import Profile
from careercompass.services.errors import ChatSessionNotFound, UserNotFound
from careercompass.storage import db

logger = logging.getLogger("careercompass.chat")


def _last_user_message(messages: list[ConversationMessage]) -> str:
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    return ""


async def advise(
    user_id: int,
    messages: list[ConversationMessage],
    *,
    session_id: int | None = None,
    advisor: CareerAdvisor | None = None,
) -> ChatResponse:
    started_at = time.perf_counter()
    user = db.get_user(user_id)
    if user is None:
        raise UserNotFound(user_id)

    if session_id is not None:
        session = db.get_chat_session(session_id)
        if session is None or session.user_id != user_id:
            raise ChatSessionNotFound(session_id)

    profile = user.profile or Profile()
    history = [ChatMessage(role=m.role, content=m.content) for m in messages]

    advisor = advisor or get_advisor()
    reply = await advisor.respond(history, profile)

    updated = [*messages, ConversationMessage(role="assistant", content=reply)]
    if session_id is not None:
        stored = db.update_chat_session(session_id, updated)
        if stored is None:
            raise ChatSessionNotFound(session_id)
    else:
        stored = db.create_chat_session(user_id, updated)

    last_message = _last_user_message(messages)
    logger.info(
        json.dumps(
            {
                "event": "chat_turn",
                "user_id": user_id,
                "session_id": stored.id,
                "history_len": len(messages),
                "message_len": len(last_message),
                "message_hash": short_hash(last_message[: settings.log_message_max_chars]),
                "has_profile": user.profile is not None,
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )
    return ChatResponse(response=reply, messages=updated, session_id=stored.id)
