from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ConversationRole = Literal["user", "assistant"]


class ConversationMessage(BaseModel):
    role: ConversationRole
    content: str = Field(max_length=8000)


class ChatRequest(BaseModel):
    messages: list[ConversationMessage] = Field(min_length=1, max_length=100)
    session_id: int | None = None


class ChatResponse(BaseModel):
    response: str
    messages: list[ConversationMessage]
    session_id: int


class ChatSession(BaseModel):
    id: int
    user_id: int
    messages: list[ConversationMessage] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
