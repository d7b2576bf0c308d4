from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, Sequence

from careercompass.schemas.match import MatchResult
from careercompass.schemas.opportunity import Opportunity
from careercompass.schemas.profile import Profile

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class ExternalServiceUnavailable(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_exception"):
        super().__init__(message)
        self.code = code


class CareerAdvisor(Protocol):
    async def extract_profile(self, text: str) -> Profile: ...

    async def score_match(self, opportunity: Opportunity, profile: Profile) -> MatchResult: ...

    async def respond(self, history: Sequence[ChatMessage], profile: Profile) -> str: ...
