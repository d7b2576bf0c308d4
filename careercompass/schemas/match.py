from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .opportunity import Opportunity

MatchStatus = Literal["suggested", "saved", "applied", "rejected"]


class MatchResult(BaseModel):
    """Outcome of scoring one opportunity against one profile."""

    percentage: int = Field(ge=0, le=100)
    reasoning: str
    skills_alignment: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class Match(BaseModel):
    id: int
    user_id: int
    opportunity_id: int
    percentage: float = Field(ge=0.0, le=100.0)
    reasoning: str
    status: MatchStatus = "suggested"
    created_at: datetime


class MatchWithOpportunity(Match):
    opportunity: Opportunity


class MatchStatusUpdate(BaseModel):
    status: MatchStatus


class MatchGenerationResponse(BaseModel):
    user_id: int
    considered: int
    accepted: int
    matches: list[Match] = Field(default_factory=list)
