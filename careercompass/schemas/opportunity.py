from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

OpportunityCategory = Literal["internship", "fellowship", "study-abroad", "grant"]


class OpportunityBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    organization: str = Field(min_length=1, max_length=255)
    category: OpportunityCategory
    description: str = Field(min_length=1)
    location: str | None = None
    country: str | None = None
    deadline: datetime | None = None
    compensation: str | None = None
    requirements: str | None = None
    skills: list[str] = Field(default_factory=list)
    matching_criteria: list[str] = Field(default_factory=list)
    application_url: str | None = None
    active: bool = True


class OpportunityCreate(OpportunityBase):
    pass


class Opportunity(OpportunityBase):
    id: int
    created_at: datetime
