from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .match import Match
from .profile import Profile


class UserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    full_name: str = Field(min_length=1, max_length=255)
    domain: str | None = Field(default=None, max_length=100)
    experience_level: str | None = Field(default=None, max_length=50)


class QuickScanRequest(BaseModel):
    domain: str = Field(min_length=1, max_length=100)
    experience_level: str = Field(min_length=1, max_length=50)


class ProfileTextRequest(BaseModel):
    text: str = Field(default="", max_length=50000)


class User(BaseModel):
    id: int
    email: str
    full_name: str
    domain: str | None = None
    experience_level: str | None = None
    resume_filename: str | None = None
    profile: Profile | None = None
    analyzed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ProfileSubmissionResponse(BaseModel):
    user_id: int
    profile: Profile
    matches: list[Match] = Field(default_factory=list)
