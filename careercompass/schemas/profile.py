from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        item = value.strip()
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


class Profile(BaseModel):
    """Structured summary of a user's résumé or free-text profile."""

    skills: list[str] = Field(default_factory=list)
    experience: str = ""
    education: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    career_goals: list[str] = Field(default_factory=list)
    matching_keywords: list[str] = Field(default_factory=list)

    @field_validator("skills", "domains", "matching_keywords")
    @classmethod
    def _unique(cls, value: list[str]) -> list[str]:
        return _dedupe(value)

    @field_validator("experience", mode="before")
    @classmethod
    def _none_is_empty(cls, value: object) -> object:
        return "" if value is None else value
