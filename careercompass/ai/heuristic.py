"""
Deterministic career heuristics.

These run whenever the language model is unavailable, so their output is a
normal, steady-state answer rather than an error signal. The scoring constants
below are a fixed contract: identical inputs always produce identical scores.
"""

from __future__ import annotations

import math
import re
from typing import Sequence

from careercompass.ai.types import ChatMessage
from careercompass.schemas.match import MatchResult
from careercompass.schemas.opportunity import Opportunity
from careercompass.schemas.profile import Profile

MAX_SKILLS = 10
MAX_MATCHING_KEYWORDS = 8

BASE_SCORE = 50.0
SKILL_WEIGHT = 30.0
DOMAIN_BONUS = 20.0
SENIOR_INTERNSHIP_PENALTY = 15.0
ENTRY_FELLOWSHIP_BONUS = 10.0
MIN_SCORE = 20.0
MAX_SCORE = 95.0

_B = r"(?<![a-z0-9])"
_E = r"(?![a-z0-9+#])"

# (pattern, display name); each group is scanned in order, matches within a group in text order.
_SKILL_GROUPS: tuple[tuple[tuple[str, str], ...], ...] = (
    (
        (r"javascript", "JavaScript"),
        (r"typescript", "TypeScript"),
        (r"react", "React"),
        (r"node\.?js", "Node.js"),
        (r"python", "Python"),
        (r"java", "Java"),
        (r"c\+\+", "C++"),
        (r"html", "HTML"),
        (r"css", "CSS"),
    ),
    (
        (r"postgresql", "PostgreSQL"),
        (r"mongodb", "MongoDB"),
        (r"mysql", "MySQL"),
        (r"sql", "SQL"),
        (r"databases?", "Database"),
    ),
    (
        (r"kubernetes", "Kubernetes"),
        (r"docker", "Docker"),
        (r"azure", "Azure"),
        (r"aws", "AWS"),
        (r"git", "Git"),
    ),
    (
        (r"machine learning", "Machine Learning"),
        (r"data science", "Data Science"),
        (r"analytics", "Analytics"),
        (r"ai", "AI"),
    ),
    (
        (r"project management", "Project Management"),
        (r"leadership", "Leadership"),
        (r"communication", "Communication"),
    ),
)

_SKILL_PATTERNS: tuple[tuple[re.Pattern[str], tuple[tuple[re.Pattern[str], str], ...]], ...] = tuple(
    (
        re.compile(_B + "(?:" + "|".join(pattern for pattern, _ in group) + ")" + _E),
        tuple((re.compile(pattern), display) for pattern, display in group),
    )
    for group in _SKILL_GROUPS
)

_SENIOR_RE = re.compile(r"\b(?:senior|lead|manager)\b")
_YEARS_RE = re.compile(r"(\d+)\s*\+?\s*years")

_EDUCATION_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bbachelor|\bb\.?sc?\b|\bb\.?a\b"), "Bachelor's Degree"),
    (re.compile(r"\bmaster|\bm\.?sc?\b|\bmba\b|\bm\.a\b"), "Master's Degree"),
    (re.compile(r"\bph\.?d\b|\bdoctorate\b|\bdoctoral\b"), "PhD/Doctorate"),
)

_DOMAIN_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bsoftware\b|\bdevelopers?\b|\bprogramming\b"), "Software Development"),
    (re.compile(r"\bdata\b|\banalytics\b|\bscience\b"), "Data Science"),
    (re.compile(r"\bdesign(?:er|ers|ing)?\b|\bui\b|\bux\b"), "Design"),
    (re.compile(r"\bmarketing\b|\bbusiness\b"), "Business"),
)

_GREETING_RE = re.compile(r"\b(?:hello|hi|hey)\b")

DEFAULT_STRENGTHS = ("Problem Solving", "Team Collaboration", "Technical Skills")
DEFAULT_CAREER_GOALS = ("Career Growth", "Skill Development", "New Opportunities")
DEFAULT_RECOMMENDATIONS = (
    "Review the opportunity requirements carefully",
    "Highlight relevant experience in your application",
    "Consider developing missing skills before applying",
)


def _extract_skills(text: str) -> list[str]:
    found: list[str] = []
    for combined, entries in _SKILL_PATTERNS:
        for match in combined.finditer(text):
            token = match.group(0)
            for pattern, display in entries:
                if pattern.fullmatch(token):
                    if display not in found:
                        found.append(display)
                    break
    return found


def _infer_experience(text: str) -> str:
    if _SENIOR_RE.search(text):
        return "Senior Level (5+ years)"
    years = _YEARS_RE.search(text)
    if years and int(years.group(1)) > 2:
        return f"Mid Level ({years.group(1)} years)"
    return "Entry Level"


def extract_profile_heuristic(text: str) -> Profile:
    lowered = (text or "").lower()
    skills = _extract_skills(lowered)[:MAX_SKILLS]
    return Profile(
        skills=skills,
        experience=_infer_experience(lowered),
        education=[label for pattern, label in _EDUCATION_RULES if pattern.search(lowered)],
        domains=[label for pattern, label in _DOMAIN_RULES if pattern.search(lowered)],
        strengths=list(DEFAULT_STRENGTHS),
        career_goals=list(DEFAULT_CAREER_GOALS),
        matching_keywords=skills[:MAX_MATCHING_KEYWORDS],
    )


def _overlaps(left: str, right: str) -> bool:
    return left in right or right in left


def score_match_heuristic(opportunity: Opportunity, profile: Profile) -> MatchResult:
    user_skills = [skill for skill in profile.skills if skill.strip()]
    opp_skills = [skill for skill in opportunity.skills if skill.strip()]
    opp_lower = [skill.lower() for skill in opp_skills]
    user_lower = [skill.lower() for skill in user_skills]

    aligned = [
        skill
        for skill, lowered in zip(user_skills, user_lower)
        if any(_overlaps(lowered, other) for other in opp_lower)
    ]

    title = opportunity.title.lower()
    description = opportunity.description.lower()
    domain_match = any(
        domain.lower() in title or domain.lower() in description
        for domain in profile.domains
        if domain.strip()
    )

    score = BASE_SCORE
    score += (len(aligned) / max(len(user_skills), 1)) * SKILL_WEIGHT
    if domain_match:
        score += DOMAIN_BONUS

    experience = profile.experience or ""
    if "Senior" in experience and opportunity.category == "internship":
        score -= SENIOR_INTERNSHIP_PENALTY
    elif "Entry" in experience and opportunity.category == "fellowship":
        score += ENTRY_FELLOWSHIP_BONUS

    score = max(MIN_SCORE, min(MAX_SCORE, score))
    # Half-up rounding; round() would round 52.5 down to 52.
    percentage = int(math.floor(score + 0.5))

    missing = [
        skill
        for skill, lowered in zip(opp_skills, opp_lower)
        if not any(_overlaps(other, lowered) for other in user_lower)
    ]

    return MatchResult(
        percentage=percentage,
        reasoning=(
            f"Based on your {len(aligned)} matching skills and "
            f"{'relevant' if domain_match else 'general'} domain experience, "
            "this opportunity offers good potential for career growth."
        ),
        skills_alignment=aligned[:5],
        missing_skills=missing[:3],
        recommendations=list(DEFAULT_RECOMMENDATIONS),
    )


def _join_skills(skills: Sequence[str], count: int, sep: str) -> str:
    picked = [skill for skill in skills if skill.strip()][:count]
    return sep.join(picked) if picked else "your current areas"


def respond_heuristic(history: Sequence[ChatMessage], profile: Profile) -> str:
    last_user = next((msg.content for msg in reversed(history) if msg.role == "user"), "")
    lowered = (last_user or "").lower()
    skills = profile.skills
    experience = profile.experience or "Not specified"

    if "skill" in lowered and "?" in lowered:
        return (
            f"Based on your current skills ({_join_skills(skills, 3, ', ')}), I recommend focusing on "
            "complementary technologies that align with industry trends. Consider developing expertise in "
            "cloud platforms, data analysis tools, or emerging frameworks in your domain. "
            "What specific area interests you most?"
        )

    if "career" in lowered or "job" in lowered:
        return (
            f"With your experience level ({experience}) and skill set, you're well-positioned for growth "
            "opportunities. Focus on building a strong portfolio, networking within your industry, and "
            "staying current with technology trends. Consider exploring roles that combine your technical "
            "skills with business impact."
        )

    if "opportunity" in lowered or "internship" in lowered:
        return (
            "Great question! The opportunities in our catalog are curated from leading global organizations. "
            "Focus on positions that match at least 70% of your skills and align with your career goals. "
            "Quality applications to fewer, well-matched opportunities often yield better results than "
            "mass applications."
        )

    if _GREETING_RE.search(lowered):
        return (
            "Hello! I'm ARIA, your AI Career Navigator. I'm here to help you explore career opportunities, "
            "develop your skills, and achieve your professional goals. Based on your profile, I can see you "
            f"have strong potential in {_join_skills(skills, 2, ' and ')}. How can I assist you today?"
        )

    return (
        "Thank you for your question. As your AI Career Navigator, I'm here to provide personalized guidance "
        f"based on your profile and goals. Your current skill set in {_join_skills(skills, 2, ' and ')} "
        "positions you well for various opportunities. Could you be more specific about what aspect of "
        "your career development you'd like to discuss?"
    )


class HeuristicAdvisor:
    name = "heuristic"

    async def extract_profile(self, text: str) -> Profile:
        return extract_profile_heuristic(text)

    async def score_match(self, opportunity: Opportunity, profile: Profile) -> MatchResult:
        return score_match_heuristic(opportunity, profile)

    async def respond(self, history: Sequence[ChatMessage], profile: Profile) -> str:
        return respond_heuristic(history, profile)
