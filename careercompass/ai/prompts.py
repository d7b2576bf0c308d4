import json
from typing import Sequence

from careercompass.ai.types import ChatMessage
from careercompass.schemas.opportunity import Opportunity
from careercompass.schemas.profile import Profile

PROFILE_SYSTEM_PROMPT = (
    "You are an expert career analyst. Analyze the provided CV/resume and extract key information "
    "for career matching. "
    "Respond with JSON in this exact format: "
    "{\"skills\": [string], \"experience\": string, \"education\": [string], \"domains\": [string], "
    "\"strengths\": [string], \"career_goals\": [string], \"matching_keywords\": [string]}. "
    "skills lists technical and soft skills; experience is a brief summary of experience level and years; "
    "education lists degrees, certifications and institutions; domains lists professional domains or industries; "
    "career_goals lists inferred goals and interests; matching_keywords lists keywords for opportunity matching. "
    "If something is missing, use an empty list or empty string."
)

MATCH_SYSTEM_PROMPT = (
    "You are an expert career matching system. Analyze how well an opportunity matches a user's profile. "
    "Respond with JSON in this exact format: "
    "{\"match_percentage\": number between 0 and 100, \"reasoning\": string, "
    "\"skills_alignment\": [string], \"missing_skills\": [string], \"recommendations\": [string]}. "
    "reasoning explains the match quality; skills_alignment lists skills that align well; "
    "missing_skills lists skills the user needs to develop; recommendations are specific next steps."
)

CHAT_MAX_TOKENS = 500


def build_profile_messages(text: str, max_chars: int = 20000) -> list[ChatMessage]:
    body = text.strip()
    if len(body) > max_chars:
        body = body[:max_chars] + "..."
    return [
        ChatMessage(role="system", content=PROFILE_SYSTEM_PROMPT),
        ChatMessage(role="user", content=f"Analyze this CV/resume:\n\n{body}"),
    ]


def build_match_messages(opportunity: Opportunity, profile: Profile) -> list[ChatMessage]:
    user = (
        "Match this opportunity with the user profile.\n\n"
        "OPPORTUNITY:\n"
        f"Title: {opportunity.title}\n"
        f"Organization: {opportunity.organization}\n"
        f"Category: {opportunity.category}\n"
        f"Description: {opportunity.description}\n"
        f"Requirements: {opportunity.requirements or ''}\n"
        f"Skills: {json.dumps(opportunity.skills, ensure_ascii=False)}\n\n"
        "USER PROFILE:\n"
        f"Skills: {json.dumps(profile.skills, ensure_ascii=False)}\n"
        f"Experience: {profile.experience}\n"
        f"Education: {json.dumps(profile.education, ensure_ascii=False)}\n"
        f"Domains: {json.dumps(profile.domains, ensure_ascii=False)}\n"
        f"Career Goals: {json.dumps(profile.career_goals, ensure_ascii=False)}"
    )
    return [
        ChatMessage(role="system", content=MATCH_SYSTEM_PROMPT),
        ChatMessage(role="user", content=user),
    ]


def build_advice_messages(history: Sequence[ChatMessage], profile: Profile) -> list[ChatMessage]:
    system = (
        "You are ARIA, an AI career navigator and mentor. You are sophisticated, helpful, and speak "
        "with authority about career development, opportunities, and professional growth.\n\n"
        "User Context:\n"
        f"- Skills: {json.dumps(profile.skills, ensure_ascii=False)}\n"
        f"- Experience: {profile.experience or 'Not specified'}\n"
        f"- Domains: {json.dumps(profile.domains, ensure_ascii=False)}\n"
        f"- Career Goals: {json.dumps(profile.career_goals, ensure_ascii=False)}\n\n"
        "Respond in a professional, insightful manner. Provide specific, actionable advice. "
        "Use space and tech metaphors occasionally, but keep it natural."
    )
    messages = [ChatMessage(role="system", content=system)]
    for msg in history:
        content = (msg.content or "").strip()
        if not content or msg.role == "system":
            continue
        messages.append(ChatMessage(role=msg.role, content=content))
    return messages
