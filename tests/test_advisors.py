import asyncio
import os
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

os.environ.setdefault("AI_ENABLED", "0")
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careercompass.ai.config import AIConfig  # noqa: E402
from careercompass.ai.factory import get_advisor  # noqa: E402
from careercompass.ai.fallback import FallbackAdvisor  # noqa: E402
from careercompass.ai.heuristic import HeuristicAdvisor, score_match_heuristic  # noqa: E402
from careercompass.ai.providers.openai_provider import OpenAIProvider  # noqa: E402
from careercompass.ai.remote import RemoteAdvisor  # noqa: E402
from careercompass.ai.types import ChatMessage, ExternalServiceUnavailable  # noqa: E402
from careercompass.schemas.opportunity import Opportunity  # noqa: E402
from careercompass.schemas.profile import Profile  # noqa: E402


class FakeProvider:
    model = "fake-model"

    def __init__(self, payload=None, text="Remote advice.", delay=0.0):
        self.payload = payload if payload is not None else {}
        self.text = text
        self.delay = delay
        self.calls = []

    async def complete_json(self, messages, *, max_tokens=None):
        self.calls.append({"messages": list(messages), "max_tokens": max_tokens})
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.payload

    async def complete(self, messages, *, max_tokens=None, json_mode=False):
        self.calls.append({"messages": list(messages), "max_tokens": max_tokens})
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.text


class BrokenAdvisor:
    async def extract_profile(self, text):
        raise RuntimeError("connection reset")

    async def score_match(self, opportunity, profile):
        raise RuntimeError("connection reset")

    async def respond(self, history, profile):
        raise RuntimeError("connection reset")


def _opportunity() -> Opportunity:
    return Opportunity(
        id=7,
        title="AI Ethics Research Fellowship",
        organization="Example Institute",
        category="fellowship",
        description="Research on responsible machine learning.",
        skills=["Machine Learning", "Research", "Python"],
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def _config(timeout_s: float = 5.0, *, enabled: bool = True) -> AIConfig:
    return AIConfig(enabled=enabled, provider="openai", model="fake-model", timeout_s=timeout_s)


class RemoteAdvisorTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        env = patch.dict(os.environ, {"AI_ENABLED": "1"})
        env.start()
        self.addCleanup(env.stop)

    async def test_profile_fields_default_when_absent(self):
        advisor = RemoteAdvisor(FakeProvider(payload={"skills": ["Python"]}), config=_config())
        profile = await advisor.extract_profile("Python developer")
        self.assertEqual(profile.skills, ["Python"])
        self.assertEqual(profile.experience, "")
        self.assertEqual(profile.education, [])
        self.assertEqual(profile.matching_keywords, [])

    async def test_profile_accepts_camel_case_keys(self):
        advisor = RemoteAdvisor(
            FakeProvider(payload={"careerGoals": ["Research"], "matchingKeywords": ["ml"]}),
            config=_config(),
        )
        profile = await advisor.extract_profile("text")
        self.assertEqual(profile.career_goals, ["Research"])
        self.assertEqual(profile.matching_keywords, ["ml"])

    async def test_malformed_profile_payload_is_a_service_failure(self):
        advisor = RemoteAdvisor(FakeProvider(payload={"skills": 5}), config=_config())
        with self.assertRaises(ExternalServiceUnavailable) as ctx:
            await advisor.extract_profile("text")
        self.assertEqual(ctx.exception.code, "llm_invalid")

    async def test_match_percentage_is_clamped(self):
        advisor = RemoteAdvisor(FakeProvider(payload={"match_percentage": 140}), config=_config())
        result = await advisor.score_match(_opportunity(), Profile(skills=["Python"]))
        self.assertEqual(result.percentage, 100)
        self.assertEqual(result.reasoning, "No reasoning provided")

    async def test_missing_match_percentage_defaults_to_zero(self):
        advisor = RemoteAdvisor(FakeProvider(payload={"reasoning": "Weak fit."}), config=_config())
        result = await advisor.score_match(_opportunity(), Profile())
        self.assertEqual(result.percentage, 0)
        self.assertEqual(result.reasoning, "Weak fit.")

    async def test_respond_caps_generated_tokens(self):
        provider = FakeProvider(text="Focus on research roles.")
        advisor = RemoteAdvisor(provider, config=_config())
        history = [ChatMessage(role="user", content="Where should I focus?")]
        reply = await advisor.respond(history, Profile(skills=["Python"]))
        self.assertEqual(reply, "Focus on research roles.")
        self.assertEqual(provider.calls[0]["max_tokens"], 500)
        system = provider.calls[0]["messages"][0]
        self.assertEqual(system.role, "system")
        self.assertIn("Python", system.content)

    async def test_disabled_ai_raises_before_calling_provider(self):
        provider = FakeProvider()
        advisor = RemoteAdvisor(provider, config=_config(enabled=False))
        with self.assertRaises(ExternalServiceUnavailable) as ctx:
            await advisor.respond([ChatMessage(role="user", content="hi")], Profile())
        self.assertEqual(ctx.exception.code, "llm_disabled")
        self.assertEqual(provider.calls, [])

    async def test_enabled_flag_comes_from_the_injected_config(self):
        provider = FakeProvider(text="Still answering.")
        advisor = RemoteAdvisor(provider, config=_config())
        with patch.dict(os.environ, {"AI_ENABLED": "0"}):
            reply = await advisor.respond([ChatMessage(role="user", content="hi")], Profile())
        self.assertEqual(reply, "Still answering.")

    def test_default_config_read_from_environment(self):
        with patch.dict(os.environ, {"AI_ENABLED": "0", "AI_TIMEOUT_S": "7"}):
            advisor = RemoteAdvisor(FakeProvider())
        self.assertFalse(advisor._config.enabled)
        self.assertEqual(advisor._config.timeout_s, 7.0)

    async def test_missing_api_key_is_a_service_failure(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": ""}):
            provider = OpenAIProvider(model="gpt-4o-mini")
            with self.assertRaises(ExternalServiceUnavailable) as ctx:
                await provider.complete([ChatMessage(role="user", content="hi")])
        self.assertEqual(ctx.exception.code, "llm_missing_key")


class FallbackAdvisorTests(unittest.IsolatedAsyncioTestCase):
    async def test_failing_primary_uses_heuristic_score(self):
        advisor = FallbackAdvisor(BrokenAdvisor(), HeuristicAdvisor())
        profile = Profile(skills=["Python"], experience="Entry Level")
        result = await advisor.score_match(_opportunity(), profile)
        self.assertEqual(result, score_match_heuristic(_opportunity(), profile))

    async def test_failing_primary_uses_heuristic_profile(self):
        advisor = FallbackAdvisor(BrokenAdvisor(), HeuristicAdvisor())
        profile = await advisor.extract_profile("Senior engineer with Python")
        self.assertEqual(profile.experience, "Senior Level (5+ years)")

    async def test_failing_primary_uses_heuristic_reply(self):
        advisor = FallbackAdvisor(BrokenAdvisor(), HeuristicAdvisor())
        reply = await advisor.respond(
            [ChatMessage(role="user", content="What skills should I learn?")],
            Profile(skills=["Python", "SQL"]),
        )
        self.assertIn("Python", reply)

    async def test_timeout_triggers_fallback(self):
        with patch.dict(os.environ, {"AI_ENABLED": "1"}):
            remote = RemoteAdvisor(FakeProvider(payload={"match_percentage": 99}, delay=1.0), config=_config(0.01))
            advisor = FallbackAdvisor(remote, HeuristicAdvisor())
            result = await advisor.score_match(_opportunity(), Profile(skills=["Python"]))
        self.assertNotEqual(result.percentage, 99)
        self.assertEqual(len(result.recommendations), 3)

    async def test_successful_primary_is_returned(self):
        with patch.dict(os.environ, {"AI_ENABLED": "1"}):
            remote = RemoteAdvisor(FakeProvider(payload={"match_percentage": 88, "reasoning": "Strong."}), config=_config())
            advisor = FallbackAdvisor(remote, HeuristicAdvisor())
            result = await advisor.score_match(_opportunity(), Profile())
        self.assertEqual(result.percentage, 88)
        self.assertEqual(result.reasoning, "Strong.")

    async def test_fallback_logs_a_warning(self):
        advisor = FallbackAdvisor(BrokenAdvisor(), HeuristicAdvisor())
        with self.assertLogs("careercompass.ai.fallback", level="WARNING") as logs:
            await advisor.extract_profile("anything at all")
        self.assertIn("advisor_fallback", logs.output[0])


class AdvisorFactoryTests(unittest.TestCase):
    def test_default_advisor_wraps_remote_with_fallback(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "openai"}):
            self.assertIsInstance(get_advisor(), FallbackAdvisor)

    def test_unsupported_provider_rejected(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "unknown"}):
            with self.assertRaises(ValueError):
                get_advisor()


if __name__ == "__main__":
    unittest.main()
