import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

os.environ.setdefault("AI_ENABLED", "0")
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careercompass.ai.heuristic import HeuristicAdvisor  # noqa: E402
from careercompass.core.redaction import short_hash  # noqa: E402
from careercompass.schemas.user import UserCreate  # noqa: E402
from careercompass.services.catalog import seed_opportunities  # noqa: E402
from careercompass.services.errors import UserNotFound  # noqa: E402
from careercompass.services.profile_service import (  # noqa: E402
    extract_profile,
    prepare_resume_text,
    submit_profile,
)
from careercompass.storage import db  # noqa: E402


class RecordingAdvisor(HeuristicAdvisor):
    def __init__(self):
        self.texts = []

    async def extract_profile(self, text):
        self.texts.append(text)
        return await super().extract_profile(text)


class PrepareResumeTextTests(unittest.TestCase):
    def test_short_input_replaced_with_placeholder(self):
        self.assertEqual(prepare_resume_text("hello", "cv.pdf"), "cv.pdf - CV uploaded successfully")

    def test_empty_input_without_filename(self):
        self.assertEqual(prepare_resume_text("", None), "profile - CV uploaded successfully")
        self.assertEqual(prepare_resume_text(None), "profile - CV uploaded successfully")

    def test_control_characters_removed(self):
        cleaned = prepare_resume_text("Python\x00 developer\x07 with\tSQL\nskills")
        self.assertEqual(cleaned, "Python developer with\tSQL\nskills")

    def test_logged_hashes_ignore_surrounding_whitespace(self):
        self.assertEqual(short_hash("  cv.pdf "), short_hash("cv.pdf"))
        self.assertEqual(len(short_hash("cv.pdf")), 12)
        self.assertEqual(short_hash("   "), "")
        self.assertEqual(short_hash(None), "")


class ExtractProfileTests(unittest.IsolatedAsyncioTestCase):
    async def test_five_character_input_does_not_throw(self):
        advisor = RecordingAdvisor()
        profile = await extract_profile("abcde", filename="notes.txt", advisor=advisor)
        self.assertEqual(advisor.texts, ["notes.txt - CV uploaded successfully"])
        self.assertEqual(profile.experience, "Entry Level")

    async def test_default_advisor_falls_back_when_ai_disabled(self):
        with patch.dict(os.environ, {"AI_ENABLED": "0"}):
            profile = await extract_profile("Senior backend engineer, Python and Docker")
        self.assertEqual(profile.experience, "Senior Level (5+ years)")
        self.assertIn("Docker", profile.skills)


class SubmitProfileTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patcher = patch.object(db, "_get_db_path", return_value=Path(tmp.name) / "careercompass.db")
        patcher.start()
        self.addCleanup(patcher.stop)
        db.init_db()
        seed_opportunities()
        self.user = db.create_user(UserCreate(email="grace@example.com", full_name="Grace Hopper"))

    async def test_profile_saved_and_matches_generated(self):
        response = await submit_profile(
            self.user.id,
            "Entry level researcher in data science using Python and machine learning",
            filename="grace.txt",
            advisor=HeuristicAdvisor(),
        )
        stored = db.get_user(self.user.id)
        self.assertIsNotNone(stored.profile)
        self.assertEqual(stored.profile, response.profile)
        self.assertEqual(stored.resume_filename, "grace.txt")
        self.assertIsNotNone(stored.analyzed_at)
        self.assertEqual(len(response.matches), len(db.list_user_matches(self.user.id)))

    async def test_resubmission_overwrites_profile(self):
        await submit_profile(self.user.id, "Python developer with 4 years", advisor=HeuristicAdvisor())
        await submit_profile(self.user.id, "Senior manager for business design", advisor=HeuristicAdvisor())
        stored = db.get_user(self.user.id)
        self.assertEqual(stored.profile.experience, "Senior Level (5+ years)")
        self.assertIn("Business", stored.profile.domains)

    async def test_unknown_user(self):
        with self.assertRaises(UserNotFound):
            await submit_profile(424242, "Python developer", advisor=HeuristicAdvisor())


if __name__ == "__main__":
    unittest.main()
