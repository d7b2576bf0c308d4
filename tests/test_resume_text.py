import os
import sys
import unittest
from pathlib import Path

os.environ.setdefault("AI_ENABLED", "0")
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
TESTS_DIR = Path(__file__).resolve().parent
for path in (PROJECT_ROOT, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from document_fixtures import build_docx, build_pdf  # noqa: E402

from careercompass.ai.heuristic import extract_profile_heuristic  # noqa: E402
from careercompass.services.errors import UnreadableResume, UnsupportedResumeType  # noqa: E402
from careercompass.services.profile_service import prepare_resume_text  # noqa: E402
from careercompass.services.resume_text import detect_resume_kind, extract_resume_text  # noqa: E402


class ResumeKindTests(unittest.TestCase):
    def test_extension_wins(self):
        self.assertEqual(detect_resume_kind("cv.PDF", b""), "pdf")
        self.assertEqual(detect_resume_kind("cv.docx", b""), "docx")
        self.assertEqual(detect_resume_kind("cv.md", b"%PDF-1.4"), "text")

    def test_content_type_then_signature_without_extension(self):
        self.assertEqual(detect_resume_kind("resume", b"", "application/pdf"), "pdf")
        self.assertEqual(detect_resume_kind("resume", b"%PDF-1.7 ..."), "pdf")
        self.assertEqual(detect_resume_kind("resume", b"PK\x03\x04..."), "docx")
        self.assertEqual(detect_resume_kind("resume", b"Plain text"), "text")

    def test_unsupported_types_rejected(self):
        with self.assertRaises(UnsupportedResumeType):
            detect_resume_kind("cv.doc", b"")
        with self.assertRaises(UnsupportedResumeType):
            detect_resume_kind("cv.png", b"\x89PNG")


class ExtractResumeTextTests(unittest.TestCase):
    def test_compressed_pdf_text_reaches_the_extractor(self):
        pdf = build_pdf("Senior Software Engineer Python AWS Docker")
        text = prepare_resume_text(extract_resume_text("cv.pdf", pdf), "cv.pdf")

        self.assertIn("Senior Software Engineer", text)
        profile = extract_profile_heuristic(text)
        self.assertEqual(profile.skills, ["Python", "AWS", "Docker"])
        self.assertEqual(profile.experience, "Senior Level (5+ years)")

    def test_pdf_without_text_uses_placeholder(self):
        text = extract_resume_text("scan.pdf", build_pdf())
        self.assertEqual(text, "")
        self.assertEqual(prepare_resume_text(text, "scan.pdf"), "scan.pdf - CV uploaded successfully")

    def test_corrupt_pdf_rejected(self):
        with self.assertRaises(UnreadableResume):
            extract_resume_text("cv.pdf", b"this is not a pdf at all")

    def test_docx_paragraphs_and_tables(self):
        docx = build_docx(
            ["Data science graduate", "Machine learning research with Python"],
            table_rows=[["Skills", "SQL"], ["Languages", "English"]],
        )
        text = extract_resume_text("cv.docx", docx)
        self.assertIn("Machine learning research with Python", text)
        self.assertIn("Skills | SQL", text)
        self.assertIn("SQL", extract_profile_heuristic(text).skills)

    def test_corrupt_docx_rejected(self):
        with self.assertRaises(UnreadableResume):
            extract_resume_text("cv.docx", b"PK\x03\x04 truncated")

    def test_text_decoding(self):
        self.assertEqual(extract_resume_text("cv.txt", "Café Python".encode("utf-8")), "Café Python")
        self.assertEqual(extract_resume_text("cv.txt", "Python dev".encode("utf-16")), "Python dev")
        self.assertEqual(extract_resume_text("cv.txt", b"Python \xff developer"), "Python \xff developer")


if __name__ == "__main__":
    unittest.main()
