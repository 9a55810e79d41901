import sys
import time
import unittest
from pathlib import Path
from unittest.mock import MagicMock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_analyzer.core.config import get_scoring_policy  # noqa: E402
from resume_analyzer.core.errors import ExtractionError, TransportError, ValidationError  # noqa: E402
from resume_analyzer.services.analysis_service import analyze, analyze_document  # noqa: E402
from resume_analyzer.services.augmentation import NARRATIVE_TEMPLATES, ResumeAugmenter  # noqa: E402

RESUME = """Jane Doe
jane.doe@example.com
+1 555 123 4567

Summary
Backend engineer with 6 years of experience building cloud services.

Experience
Senior Engineer, Acme Corp (2019 - 2024)
- Led a team of 5 engineers, increased throughput by 30%
- Built data pipelines in Python deployed on Azure

Education
B.S. Computer Science, State University, 2018

Skills
Python, Azure, Docker
"""


def _augmenter(*, returns=None, raises=None, delay: float = 0.0) -> ResumeAugmenter:
    client = MagicMock()
    client.available = True

    def complete_chat(*args, **kwargs):
        if delay:
            time.sleep(delay)
        if raises is not None:
            raise raises
        return returns

    client.complete_chat.side_effect = complete_chat
    return ResumeAugmenter(client)


class AnalyzeTests(unittest.TestCase):
    def test_complete_resume_end_to_end(self):
        analysis = analyze(RESUME, "jane.txt")
        self.assertEqual(analysis.subscores.completeness, 100.0)
        self.assertGreater(analysis.subscores.keyword, 0.0)
        names = {skill.name for skill in analysis.skills}
        self.assertTrue({"Python", "Azure", "Docker"} <= names)
        titles = [item.title for item in analysis.recommendations]
        self.assertNotIn("Complete All Required Sections", titles)
        self.assertNotIn("Add a Skills Section", titles)
        self.assertEqual(analysis.file_name, "jane.txt")
        self.assertIsNone(analysis.narrative)
        self.assertTrue(analysis.strengths_summary)
        self.assertTrue(analysis.weaknesses_summary)

    def test_empty_text_boundary(self):
        analysis = analyze("")
        subscores = analysis.subscores
        self.assertEqual((subscores.ats, subscores.completeness, subscores.keyword, subscores.formatting), (0, 0, 0, 0))
        self.assertEqual(analysis.overall_score, 0.0)
        self.assertEqual(analysis.skills, ())
        high_sections = [
            item
            for item in analysis.recommendations
            if item.title == "Complete All Required Sections" and item.priority == "High"
        ]
        self.assertEqual(len(high_sections), 1)

    def test_overall_matches_declared_weights(self):
        analysis = analyze(RESUME)
        weights = get_scoring_policy().overall_weights
        s = analysis.subscores
        expected = round(
            weights.ats * s.ats + weights.completeness * s.completeness + weights.keyword * s.keyword
            + weights.formatting * s.formatting,
            2,
        )
        self.assertEqual(analysis.overall_score, expected)

    def test_idempotent_on_identical_text(self):
        first = analyze(RESUME)
        second = analyze(RESUME)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(first.skills, second.skills)
        self.assertEqual(first.signals, second.signals)
        self.assertEqual(first.subscores, second.subscores)
        self.assertEqual(first.recommendations, second.recommendations)

    def test_degenerate_inputs_never_raise(self):
        for text in ("   ", "\n\n\n", "|||\t\t", "x" * 10_000, "🚀" * 50, None):
            analysis = analyze(text)
            for value in analysis.subscores.model_dump().values():
                self.assertGreaterEqual(value, 0.0)
                self.assertLessEqual(value, 100.0)

    def test_analysis_is_immutable(self):
        analysis = analyze(RESUME)
        with self.assertRaises(Exception):
            analysis.overall_score = 1.0

    def test_versions_are_recorded(self):
        analysis = analyze(RESUME, resume_id="resume-1")
        self.assertEqual(analysis.resume_id, "resume-1")
        self.assertEqual(analysis.policy_version, get_scoring_policy().version)
        self.assertTrue(analysis.taxonomy_version)


class AugmentedAnalyzeTests(unittest.TestCase):
    def test_augmentation_requires_deadline(self):
        with self.assertRaises(ValidationError):
            analyze(RESUME, augment=True)

    def test_narrative_from_model(self):
        analysis = analyze(RESUME, augment=True, deadline_s=2.0, augmenter=_augmenter(returns="Tailored advice."))
        self.assertEqual(analysis.narrative, "Tailored advice.")

    def test_failing_model_uses_template(self):
        analysis = analyze(
            RESUME,
            augment=True,
            deadline_s=2.0,
            augmenter=_augmenter(raises=TransportError("down")),
        )
        self.assertIn(analysis.narrative, NARRATIVE_TEMPLATES)

    def test_hung_model_does_not_block_scoring(self):
        baseline = analyze(RESUME)
        started = time.perf_counter()
        analysis = analyze(RESUME, augment=True, deadline_s=0.05, augmenter=_augmenter(returns="late", delay=0.5))
        self.assertLess(time.perf_counter() - started, 0.45)
        self.assertIn(analysis.narrative, NARRATIVE_TEMPLATES)
        self.assertEqual(analysis.subscores, baseline.subscores)


class AnalyzeDocumentTests(unittest.TestCase):
    def test_text_upload(self):
        text, analysis = analyze_document(RESUME.encode("utf-8"), "resume.txt", "Backend Engineer")
        self.assertIn("Jane Doe", text)
        self.assertEqual(analysis.target_role, "Backend Engineer")

    def test_extraction_failure_aborts(self):
        def broken(file_bytes, file_name):
            raise ExtractionError("unreadable")

        with self.assertRaises(ExtractionError):
            analyze_document(b"data", "resume.pdf", extract_text=broken)


if __name__ == "__main__":
    unittest.main()
