import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_analyzer.features.sections import analyze_sections, match_heading  # noqa: E402

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


class SectionAnalyzerTests(unittest.TestCase):
    def test_detects_all_standard_sections(self):
        signals = analyze_sections(RESUME)
        self.assertTrue(signals.has_contact_info)
        self.assertTrue(signals.has_email)
        self.assertTrue(signals.has_phone)
        self.assertTrue(signals.has_summary)
        self.assertTrue(signals.has_experience)
        self.assertTrue(signals.has_education)
        self.assertTrue(signals.has_skills_section)
        self.assertEqual(signals.section_count, 4)
        self.assertEqual(signals.missing_sections(), [])

    def test_structural_ratios(self):
        signals = analyze_sections(RESUME)
        self.assertAlmostEqual(signals.action_verb_ratio, 2 / 3)
        self.assertAlmostEqual(signals.bullet_density, 2 / 9)
        self.assertTrue(signals.has_dates)
        self.assertTrue(signals.has_metrics)

    def test_inline_heading_content(self):
        section, rest = match_heading("Technical Skills: Python, Docker")
        self.assertEqual(section, "skills")
        self.assertEqual(rest, "Python, Docker")
        self.assertEqual(match_heading("Experience with Python")[0], None)
        self.assertEqual(match_heading("WORK HISTORY")[0], "experience")

    def test_joined_heading_phrases(self):
        self.assertEqual(match_heading("Skills & Tools")[0], "skills")
        self.assertEqual(match_heading("Skills and Abilities")[0], "skills")
        section, rest = match_heading("Education & Certifications: B.S. 2018")
        self.assertEqual(section, "education")
        self.assertEqual(rest, "B.S. 2018")
        self.assertEqual(match_heading("Skills and more skills to come")[0], None)
        signals = analyze_sections("Skills & Tools\nPython, Docker")
        self.assertTrue(signals.has_skills_section)

    def test_date_ranges_are_not_phone_numbers(self):
        signals = analyze_sections("Engineer (2019 - 2024)\nAnalyst 2015-2019")
        self.assertFalse(signals.has_phone)
        self.assertFalse(signals.has_contact_info)

    def test_listed_years_are_not_phone_numbers(self):
        signals = analyze_sections("Graduated 2015 2016 2017")
        self.assertFalse(signals.has_phone)
        self.assertFalse(signals.has_contact_info)
        self.assertTrue(analyze_sections("Call 2015 555 0199").has_phone)

    def test_empty_text_yields_false_and_zero(self):
        signals = analyze_sections("")
        self.assertTrue(signals.is_empty)
        self.assertFalse(signals.has_contact_info)
        self.assertEqual(signals.bullet_density, 0.0)
        self.assertEqual(signals.action_verb_ratio, 0.0)
        self.assertEqual(len(signals.missing_sections()), 5)

    def test_ats_hostile_structures_are_counted(self):
        signals = analyze_sections("Skill | Years | Level\nPython\t5\tExpert\n★ \U0001F680 Rocket")
        self.assertGreater(signals.special_char_count, 0)
        self.assertEqual(signals.table_line_count, 2)


if __name__ == "__main__":
    unittest.main()
