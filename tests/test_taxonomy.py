import json
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_analyzer.taxonomy import get_default_taxonomy_provider  # noqa: E402
from resume_analyzer.taxonomy.local_taxonomy import LocalTaxonomy  # noqa: E402


class TaxonomyTests(unittest.TestCase):
    def test_alias_normalization_resolves_canonical_name(self):
        taxonomy = LocalTaxonomy()
        normalized, canonical = taxonomy.normalize_skill("  JS ")
        self.assertEqual(normalized, "js")
        self.assertEqual(canonical, "JavaScript")

    def test_unknown_skill_has_no_canonical_name(self):
        _, canonical = LocalTaxonomy().normalize_skill("Underwater Basket Weaving")
        self.assertIsNone(canonical)

    def test_entries_are_unique_and_categorized(self):
        entries = LocalTaxonomy().entries()
        names = [entry.name.lower() for entry in entries]
        self.assertEqual(len(names), len(set(names)))
        self.assertTrue(all(entry.category for entry in entries))

    def test_patterns_respect_word_boundaries(self):
        taxonomy = LocalTaxonomy()
        by_name = {entry.name: entry for entry in taxonomy.entries()}
        self.assertEqual(len(by_name["Java"].pattern.findall("JavaScript and Java")), 1)
        self.assertEqual(len(by_name["SQL"].pattern.findall("MySQL, PostgreSQL")), 0)
        self.assertEqual(len(by_name["C#"].pattern.findall("C#, C++ and c#.")), 2)
        self.assertEqual(len(by_name[".NET"].pattern.findall("VB.NET and ASP.NET")), 2)

    def test_duplicate_skill_is_rejected(self):
        payload = {
            "version": "test",
            "skills": [
                {"name": "Python", "category": "Programming"},
                {"name": "python", "category": "Programming"},
            ],
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "skills.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            with self.assertRaises(RuntimeError):
                LocalTaxonomy(path)

    def test_default_provider_is_shared(self):
        self.assertIs(get_default_taxonomy_provider(), get_default_taxonomy_provider())


if __name__ == "__main__":
    unittest.main()
