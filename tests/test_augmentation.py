import json
import sys
import time
import unittest
from pathlib import Path
from unittest.mock import MagicMock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_analyzer.ai.providers.unavailable_provider import UnavailableProvider  # noqa: E402
from resume_analyzer.core.errors import RateLimitError, TransportError, ValidationError  # noqa: E402
from resume_analyzer.services.augmentation import (  # noqa: E402
    CHAT_UNAVAILABLE_MESSAGE,
    NARRATIVE_MODERATE,
    NARRATIVE_STRONG,
    NARRATIVE_TEMPLATES,
    NARRATIVE_WEAK,
    ResumeAugmenter,
    run_with_deadline,
    truncate,
)


def _client(*, returns=None, raises=None) -> MagicMock:
    client = MagicMock()
    client.available = True
    if raises is not None:
        client.complete_chat.side_effect = raises
    else:
        client.complete_chat.return_value = returns
    return client


class FallbackTests(unittest.TestCase):
    def setUp(self):
        self.augmenter = ResumeAugmenter(_client(raises=TransportError("connection reset")))

    def test_summarize_falls_back_to_band_template(self):
        self.assertEqual(self.augmenter.summarize("resume", 91.0), NARRATIVE_STRONG)
        self.assertEqual(self.augmenter.summarize("resume", 80.0), NARRATIVE_STRONG)
        self.assertEqual(self.augmenter.summarize("resume", 79.99), NARRATIVE_MODERATE)
        self.assertEqual(self.augmenter.summarize("resume", 60.0), NARRATIVE_MODERATE)
        self.assertEqual(self.augmenter.summarize("resume", 12.0), NARRATIVE_WEAK)
        self.assertEqual(len(set(NARRATIVE_TEMPLATES)), 3)

    def test_rewrite_returns_input_unchanged(self):
        original = "Responsible for the API."
        self.assertEqual(self.augmenter.rewrite(original, "experience"), original)

    def test_chat_returns_unavailable_message(self):
        self.assertEqual(self.augmenter.chat("How do I improve?", "context"), CHAT_UNAVAILABLE_MESSAGE)

    def test_match_job_returns_zero_result(self):
        result = self.augmenter.match_job("resume", "We need Python.")
        self.assertEqual(result.as_tuple(), (0, [], []))
        self.assertFalse(result.computed)

    def test_rate_limit_is_also_absorbed(self):
        augmenter = ResumeAugmenter(_client(raises=RateLimitError("slow down")))
        self.assertEqual(augmenter.rewrite("text"), "text")

    def test_unexpected_exceptions_are_absorbed(self):
        augmenter = ResumeAugmenter(_client(raises=ValueError("boom")))
        self.assertEqual(augmenter.chat("Question?"), CHAT_UNAVAILABLE_MESSAGE)

    def test_unavailable_provider_uses_fallbacks(self):
        augmenter = ResumeAugmenter(UnavailableProvider())
        self.assertFalse(augmenter.available)
        self.assertIn(augmenter.summarize("text", 50.0), NARRATIVE_TEMPLATES)
        self.assertEqual(augmenter.match_job("text", "Need Go").as_tuple(), (0, [], []))

    def test_blank_completion_counts_as_failure(self):
        augmenter = ResumeAugmenter(_client(returns="   "))
        self.assertEqual(augmenter.summarize("text", 65.0), NARRATIVE_MODERATE)


class ConfiguredClientTests(unittest.TestCase):
    def test_summarize_returns_model_text(self):
        client = _client(returns="1. **Lead with impact**: ...")
        narrative = ResumeAugmenter(client).summarize("resume text", 72.0, "Data Engineer", "Fintech")
        self.assertTrue(narrative)
        user_prompt = client.complete_chat.call_args.args[1]
        self.assertIn("Target Role: Data Engineer", user_prompt)
        self.assertIn("Industry: Fintech", user_prompt)

    def test_match_job_parses_structured_response(self):
        payload = {"matchScore": 85, "matchingKeywords": ["Python", "Azure"], "missingKeywords": ["Kubernetes"]}
        client = _client(returns=json.dumps(payload))
        result = ResumeAugmenter(client).match_job("resume", "Python, Azure, Kubernetes")
        self.assertTrue(result.computed)
        self.assertEqual(result.match_score, 85.0)
        self.assertEqual(list(result.matching_keywords), ["Python", "Azure"])
        self.assertEqual(list(result.missing_keywords), ["Kubernetes"])
        self.assertEqual(client.complete_chat.call_args.kwargs["response_format"], "json")

    def test_match_job_malformed_json_falls_back(self):
        for raw in ("not json", "[1, 2]", '{"matchingKeywords": []}'):
            result = ResumeAugmenter(_client(returns=raw)).match_job("resume", "Python")
            self.assertEqual(result.as_tuple(), (0, [], []))
            self.assertFalse(result.computed)

    def test_match_score_is_clamped(self):
        raw = json.dumps({"matchScore": 140, "matchingKeywords": [], "missingKeywords": []})
        result = ResumeAugmenter(_client(returns=raw)).match_job("resume", "Python")
        self.assertEqual(result.match_score, 100.0)

    def test_inputs_are_truncated_before_dispatch(self):
        client = _client(returns="{}")
        augmenter = ResumeAugmenter(client, max_resume_chars=50, max_job_chars=40)
        augmenter.match_job("R" * 500, "J" * 500)
        user_prompt = client.complete_chat.call_args.args[1]
        self.assertIn("R" * 50, user_prompt)
        self.assertNotIn("R" * 51, user_prompt)
        self.assertIn("J" * 40, user_prompt)
        self.assertNotIn("J" * 41, user_prompt)

    def test_chat_context_is_truncated(self):
        client = _client(returns="Answer")
        ResumeAugmenter(client, max_context_chars=10).chat("Q?", "abcdefghijKLMNOP")
        user_prompt = client.complete_chat.call_args.args[1]
        self.assertIn("abcdefghij", user_prompt)
        self.assertNotIn("K", user_prompt.split("Resume Context:")[1])

    def test_blank_rewrite_skips_model(self):
        client = _client(returns="ignored")
        self.assertEqual(ResumeAugmenter(client).rewrite("   "), "   ")
        client.complete_chat.assert_not_called()


class ValidationTests(unittest.TestCase):
    def test_empty_job_description_is_rejected_before_dispatch(self):
        client = _client(returns="{}")
        with self.assertRaises(ValidationError):
            ResumeAugmenter(client).match_job("resume", "  ")
        client.complete_chat.assert_not_called()

    def test_empty_question_is_rejected(self):
        with self.assertRaises(ValidationError):
            ResumeAugmenter(_client(returns="x")).chat("")


class DeadlineTests(unittest.TestCase):
    def test_truncate_is_head_only(self):
        self.assertEqual(truncate("abcdef", 3), "abc")
        self.assertEqual(truncate("", 3), "")
        self.assertEqual(truncate("abc", 0), "")

    def test_slow_call_returns_fallback(self):
        def slow():
            time.sleep(0.5)
            return "late"

        started = time.perf_counter()
        self.assertEqual(run_with_deadline(slow, 0.05, lambda: "fallback"), "fallback")
        self.assertLess(time.perf_counter() - started, 0.4)

    def test_fast_call_returns_result(self):
        self.assertEqual(run_with_deadline(lambda: "done", 1.0, lambda: "fallback"), "done")


if __name__ == "__main__":
    unittest.main()
