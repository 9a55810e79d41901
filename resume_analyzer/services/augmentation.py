from __future__ import annotations

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from functools import lru_cache
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaValidationError

from resume_analyzer.ai.factory import get_ai_client
from resume_analyzer.ai.types import ChatCompletionClient
from resume_analyzer.core.config import ScoringPolicy, get_scoring_policy, settings
from resume_analyzer.core.errors import AugmentationError, ValidationError
from resume_analyzer.schemas import JobMatchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

NARRATIVE_STRONG = (
    "1. **Polish Your Top Skills**: Your resume is strong! Focus on highlighting your most in-demand skills prominently.\n"
    "2. **Add Quantifiable Achievements**: Include specific metrics and numbers to demonstrate your impact.\n"
    "3. **Optimize for ATS**: Ensure all keywords from your target job descriptions are present."
)
NARRATIVE_MODERATE = (
    "1. **Strengthen Your Experience Section**: Add more detail about your accomplishments and responsibilities.\n"
    "2. **Improve Keyword Density**: Research common terms in your industry and incorporate them naturally.\n"
    "3. **Format for ATS Compatibility**: Remove complex tables or graphics that might confuse automated systems."
)
NARRATIVE_WEAK = (
    "1. **Complete All Required Sections**: Ensure you have contact info, summary, experience, education, and skills.\n"
    "2. **Use Action Verbs**: Start bullet points with strong verbs like 'Developed', 'Led', 'Implemented'.\n"
    "3. **Add More Detail**: Expand on your experience with specific examples and achievements."
)
NARRATIVE_TEMPLATES = (NARRATIVE_STRONG, NARRATIVE_MODERATE, NARRATIVE_WEAK)

CHAT_UNAVAILABLE_MESSAGE = (
    "The resume expert chat is currently unavailable. Please try again later."
)

_SUMMARY_SYSTEM_PROMPT = (
    "You are an experienced career coach and resume consultant. "
    "You help candidates optimize resumes for applicant tracking systems and recruiters. "
    "Give specific, actionable advice in a friendly, professional tone, "
    "focused on concrete improvements that raise interview chances."
)
_REWRITE_SYSTEM_PROMPT = (
    "You are an expert resume writer. Rewrite resume content to be more impactful "
    "using strong action verbs, quantified achievements and professional language. "
    "Keep every fact unchanged; never invent employers, numbers or skills."
)
_CHAT_SYSTEM_PROMPT = (
    "You are a resume expert assistant. Answer questions about resume writing, job applications "
    "and career development. Be specific and actionable. "
    "When resume context is provided, tailor the advice to that resume."
)
_MATCH_SYSTEM_PROMPT = (
    "You are an ATS analyzer. Compare a resume against a job description and identify "
    "matching and missing keywords. Be precise and technical. Respond with JSON only."
)

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="augment")


def truncate(text: str, limit: int) -> str:
    """Deterministic head truncation to keep prompts inside the token budget."""
    text = text or ""
    if limit <= 0:
        return ""
    return text[:limit]


def fallback_narrative(overall_score: float, policy: ScoringPolicy | None = None) -> str:
    bands = (policy or get_scoring_policy()).summaries.narrative_bands
    if overall_score >= bands.strong:
        return NARRATIVE_STRONG
    if overall_score >= bands.moderate:
        return NARRATIVE_MODERATE
    return NARRATIVE_WEAK


def match_verdict(match_score: float) -> str:
    if match_score >= 80:
        return "Excellent match! Apply with confidence."
    if match_score >= 60:
        return "Good match. Consider adding missing keywords."
    return "Significant gaps. Update resume to match requirements."


def run_with_deadline(func: Callable[[], T], deadline_s: float, fallback: Callable[[], T]) -> T:
    """Run ``func`` on the augmentation pool; return ``fallback()`` if it misses the deadline."""
    future = _executor.submit(func)
    try:
        return future.result(timeout=deadline_s)
    except FutureTimeoutError:
        future.cancel()
        logger.warning("augmentation_deadline_exceeded deadline_s=%s", deadline_s)
        return fallback()


class _JobMatchPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    match_score: float = Field(alias="matchScore")
    matching_keywords: list[str] = Field(default_factory=list, alias="matchingKeywords")
    missing_keywords: list[str] = Field(default_factory=list, alias="missingKeywords")


class ResumeAugmenter:
    """Optional language-model enrichment. Every operation degrades to a deterministic fallback."""

    def __init__(
        self,
        client: ChatCompletionClient | None = None,
        *,
        max_resume_chars: int | None = None,
        max_context_chars: int | None = None,
        max_job_chars: int | None = None,
        policy: ScoringPolicy | None = None,
    ):
        self._client = client if client is not None else get_ai_client()
        self._max_resume_chars = max_resume_chars or settings.augmentation_max_resume_chars
        self._max_context_chars = max_context_chars or settings.augmentation_max_context_chars
        self._max_job_chars = max_job_chars or settings.augmentation_max_job_chars
        self._policy = policy

    @property
    def available(self) -> bool:
        return bool(getattr(self._client, "available", False))

    def _complete(self, op: str, system_prompt: str, user_prompt: str, **options: Any) -> Optional[str]:
        started = time.perf_counter()
        try:
            text = self._client.complete_chat(system_prompt, user_prompt, **options)
        except AugmentationError as exc:
            logger.warning(
                "augmentation_failed op=%s code=%s latency_ms=%s: %s",
                op,
                exc.code,
                int((time.perf_counter() - started) * 1000),
                exc,
            )
            return None
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            logger.warning("augmentation_failed op=%s code=llm_exception: %s", op, exc)
            return None
        if not text or not text.strip():
            logger.warning("augmentation_failed op=%s code=empty_response", op)
            return None
        logger.info(
            "augmentation_complete op=%s chars=%s latency_ms=%s",
            op,
            len(text),
            int((time.perf_counter() - started) * 1000),
        )
        return text.strip()

    def summarize(
        self,
        text: str,
        overall_score: float,
        target_role: str | None = None,
        industry: str | None = None,
        *,
        timeout_s: float | None = None,
    ) -> str:
        lines = [
            "Analyze this resume and provide 3-5 high-impact recommendations for improvement.",
            "",
            "Resume Content:",
            truncate(text, self._max_resume_chars),
            "",
            f"Current Overall Score: {overall_score:.2f}/100",
        ]
        if target_role:
            lines.append(f"Target Role: {target_role}")
        if industry:
            lines.append(f"Industry: {industry}")
        lines += [
            "",
            "Use this format:",
            "1. **[Title]**: [Specific actionable advice]",
            "",
            "Focus on ATS optimization, keyword gaps, achievement quantification, "
            "professional language and structure.",
        ]
        narrative = self._complete(
            "summarize",
            _SUMMARY_SYSTEM_PROMPT,
            "\n".join(lines),
            max_tokens=800,
            temperature=0.7,
            timeout_s=timeout_s,
        )
        return narrative or fallback_narrative(overall_score, self._policy)

    def rewrite(
        self,
        section_text: str,
        section_type: str = "experience",
        *,
        timeout_s: float | None = None,
    ) -> str:
        if not section_text or not section_text.strip():
            return section_text
        user_prompt = (
            f"Rewrite this {section_type or 'experience'} section to be more powerful and ATS-friendly:\n\n"
            f"{truncate(section_text, self._max_resume_chars)}\n\n"
            "Requirements:\n"
            "- Start with strong action verbs\n"
            "- Quantify achievements only where the original gives numbers\n"
            "- Use industry keywords\n"
            "- Keep it concise (2-3 bullet points max)\n"
            "- Professional tone"
        )
        rewritten = self._complete(
            "rewrite",
            _REWRITE_SYSTEM_PROMPT,
            user_prompt,
            max_tokens=300,
            temperature=0.6,
            timeout_s=timeout_s,
        )
        return rewritten or section_text

    def chat(self, question: str, resume_context: str = "", *, timeout_s: float | None = None) -> str:
        if not question or not question.strip():
            raise ValidationError("Question is required.")
        context = truncate(resume_context, self._max_context_chars)
        user_prompt = question.strip()
        if context:
            user_prompt += f"\n\nResume Context:\n{context}"
        answer = self._complete(
            "chat",
            _CHAT_SYSTEM_PROMPT,
            user_prompt,
            max_tokens=500,
            temperature=0.7,
            timeout_s=timeout_s,
        )
        return answer or CHAT_UNAVAILABLE_MESSAGE

    def match_job(
        self,
        resume_text: str,
        job_description: str,
        *,
        timeout_s: float | None = None,
    ) -> JobMatchResult:
        if not job_description or not job_description.strip():
            raise ValidationError("Job description is required.")
        user_prompt = (
            "Compare this resume against the job description.\n\n"
            f"JOB DESCRIPTION:\n{truncate(job_description, self._max_job_chars)}\n\n"
            f"RESUME:\n{truncate(resume_text, self._max_resume_chars)}\n\n"
            "Respond in JSON format:\n"
            '{"matchScore": 85, "matchingKeywords": ["Python", "Azure"], "missingKeywords": ["Kubernetes"]}'
        )
        raw = self._complete(
            "match_job",
            _MATCH_SYSTEM_PROMPT,
            user_prompt,
            max_tokens=400,
            temperature=0.3,
            response_format="json",
            timeout_s=timeout_s,
        )
        if raw is None:
            return empty_job_match()
        return parse_job_match(raw)


def empty_job_match() -> JobMatchResult:
    return JobMatchResult(match_score=0.0, computed=False, verdict=match_verdict(0.0))


def parse_job_match(raw: str) -> JobMatchResult:
    try:
        payload = _JobMatchPayload.model_validate(json.loads(raw))
    except (json.JSONDecodeError, SchemaValidationError, TypeError) as exc:
        logger.warning("augmentation_failed op=match_job code=invalid_json: %s", exc)
        return empty_job_match()

    score = round(max(0.0, min(100.0, payload.match_score)), 2)
    return JobMatchResult(
        match_score=score,
        matching_keywords=tuple(k.strip() for k in payload.matching_keywords if k and k.strip()),
        missing_keywords=tuple(k.strip() for k in payload.missing_keywords if k and k.strip()),
        computed=True,
        verdict=match_verdict(score),
    )


@lru_cache(maxsize=1)
def get_default_augmenter() -> ResumeAugmenter:
    return ResumeAugmenter()
