from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from resume_analyzer.core.config import ScoringPolicy, get_scoring_policy
from resume_analyzer.core.errors import ValidationError
from resume_analyzer.features import analyze_sections, match_skills
from resume_analyzer.parsing import extract_text as default_extract_text
from resume_analyzer.schemas import Analysis, SubscoreSet
from resume_analyzer.scoring import compute_subscores, generate_recommendations, overall_score
from resume_analyzer.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .augmentation import ResumeAugmenter, fallback_narrative, get_default_augmenter, run_with_deadline

logger = logging.getLogger(__name__)

_SUBSCORE_LABELS = {
    "ats": "ATS compatibility",
    "completeness": "section completeness",
    "keyword": "keyword coverage",
    "formatting": "formatting and readability",
}


def _join(labels: list[str]) -> str:
    if len(labels) <= 1:
        return "".join(labels)
    return ", ".join(labels[:-1]) + " and " + labels[-1]


def summarize_strengths(subscores: SubscoreSet, policy: ScoringPolicy) -> str:
    threshold = policy.summaries.strength_threshold
    strong = [label for key, label in _SUBSCORE_LABELS.items() if getattr(subscores, key) >= threshold]
    if not strong:
        return "No standout strengths yet. Work through the recommendations to build a stronger foundation."
    return f"Strong {_join(strong)}."


def summarize_weaknesses(subscores: SubscoreSet, policy: ScoringPolicy) -> str:
    threshold = policy.summaries.weakness_threshold
    weak = [label for key, label in _SUBSCORE_LABELS.items() if getattr(subscores, key) < threshold]
    if not weak:
        return "No major weaknesses detected."
    return f"Needs improvement in {_join(weak)}."


def analyze(
    text: str,
    file_name: str = "",
    target_role: str | None = None,
    industry: str | None = None,
    *,
    resume_id: str | None = None,
    augment: bool = False,
    deadline_s: float | None = None,
    augmenter: ResumeAugmenter | None = None,
    policy: ScoringPolicy | None = None,
    taxonomy: TaxonomyProvider | None = None,
) -> Analysis:
    """Score extracted resume text and build an immutable ``Analysis``.

    The deterministic stages never raise for any string input. With ``augment=True``
    the caller must supply ``deadline_s``; a narrative that is not ready by then is
    replaced by the score-band template.
    """
    if augment and (deadline_s is None or deadline_s <= 0):
        raise ValidationError("A positive deadline is required when augmentation is requested.")

    started = time.perf_counter()
    policy = policy or get_scoring_policy()
    taxonomy = taxonomy or get_default_taxonomy_provider()
    text = text or ""

    skills = match_skills(text, taxonomy=taxonomy, policy=policy)
    signals = analyze_sections(text)
    subscores = compute_subscores(signals, skills, policy)
    overall = overall_score(subscores, policy)
    recommendations = generate_recommendations(subscores, signals, skills, policy)

    narrative = None
    if augment:
        augmenter = augmenter or get_default_augmenter()
        narrative = run_with_deadline(
            lambda: augmenter.summarize(text, overall, target_role, industry, timeout_s=deadline_s),
            deadline_s,
            lambda: fallback_narrative(overall, policy),
        )

    analysis = Analysis(
        id=uuid.uuid4().hex,
        resume_id=resume_id or uuid.uuid4().hex,
        file_name=file_name or "",
        subscores=subscores,
        overall_score=overall,
        signals=signals,
        strengths_summary=summarize_strengths(subscores, policy),
        weaknesses_summary=summarize_weaknesses(subscores, policy),
        narrative=narrative,
        target_role=target_role,
        industry=industry,
        skills=tuple(skills),
        recommendations=tuple(recommendations),
        policy_version=policy.version,
        taxonomy_version=taxonomy.version,
    )
    logger.info(
        "analysis_complete analysis_id=%s overall=%s skills=%s recommendations=%s augmented=%s duration_ms=%s",
        analysis.id,
        overall,
        len(skills),
        len(recommendations),
        augment,
        int((time.perf_counter() - started) * 1000),
    )
    return analysis


def analyze_document(
    file_bytes: bytes,
    file_name: str,
    target_role: str | None = None,
    industry: str | None = None,
    *,
    extract_text: Callable[[bytes, str], str] = default_extract_text,
    **kwargs,
) -> tuple[str, Analysis]:
    """Extract text and analyze it. Extraction errors propagate; nothing is scored."""
    text = extract_text(file_bytes, file_name)
    return text, analyze(text, file_name, target_role, industry, **kwargs)
