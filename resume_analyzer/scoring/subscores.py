from __future__ import annotations

from typing import Sequence

from resume_analyzer.core.config import ScoringPolicy, get_scoring_policy
from resume_analyzer.schemas import SectionSignals, SkillMatch, SubscoreSet


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _score(value: float) -> float:
    return round(_clamp(value), 2)


def completeness_score(signals: SectionSignals, policy: ScoringPolicy | None = None) -> float:
    weights = (policy or get_scoring_policy()).completeness.section_weights
    present = (
        (weights.contact, signals.has_contact_info),
        (weights.summary, signals.has_summary),
        (weights.experience, signals.has_experience),
        (weights.education, signals.has_education),
        (weights.skills, signals.has_skills_section),
    )
    total = sum(weight for weight, _ in present)
    earned = sum(weight for weight, found in present if found)
    return _score(earned / total * 100)


def keyword_score(skills: Sequence[SkillMatch], policy: ScoringPolicy | None = None) -> float:
    """Concave coverage of the strongest skills; anything past the saturation point adds nothing."""
    keyword = (policy or get_scoring_policy()).keyword
    if not skills:
        return 0.0

    strongest = sorted(skills, key=lambda skill: -skill.confidence_level)[: keyword.saturation]
    weighted = sum(
        skill.confidence_level / 100 * (keyword.in_demand_weight if skill.in_demand else keyword.other_weight)
        for skill in strongest
    )
    coverage = min(weighted, keyword.saturation) / keyword.saturation
    return _score(100 * coverage**keyword.curve_exponent)


def formatting_score(signals: SectionSignals, policy: ScoringPolicy | None = None) -> float:
    formatting = (policy or get_scoring_policy()).formatting
    if signals.is_empty:
        return 0.0

    score = formatting.bullet_points * min(1.0, signals.bullet_density / formatting.target_bullet_density)
    score += formatting.action_verb_points * min(
        1.0, signals.action_verb_ratio / formatting.target_action_verb_ratio
    )
    if signals.has_dates:
        score += formatting.dates_points
    if signals.section_count >= formatting.min_headings:
        score += formatting.headings_points

    # Wall of text: no bullets at all and at least one run-on paragraph.
    if signals.bullet_density == 0 and signals.longest_line_words >= formatting.wall_of_text_words:
        score -= formatting.wall_of_text_penalty
    # Very short output usually means extraction lost most of the document.
    if signals.word_count < formatting.min_words:
        score *= formatting.short_text_multiplier
    return _score(score)


def parse_cleanliness(signals: SectionSignals, policy: ScoringPolicy | None = None) -> float:
    """Fraction in [0, 1] of the document free of structures that break ATS parsing."""
    ats = (policy or get_scoring_policy()).ats
    penalty = signals.special_char_count / ats.special_char_tolerance
    penalty += signals.table_line_count * ats.table_line_penalty
    return max(0.0, 1.0 - penalty)


def ats_score(
    signals: SectionSignals,
    completeness: float | None = None,
    policy: ScoringPolicy | None = None,
) -> float:
    policy = policy or get_scoring_policy()
    ats = policy.ats
    if signals.is_empty:
        return 0.0
    if completeness is None:
        completeness = completeness_score(signals, policy)

    score = ats.completeness_weight * completeness
    if signals.has_skills_section:
        score += ats.skills_section_points
    score += ats.cleanliness_points * parse_cleanliness(signals, policy)
    if signals.has_dates:
        score += ats.dates_points
    if signals.word_count < policy.formatting.min_words:
        score *= policy.formatting.short_text_multiplier
    return _score(score)


def compute_subscores(
    signals: SectionSignals,
    skills: Sequence[SkillMatch],
    policy: ScoringPolicy | None = None,
) -> SubscoreSet:
    policy = policy or get_scoring_policy()
    if signals.is_empty:
        return SubscoreSet(ats=0.0, completeness=0.0, keyword=0.0, formatting=0.0)

    completeness = completeness_score(signals, policy)
    return SubscoreSet(
        ats=ats_score(signals, completeness, policy),
        completeness=completeness,
        keyword=keyword_score(skills, policy),
        formatting=formatting_score(signals, policy),
    )


def overall_score(subscores: SubscoreSet, policy: ScoringPolicy | None = None) -> float:
    weights = (policy or get_scoring_policy()).overall_weights
    total = (
        weights.ats * subscores.ats
        + weights.completeness * subscores.completeness
        + weights.keyword * subscores.keyword
        + weights.formatting * subscores.formatting
    )
    return _score(total)
