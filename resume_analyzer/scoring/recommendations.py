from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from resume_analyzer.core.config import ScoringPolicy, get_scoring_policy
from resume_analyzer.schemas import PRIORITY_RANK, Recommendation, SectionSignals, SkillMatch, SubscoreSet

from .subscores import parse_cleanliness


@dataclass(frozen=True)
class RuleContext:
    subscores: SubscoreSet
    signals: SectionSignals
    skills: tuple[SkillMatch, ...]
    policy: ScoringPolicy

    @property
    def thresholds(self):
        return self.policy.recommendations.thresholds


@dataclass(frozen=True)
class Rule:
    key: str
    category: str
    title: str
    condition: Callable[[RuleContext], bool]
    impact: Callable[[RuleContext], float]
    description: Callable[[RuleContext], str]
    action_steps: str | None = None
    example: str | None = None


def _missing_sections_description(ctx: RuleContext) -> str:
    missing = ctx.signals.missing_sections()
    return (
        "Recruiters and ATS parsers expect contact info, summary, experience, education and skills. "
        f"Missing: {', '.join(missing)}."
    )


def _skill_gap_description(ctx: RuleContext) -> str:
    count = len(ctx.skills)
    if count == 0:
        return "No recognized skills were detected. Keyword filters will rank this resume low."
    return f"Only {count} recognized skill{'s' if count != 1 else ''} detected. Add the tools and technologies you actually use."


def _action_verb_gap(ctx: RuleContext) -> float:
    target = ctx.thresholds.action_verb_ratio
    missing = max(0.0, target - ctx.signals.action_verb_ratio) / target
    return missing * ctx.policy.formatting.action_verb_points


def _short_text(ctx: RuleContext) -> bool:
    return 0 < ctx.signals.word_count < ctx.policy.formatting.min_words


RULES: tuple[Rule, ...] = (
    Rule(
        key="missing_sections",
        category="Content",
        title="Complete All Required Sections",
        condition=lambda ctx: bool(ctx.signals.missing_sections()),
        impact=lambda ctx: 100 - ctx.subscores.completeness,
        description=_missing_sections_description,
        action_steps=(
            "1. Add contact details (email and phone) at the top\n"
            "2. Write a 2-3 sentence professional summary\n"
            "3. List experience and education under clear headings\n"
            "4. Add a dedicated Skills section"
        ),
        example="SUMMARY\nBackend engineer with 6 years building cloud-native payment systems.",
    ),
    Rule(
        key="skills_section",
        category="ATS Optimization",
        title="Add a Skills Section",
        condition=lambda ctx: not ctx.signals.has_skills_section,
        impact=lambda ctx: 100 - ctx.subscores.keyword,
        description=lambda ctx: (
            "Applicant tracking systems parse explicit skill lists most reliably. "
            "Without one, your skills are only found if they happen to appear in prose."
        ),
        action_steps=(
            "1. Create a Skills section\n"
            "2. List 8-12 relevant skills\n"
            "3. Include both technical and soft skills"
        ),
        example="SKILLS\nPython, Azure, Docker, PostgreSQL, CI/CD, Agile",
    ),
    Rule(
        key="ats_hostile_formatting",
        category="ATS Optimization",
        title="Remove ATS-Unfriendly Formatting",
        condition=lambda ctx: ctx.signals.special_char_count > 0 or ctx.signals.table_line_count > 0,
        impact=lambda ctx: ctx.policy.ats.cleanliness_points * (1 - parse_cleanliness(ctx.signals, ctx.policy)),
        description=lambda ctx: (
            "Tables, column separators, icons and decorative symbols can scramble the text an ATS reads."
        ),
        action_steps="1. Replace tables with plain lines\n2. Remove icons and emoji\n3. Use a single-column layout",
    ),
    Rule(
        key="low_ats",
        category="ATS Optimization",
        title="Improve ATS Compatibility",
        condition=lambda ctx: ctx.subscores.ats < ctx.thresholds.ats,
        impact=lambda ctx: 100 - ctx.subscores.ats,
        description=lambda ctx: (
            f"ATS compatibility is {ctx.subscores.ats:.0f}/100. Use standard headings, dates for every role, "
            "and plain text formatting."
        ),
        action_steps="1. Use standard section headings\n2. Add start and end dates to each role\n3. Save as PDF or DOCX",
    ),
    Rule(
        key="low_keywords",
        category="Keywords",
        title="Add More Relevant Skills",
        condition=lambda ctx: ctx.subscores.keyword < ctx.thresholds.keyword,
        impact=lambda ctx: 100 - ctx.subscores.keyword,
        description=_skill_gap_description,
        action_steps=(
            "1. Compare your resume with target job descriptions\n"
            "2. Add matching skills you genuinely have\n"
            "3. Mention key skills in both the Skills section and your experience"
        ),
    ),
    Rule(
        key="no_in_demand_skills",
        category="Keywords",
        title="Highlight In-Demand Skills",
        condition=lambda ctx: bool(ctx.skills) and not any(skill.in_demand for skill in ctx.skills),
        impact=lambda ctx: (100 - ctx.subscores.keyword) / 2,
        description=lambda ctx: "None of the detected skills are currently in high demand. Surface the most marketable ones.",
    ),
    Rule(
        key="action_verbs",
        category="Content",
        title="Start Bullets with Action Verbs",
        condition=lambda ctx: ctx.signals.has_experience
        and ctx.signals.action_verb_ratio < ctx.thresholds.action_verb_ratio,
        impact=_action_verb_gap,
        description=lambda ctx: (
            f"Only {ctx.signals.action_verb_ratio:.0%} of experience lines open with a strong verb."
        ),
        action_steps="1. Open each bullet with a verb like Developed, Led, Implemented\n2. Drop filler such as 'Responsible for'",
        example="Led a team of 5 engineers to ship a payments API used by 1M customers.",
    ),
    Rule(
        key="quantify",
        category="Content",
        title="Quantify Your Achievements",
        condition=lambda ctx: ctx.signals.has_experience and not ctx.signals.has_metrics,
        impact=lambda ctx: 10,
        description=lambda ctx: "No numbers or percentages were found. Metrics make impact concrete.",
        example="Reduced API latency by 38%, saving $42,000 per year.",
    ),
    Rule(
        key="bullets",
        category="Formatting",
        title="Use Bullet Points",
        condition=lambda ctx: not ctx.signals.is_empty
        and ctx.signals.bullet_density < ctx.thresholds.bullet_density,
        impact=lambda ctx: ctx.policy.formatting.bullet_points
        * (1 - min(1.0, ctx.signals.bullet_density / ctx.policy.formatting.target_bullet_density)),
        description=lambda ctx: "Dense paragraphs are hard to scan. Break accomplishments into short bullets.",
        action_steps="1. Split paragraphs into 3-5 bullets per role\n2. Keep each bullet to one or two lines",
    ),
    Rule(
        key="dates",
        category="Formatting",
        title="Include Dates for Each Role",
        condition=lambda ctx: ctx.signals.has_experience and not ctx.signals.has_dates,
        impact=lambda ctx: ctx.policy.formatting.dates_points,
        description=lambda ctx: "No dates were found. Recruiters and ATS systems use them to compute experience.",
        example="Senior Engineer, Acme Corp (Jan 2020 - Present)",
    ),
    Rule(
        key="low_formatting",
        category="Formatting",
        title="Improve Structure and Readability",
        condition=lambda ctx: not ctx.signals.is_empty and ctx.subscores.formatting < ctx.thresholds.formatting,
        impact=lambda ctx: 100 - ctx.subscores.formatting,
        description=lambda ctx: f"Formatting scores {ctx.subscores.formatting:.0f}/100.",
        action_steps="1. Use clear section headings\n2. Keep consistent bullet style\n3. Lead with your strongest content",
    ),
    Rule(
        key="expand_content",
        category="Content",
        title="Add More Detail",
        condition=_short_text,
        impact=lambda ctx: 100 - ctx.subscores.formatting,
        description=lambda ctx: (
            f"Only {ctx.signals.word_count} words were extracted. Expand on your experience, "
            "or check that the file is not an image-only scan."
        ),
    ),
)


def priority_for(impact: float, policy: ScoringPolicy) -> str:
    thresholds = policy.recommendations.priority
    if impact >= thresholds.high:
        return "High"
    if impact >= thresholds.medium:
        return "Medium"
    return "Low"


def _build(rule: Rule, ctx: RuleContext) -> tuple[float, Recommendation]:
    # Priority is banded on the exact deficit; only the reported score is rounded.
    impact = max(0.0, min(100.0, rule.impact(ctx)))
    recommendation = Recommendation(
        title=rule.title,
        description=rule.description(ctx),
        category=rule.category,
        priority=priority_for(impact, ctx.policy),
        impact_score=int(round(impact)),
        action_steps=rule.action_steps,
        example=rule.example,
    )
    return impact, recommendation


def generate_recommendations(
    subscores: SubscoreSet,
    signals: SectionSignals,
    skills: Sequence[SkillMatch],
    policy: ScoringPolicy | None = None,
    rules: Sequence[Rule] = RULES,
) -> list[Recommendation]:
    ctx = RuleContext(
        subscores=subscores,
        signals=signals,
        skills=tuple(skills),
        policy=policy or get_scoring_policy(),
    )

    best: dict[str, tuple[int, float, Recommendation]] = {}
    for order, rule in enumerate(rules):
        if not rule.condition(ctx):
            continue
        impact, recommendation = _build(rule, ctx)
        current = best.get(rule.category)
        # Strictly greater keeps the earlier rule on ties.
        if current is None or impact > current[1]:
            best[rule.category] = (order, impact, recommendation)

    ranked = sorted(
        best.values(),
        key=lambda item: (-PRIORITY_RANK[item[2].priority], -item[1], item[0]),
    )
    return [recommendation for _, _, recommendation in ranked]
