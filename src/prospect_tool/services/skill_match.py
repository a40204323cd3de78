"""Skill matching between candidates and job requirements"""
import math
import re
from typing import Dict, List, Optional, Sequence

from src.prospect_tool.config import get_settings
from src.prospect_tool.schemas.matching import (
    CandidateSkills,
    PoolHealth,
    SkillGapData,
    SkillGapReport,
    SkillMatchResult,
)

MATCH_LABELS = ["Excellent", "Good", "Fair", "Low"]

MATCH_COLORS: Dict[str, str] = {
    "Excellent": "green",
    "Good": "blue",
    "Fair": "yellow",
    "Low": "red",
}


def normalize_skill(skill: str) -> str:
    return re.sub(r"[.\-_]", "", skill.strip().lower())


def _unique(skills: Sequence[str]) -> List[str]:
    seen = set()
    result = []
    for skill in skills:
        key = normalize_skill(skill)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(skill)
    return result


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_skills(candidate_skills: Sequence[str], required_skills: Sequence[str]) -> SkillMatchResult:
    """
    Compare a candidate's skills with a job's required skills.
    matched/missing follow the required list as given (blank entries dropped),
    so a repeated requirement counts each time; extra keeps the candidate's
    spelling with repeats collapsed.
    With no required skills the percentage is None (nothing to score) and
    every candidate skill is extra.
    """
    candidate = _unique(candidate_skills)
    required = [skill for skill in required_skills if normalize_skill(skill)]

    if not required:
        return SkillMatchResult(matched=[], missing=[], extra=candidate, match_percentage=None)

    candidate_keys = {normalize_skill(skill) for skill in candidate}
    required_keys = {normalize_skill(skill) for skill in required}

    matched = [skill for skill in required if normalize_skill(skill) in candidate_keys]
    missing = [skill for skill in required if normalize_skill(skill) not in candidate_keys]
    extra = [skill for skill in candidate if normalize_skill(skill) not in required_keys]

    return SkillMatchResult(
        matched=matched,
        missing=missing,
        extra=extra,
        match_percentage=round_half_up(len(matched) / len(required) * 100),
    )


def is_skill_matched(candidate_skill: str, required_skills: Sequence[str]) -> bool:
    key = normalize_skill(candidate_skill)
    return any(normalize_skill(required) == key for required in required_skills)


def match_label(percentage: int) -> str:
    settings = get_settings()
    for label, threshold in zip(MATCH_LABELS, settings.match_bands):
        if percentage >= threshold:
            return label
    return MATCH_LABELS[-1]


def match_color(percentage: int) -> str:
    return MATCH_COLORS[match_label(percentage)]


def analyze_skill_gaps(
    candidates: Sequence[CandidateSkills],
    required_skills: Sequence[str],
) -> SkillGapReport:
    if not any(normalize_skill(skill) for skill in required_skills):
        raise ValueError("required_skills must contain at least one skill")

    missing_counts: Dict[str, int] = {}
    pool_health = PoolHealth()
    buckets = {
        "Excellent": pool_health.excellent,
        "Good": pool_health.good,
        "Fair": pool_health.fair,
        "Low": pool_health.low,
    }

    for candidate in candidates:
        result = score_skills(candidate.skills or [], required_skills)
        for skill in result.missing:
            missing_counts[skill] = missing_counts.get(skill, 0) + 1
        buckets[match_label(result.match_percentage)].append(candidate.id)

    total = len(candidates)
    skill_gaps = [
        SkillGapData(
            skill=skill,
            missing_count=count,
            total_candidates=total,
            percentage=round_half_up(count / total * 100) if total else 0,
        )
        for skill, count in missing_counts.items()
    ]
    skill_gaps.sort(key=lambda gap: gap.missing_count, reverse=True)

    return SkillGapReport(
        skill_gaps=skill_gaps,
        pool_health=pool_health,
        total_candidates=total,
        recommendations=build_recommendations(skill_gaps, pool_health),
    )


def build_recommendations(skill_gaps: List[SkillGapData], pool_health: PoolHealth) -> List[str]:
    recommendations = []

    excellent = len(pool_health.excellent)
    if excellent == 1:
        recommendations.append("1 candidate is an excellent match for immediate review")
    elif excellent > 1:
        recommendations.append(f"{excellent} candidates are excellent matches for immediate review")

    top_missing = [gap for gap in skill_gaps[:3] if gap.percentage > 50]
    if top_missing:
        skills = ", ".join(gap.skill for gap in top_missing)
        recommendations.append(f"Consider sourcing candidates with {skills} experience")

    strong = excellent + len(pool_health.good)
    total = strong + len(pool_health.fair) + len(pool_health.low)
    if total > 0 and strong / total < 0.3:
        recommendations.append(
            "Consider expanding your candidate search - current pool has limited strong matches"
        )

    if not recommendations:
        recommendations.append("Candidate pool looks healthy for this role")

    return recommendations


def describe_match(percentage: Optional[int]) -> Dict[str, Optional[str]]:
    if percentage is None:
        return {"label": None, "color": None}
    return {"label": match_label(percentage), "color": match_color(percentage)}
