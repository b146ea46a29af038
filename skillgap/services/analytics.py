"""
Skill analytics: a stateless fold over all responses for dashboards.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from skillgap.services.reconciliation import Rating, index_entries, read_field
from skillgap.services.taxonomy import SkillTaxonomy


@dataclass(frozen=True)
class SkillStat:
    skill: str
    count: int                       # employees who selected (or rated) the skill
    average_rating: Optional[float]  # None when no employee rated it


@dataclass(frozen=True)
class SectionStat:
    key: str
    title: str
    count: int
    distinct_skills: int


def aggregate_skills(responses: Iterable[Any]) -> List[SkillStat]:
    """
    Per skill: how many employees picked it and their mean self-rating.
    Ordered by count, most popular first; ties keep first-seen order.
    """
    counts: Dict[str, int] = {}
    totals: Dict[str, int] = {}
    rated: Dict[str, int] = {}

    for response in responses:
        ratings = index_entries(read_field(response, "skill_ratings"), "rating")
        skills = dict.fromkeys(read_field(response, "selected_skills") or [])
        for skill in ratings:
            skills.setdefault(skill)

        for skill in skills:
            counts[skill] = counts.get(skill, 0) + 1
            rating = Rating.of(ratings.get(skill))
            if rating.is_rated:
                totals[skill] = totals.get(skill, 0) + rating.value
                rated[skill] = rated.get(skill, 0) + 1

    stats = [
        SkillStat(
            skill=skill,
            count=count,
            average_rating=round(totals[skill] / rated[skill], 1) if rated.get(skill) else None,
        )
        for skill, count in counts.items()
    ]
    # sorted() is stable, so equal counts stay in iteration order
    return sorted(stats, key=lambda s: s.count, reverse=True)


def top_skills(stats: Sequence[SkillStat], n: int) -> List[SkillStat]:
    return list(stats[:max(n, 0)])


def overall_average(stats: Iterable[SkillStat]) -> Optional[float]:
    averages = [s.average_rating for s in stats if s.average_rating is not None]
    if not averages:
        return None
    return round(sum(averages) / len(averages), 1)


def section_breakdown(stats: Iterable[SkillStat], taxonomy: SkillTaxonomy) -> List[SectionStat]:
    """Total selections and distinct skills per taxonomy section."""
    by_skill = {s.skill: s for s in stats}
    breakdown = []
    for section in taxonomy.sections:
        members = [by_skill[skill] for skill in section.skills if skill in by_skill]
        breakdown.append(SectionStat(
            key=section.key,
            title=section.title,
            count=sum(s.count for s in members),
            distinct_skills=len(members),
        ))
    return breakdown
