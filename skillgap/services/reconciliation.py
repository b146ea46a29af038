"""
Gap Reconciliation Engine

Merges an employee's stored self-ratings, the manager's persisted ratings
and the per-skill company expectations into one list of SkillReview
records, applies manager edits to that list, and reduces it back into the
fields stored on the response.

All functions here are pure: they take plain records (ORM objects,
pydantic models or dicts) and return new values. Out-of-range input is
clamped or ignored rather than raised; bounds are enforced where the
review is persisted (see SurveyResponseService.save_manager_review).

Precedence for a skill's expectation:
    persisted per-response value > taxonomy default > employee self-rating
"""
import enum
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from skillgap.services.taxonomy import OTHER, SkillTaxonomy

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class Rating:
    """Either UNRATED (value is None) or a proficiency level in 1..5."""
    value: Optional[int] = None

    def __post_init__(self):
        if self.value is not None and not MIN_RATING <= self.value <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {self.value}")

    @classmethod
    def of(cls, raw: Any) -> "Rating":
        """Tolerant conversion: fractions round half-up, missing or below 1 -> UNRATED, above 5 -> 5."""
        if raw is None or isinstance(raw, bool):
            return UNRATED
        if isinstance(raw, Rating):
            return raw
        try:
            number = float(raw)
        except (TypeError, ValueError):
            return UNRATED
        if not math.isfinite(number):
            return UNRATED
        # Half-up, so 4.5 -> 5 and 4.4 -> 4
        level = math.floor(number + 0.5)
        if level < MIN_RATING:
            return UNRATED
        return cls(min(level, MAX_RATING))

    @property
    def is_rated(self) -> bool:
        return self.value is not None

    def as_int(self) -> int:
        return self.value if self.value is not None else 0

    def __repr__(self):
        return f"Rating({self.value})" if self.is_rated else "UNRATED"


UNRATED = Rating()


class GapSignal(str, enum.Enum):
    NOT_RATED = "not_rated"                    # manager has not rated the skill
    NO_SELF_ASSESSMENT = "no_self_assessment"  # manager rated, employee did not
    EXCEEDS = "exceeds"
    MATCHES = "matches"
    BELOW = "below"


@dataclass(frozen=True)
class SkillReview:
    skill: str
    section: str
    self_rating: Rating = UNRATED
    expectation: Rating = UNRATED
    manager_rating: Rating = UNRATED

    @property
    def gap(self) -> Optional[int]:
        """manager - self; None until the manager has rated the skill."""
        if not self.manager_rating.is_rated:
            return None
        # A missing self-rating counts as 0; gap_signal keeps that case distinct.
        return self.manager_rating.as_int() - self.self_rating.as_int()

    @property
    def gap_signal(self) -> GapSignal:
        gap = self.gap
        if gap is None:
            return GapSignal.NOT_RATED
        if not self.self_rating.is_rated:
            return GapSignal.NO_SELF_ASSESSMENT
        if gap > 0:
            return GapSignal.EXCEEDS
        if gap < 0:
            return GapSignal.BELOW
        return GapSignal.MATCHES


@dataclass(frozen=True)
class SectionGroup:
    key: str
    title: str
    short_label: str
    reviews: Tuple[SkillReview, ...]


@dataclass(frozen=True)
class ManagerReviewPayload:
    manager_ratings: List[Dict[str, Any]] = field(default_factory=list)
    company_expectations: List[Dict[str, Any]] = field(default_factory=list)
    rating_gaps: List[Dict[str, Any]] = field(default_factory=list)
    overall_manager_review: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "manager_ratings": [dict(e) for e in self.manager_ratings],
            "company_expectations": [dict(e) for e in self.company_expectations],
            "rating_gaps": [dict(e) for e in self.rating_gaps],
            "overall_manager_review": self.overall_manager_review,
        }


@dataclass(frozen=True)
class ReviewSummary:
    total_assessed: int
    manager_rated: int
    overall_status: str


# --- Record access helpers ---

def read_field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def index_entries(entries: Optional[Iterable[Any]], value_key: str) -> Dict[str, Any]:
    """Map skill -> value for a stored ``[{skill, <value_key>}]`` list. First entry per skill wins."""
    indexed: Dict[str, Any] = {}
    for entry in entries or []:
        skill = read_field(entry, "skill")
        if skill and skill not in indexed:
            indexed[skill] = read_field(entry, value_key)
    return indexed


def is_review_completed(response: Any) -> bool:
    return bool(read_field(response, "manager_ratings"))


def skills_to_review(response: Any) -> List[str]:
    """selected_skills ∪ rated skills, in first-seen order, without duplicates."""
    skills = dict.fromkeys(s for s in (read_field(response, "selected_skills") or []) if s)
    for skill in index_entries(read_field(response, "skill_ratings"), "rating"):
        skills.setdefault(skill)
    return list(skills)


def merge_expectation(persisted: Any, default: Optional[int], self_rating: Rating) -> Rating:
    for candidate in (persisted, default):
        expectation = Rating.of(candidate)
        if expectation.is_rated:
            return expectation
    return self_rating


# --- Build step ---

def reconcile(response: Any, taxonomy: SkillTaxonomy) -> List[SkillReview]:
    """
    Produce one SkillReview per skill the employee selected or rated.

    Records follow taxonomy section order and the fixed skill order inside
    each section; skills outside every section come last under "other".
    Persisted manager ratings are only read once the review is completed.
    """
    wanted = skills_to_review(response)
    wanted_set = set(wanted)

    ordered: List[Tuple[str, str]] = [
        (section.key, skill)
        for section in taxonomy.sections
        for skill in section.skills
        if skill in wanted_set
    ]
    ordered.extend((OTHER, skill) for skill in wanted if taxonomy.section_of(skill) == OTHER)

    self_ratings = index_entries(read_field(response, "skill_ratings"), "rating")
    expectations = index_entries(read_field(response, "company_expectations"), "expectation")
    manager_ratings = (
        index_entries(read_field(response, "manager_ratings"), "rating")
        if is_review_completed(response) else {}
    )

    reviews = []
    for section_key, skill in ordered:
        self_rating = Rating.of(self_ratings.get(skill))
        reviews.append(SkillReview(
            skill=skill,
            section=section_key,
            self_rating=self_rating,
            expectation=merge_expectation(
                expectations.get(skill), taxonomy.default_expectation(skill), self_rating
            ),
            manager_rating=Rating.of(manager_ratings.get(skill)),
        ))
    return reviews


def group_sections(reviews: Sequence[SkillReview], taxonomy: SkillTaxonomy) -> List[SectionGroup]:
    """Sections holding at least one reviewed skill, taxonomy order, "other" last."""
    groups = []
    for key in taxonomy.section_keys + [OTHER]:
        members = tuple(r for r in reviews if r.section == key)
        if members:
            groups.append(SectionGroup(
                key=key,
                title=taxonomy.title_of(key),
                short_label=taxonomy.short_label_of(key),
                reviews=members,
            ))
    return groups


# --- Edit step ---

def _replace_matching(reviews: Sequence[SkillReview], skill: str, section: str, **changes) -> List[SkillReview]:
    updated = list(reviews)
    for index, review in enumerate(updated):
        if review.skill == skill and review.section == section:
            updated[index] = replace(review, **changes)
            return updated
    # Never create a record: managers may only rate what the employee selected.
    logger.warning(f"Ignoring edit for unknown skill {skill!r} in section {section!r}")
    return updated


def apply_manager_rating(reviews: Sequence[SkillReview], skill: str, section: str, rating: Any) -> List[SkillReview]:
    """Set the manager rating of the (skill, section) record; the gap follows. 0 clears it."""
    return _replace_matching(reviews, skill, section, manager_rating=Rating.of(rating))


def apply_expectation(reviews: Sequence[SkillReview], skill: str, section: str, expectation: Any) -> List[SkillReview]:
    """Override the expectation for this response only. Non-positive values are ignored."""
    level = Rating.of(expectation)
    if not level.is_rated:
        logger.warning(f"Ignoring empty expectation for {skill!r}")
        return list(reviews)
    return _replace_matching(reviews, skill, section, expectation=level)


# --- Persist step ---

def to_persistable(reviews: Sequence[SkillReview], overall_text: Optional[str]) -> ManagerReviewPayload:
    rated = [r for r in reviews if r.manager_rating.is_rated]
    return ManagerReviewPayload(
        manager_ratings=[{"skill": r.skill, "rating": r.manager_rating.value} for r in rated],
        # Every record, rated or not, so edited expectations survive a re-save.
        # An expectation with no override, no default and no self-rating has no valid value to store.
        company_expectations=[
            {"skill": r.skill, "expectation": r.expectation.value}
            for r in reviews if r.expectation.is_rated
        ],
        rating_gaps=[{"skill": r.skill, "gap": r.gap} for r in rated],
        overall_manager_review=overall_text if overall_text is not None else "",
    )


def summarize(reviews: Sequence[SkillReview], overall_text: Optional[str]) -> ReviewSummary:
    return ReviewSummary(
        total_assessed=len(reviews),
        manager_rated=sum(1 for r in reviews if r.manager_rating.is_rated),
        overall_status="Complete" if (overall_text or "").strip() else "Pending",
    )


# --- Navigation ---

class ReviewNavigator:
    """
    Step navigation over the review: one step per non-empty section and a
    final summary step. A completed review opens on the summary step.
    """

    def __init__(self, section_keys: Sequence[str], start_at_review: bool = False):
        self.section_keys = list(section_keys)
        self.current_step = self.review_step if start_at_review else 0

    @classmethod
    def for_reviews(cls, reviews: Sequence[SkillReview], taxonomy: SkillTaxonomy, completed: bool = False) -> "ReviewNavigator":
        return cls([g.key for g in group_sections(reviews, taxonomy)], start_at_review=completed)

    @property
    def review_step(self) -> int:
        return len(self.section_keys)

    @property
    def total_steps(self) -> int:
        return len(self.section_keys) + 1

    @property
    def is_review_step(self) -> bool:
        return self.current_step == self.review_step

    @property
    def active_section(self) -> Optional[str]:
        return None if self.is_review_step else self.section_keys[self.current_step]

    @property
    def progress(self) -> int:
        # Half-up rounding, matching the percentage shown to reviewers.
        return math.floor((self.current_step + 1) / self.total_steps * 100 + 0.5)

    def go_to(self, step: int) -> int:
        self.current_step = max(0, min(step, self.review_step))
        return self.current_step

    def next(self) -> int:
        return self.go_to(self.current_step + 1)

    def previous(self) -> int:
        return self.go_to(self.current_step - 1)

    def go_to_review(self) -> int:
        return self.go_to(self.review_step)
