from typing import List, Optional
from pydantic import BaseModel

from skillgap.services.reconciliation import (
    ReviewNavigator, SectionGroup, SkillReview, ReviewSummary,
)


class SkillReviewOut(BaseModel):
    skill: str
    section: str
    self_rating: Optional[int] = None   # null = employee did not rate
    expectation: Optional[int] = None
    manager_rating: Optional[int] = None  # null = manager has not rated
    gap: Optional[int] = None             # null = not yet comparable
    gap_signal: str

    @classmethod
    def from_review(cls, review: SkillReview) -> "SkillReviewOut":
        return cls(
            skill=review.skill,
            section=review.section,
            self_rating=review.self_rating.value,
            expectation=review.expectation.value,
            manager_rating=review.manager_rating.value,
            gap=review.gap,
            gap_signal=review.gap_signal.value,
        )

class SectionOut(BaseModel):
    key: str
    title: str
    short_label: str
    skills: List[SkillReviewOut]

    @classmethod
    def from_group(cls, group: SectionGroup) -> "SectionOut":
        return cls(
            key=group.key,
            title=group.title,
            short_label=group.short_label,
            skills=[SkillReviewOut.from_review(r) for r in group.reviews],
        )

class NavigationOut(BaseModel):
    steps: List[str]
    current_step: int
    total_steps: int
    progress: int

    @classmethod
    def from_navigator(cls, navigator: ReviewNavigator) -> "NavigationOut":
        return cls(
            steps=navigator.section_keys + ["review"],
            current_step=navigator.current_step,
            total_steps=navigator.total_steps,
            progress=navigator.progress,
        )

class ReviewSummaryOut(BaseModel):
    total_assessed: int
    manager_rated: int
    overall_status: str

    @classmethod
    def from_summary(cls, summary: ReviewSummary) -> "ReviewSummaryOut":
        return cls(
            total_assessed=summary.total_assessed,
            manager_rated=summary.manager_rated,
            overall_status=summary.overall_status,
        )

class ReviewView(BaseModel):
    """Reconciled, section-grouped view of one employee's review."""
    response_id: str
    name: str
    employee_id: str
    review_completed: bool
    overall_manager_review: Optional[str] = None
    sections: List[SectionOut]
    navigation: NavigationOut
    summary: ReviewSummaryOut
