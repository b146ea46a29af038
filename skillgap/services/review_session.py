"""
Review lifecycle for one employee response.

    EDITING ──save()──> SAVING ──ok──> COMPLETED
       ^                  │                │
       └──── failure ─────┘                │
       └───────────── edit() ──────────────┘

Edits are held in memory until save(). A failed save returns to EDITING
with the edits intact and a readable reason in ``last_error``; nothing is
retried automatically.
"""
import enum
import logging
from typing import Any, Dict, List, Optional, Protocol

from skillgap.core.exceptions import (
    AppException,
    ExpectationOutOfRangeError,
    GapInconsistentError,
    NotFoundError,
    RatingOutOfRangeError,
    ReviewStateError,
    SkillNotSelectedError,
    StorageError,
    TransportError,
)
from skillgap.services.reconciliation import (
    ManagerReviewPayload,
    ReviewNavigator,
    ReviewSummary,
    SectionGroup,
    SkillReview,
    apply_expectation,
    apply_manager_rating,
    group_sections,
    is_review_completed,
    read_field,
    reconcile,
    summarize,
    to_persistable,
)
from skillgap.services.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)


class ReviewStore(Protocol):
    def get_response_by_id(self, response_id: str) -> Optional[Any]: ...

    def save_manager_review(self, response_id: str, payload: Dict[str, Any]) -> Optional[Any]: ...


class ReviewState(str, enum.Enum):
    EDITING = "editing"
    SAVING = "saving"
    COMPLETED = "completed"


def describe_failure(exc: AppException) -> str:
    """Reviewer-facing explanation for a failed save."""
    if isinstance(exc, RatingOutOfRangeError):
        return "Invalid rating value. Ratings must be between 1 and 5."
    if isinstance(exc, GapInconsistentError):
        return "Invalid gap value detected. Please check your ratings."
    if isinstance(exc, ExpectationOutOfRangeError):
        return "Invalid expectation value. Expectations must be between 1 and 5."
    if isinstance(exc, NotFoundError):
        return "Employee response not found. Please refresh and try again."
    if isinstance(exc, SkillNotSelectedError):
        skill = (exc.details or {}).get("skill", "This skill")
        return f"{skill} was not part of the employee's self-assessment and cannot be rated."
    if isinstance(exc, (TransportError, StorageError)):
        return "Unable to save review. Please check your connection."
    return exc.message or "Failed to save manager review. Please try again."


class ReviewSession:
    def __init__(self, store: ReviewStore, response_id: str, taxonomy: SkillTaxonomy):
        self.store = store
        self.response_id = response_id
        self.taxonomy = taxonomy

        self.response: Optional[Any] = None
        self.reviews: List[SkillReview] = []
        self.overall_review: str = ""
        self.state: Optional[ReviewState] = None
        self.navigator: Optional[ReviewNavigator] = None
        self.last_error: Optional[str] = None

    def load(self) -> "ReviewSession":
        response = self.store.get_response_by_id(self.response_id)
        if response is None:
            raise NotFoundError("Employee response not found")
        self._seed(response)
        return self

    def _seed(self, response: Any):
        self.response = response
        self.reviews = reconcile(response, self.taxonomy)
        self.overall_review = read_field(response, "overall_manager_review") or ""
        completed = is_review_completed(response)
        self.state = ReviewState.COMPLETED if completed else ReviewState.EDITING
        self.navigator = ReviewNavigator.for_reviews(self.reviews, self.taxonomy, completed=completed)

    # --- Derived views ---

    @property
    def is_completed(self) -> bool:
        return self.state == ReviewState.COMPLETED

    @property
    def sections(self) -> List[SectionGroup]:
        return group_sections(self.reviews, self.taxonomy)

    @property
    def summary(self) -> ReviewSummary:
        return summarize(self.reviews, self.overall_review)

    # --- Edits (in memory) ---

    def _require(self, state: ReviewState, action: str):
        if self.state != state:
            current = self.state.value if self.state else "not loaded"
            raise ReviewStateError(f"Cannot {action} while the review is {current}")

    def rate(self, skill: str, rating: int, section: Optional[str] = None) -> SkillReview:
        self._require(ReviewState.EDITING, "rate a skill")
        section = section or self.taxonomy.section_of(skill)
        self.reviews = apply_manager_rating(self.reviews, skill, section, rating)
        return self.find(skill, section)

    def set_expectation(self, skill: str, expectation: int, section: Optional[str] = None) -> SkillReview:
        self._require(ReviewState.EDITING, "change an expectation")
        section = section or self.taxonomy.section_of(skill)
        self.reviews = apply_expectation(self.reviews, skill, section, expectation)
        return self.find(skill, section)

    def set_overall_review(self, text: str):
        self._require(ReviewState.EDITING, "edit the overall review")
        self.overall_review = text

    def find(self, skill: str, section: Optional[str] = None) -> Optional[SkillReview]:
        section = section or self.taxonomy.section_of(skill)
        return next((r for r in self.reviews if r.skill == skill and r.section == section), None)

    def edit(self):
        """Re-open a completed review, re-seeded from what was last persisted."""
        self._require(ReviewState.COMPLETED, "re-open the review")
        self._seed(self.response)
        self.state = ReviewState.EDITING

    # --- Persist ---

    def save(self) -> ManagerReviewPayload:
        if self.state == ReviewState.SAVING:
            raise ReviewStateError("A save is already in progress")
        self._require(ReviewState.EDITING, "save")

        payload = to_persistable(self.reviews, self.overall_review)
        self.state = ReviewState.SAVING
        self.last_error = None
        try:
            saved = self.store.save_manager_review(self.response_id, payload.to_dict())
            self.response = saved if saved is not None else self._merged(payload)
            self.state = ReviewState.COMPLETED if payload.manager_ratings else ReviewState.EDITING
            logger.info(f"Manager review saved for response {self.response_id}")
            return payload
        except AppException as e:
            self.last_error = describe_failure(e)
            logger.warning(f"Saving review for {self.response_id} failed: {e.message}", extra={"code": e.error_code})
            raise
        finally:
            if self.state == ReviewState.SAVING:
                self.state = ReviewState.EDITING

    def _merged(self, payload: ManagerReviewPayload) -> Dict[str, Any]:
        if isinstance(self.response, dict):
            base = dict(self.response)
        else:
            base = {
                name: read_field(self.response, name)
                for name in ("id", "name", "employee_id", "email", "selected_skills",
                             "skill_ratings", "additional_skills", "timestamp")
            }
        base.update(payload.to_dict())
        return base
