"""
Survey Response Service Layer

Data-access boundary for employee responses. Routers stay thin; every
validation rule that protects stored state lives here:

- intake: required fields, corporate email domain, rating bounds, duplicates
- manager review: rating / expectation bounds, every skill must be under
  review and listed once, client-sent gaps must agree with the ratings
- employee edits: a stored review is narrowed to the remaining skills and
  its gaps recomputed

A review save is applied as one commit; any failure leaves the stored
record untouched.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillgap.core.config import settings
from skillgap.core.exceptions import (
    DuplicateResponseError,
    ExpectationOutOfRangeError,
    GapInconsistentError,
    InvalidEmailError,
    MissingFieldError,
    NotFoundError,
    RatingOutOfRangeError,
    SkillNotSelectedError,
    ValidationError,
)
from skillgap.models.survey_response import SurveyResponse
from skillgap.schemas.response import ManagerReviewSave, SurveyResponseCreate, SurveyResponseUpdate
from skillgap.services.base import BaseService
from skillgap.services.reconciliation import (
    MAX_RATING,
    MIN_RATING,
    index_entries,
    skills_to_review,
)


def _in_range(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING


def _as_dicts(items: Iterable[Any]) -> List[Dict[str, Any]]:
    return [i.model_dump() if hasattr(i, "model_dump") else dict(i) for i in items]


def _ensure_once(skill: str, seen: set, what: str = "rated"):
    if skill in seen:
        raise ValidationError(
            f"Skill '{skill}' is {what} more than once",
            error_code="DUPLICATE_SKILL_RATING",
            details={"skill": skill},
        )
    seen.add(skill)


def _compute_gaps(manager_ratings: Dict[str, int], self_ratings: Dict[str, Any]) -> Dict[str, int]:
    """manager - self per manager-rated skill; a missing self-rating counts as 0."""
    return {skill: rating - (self_ratings.get(skill) or 0) for skill, rating in manager_ratings.items()}


class SurveyResponseService(BaseService):

    def __init__(self, db: Session, email_domain: Optional[str] = None):
        super().__init__(db)
        self.email_domain = settings.corporate_email_domain if email_domain is None else email_domain

    # --- Reads ---

    def list_responses(self) -> List[SurveyResponse]:
        return self.db.query(SurveyResponse).order_by(SurveyResponse.timestamp.desc()).all()

    def get_response_by_id(self, response_id: str) -> Optional[SurveyResponse]:
        return self.db.query(SurveyResponse).filter(SurveyResponse.id == response_id).first()

    def get_response(self, response_id: str) -> SurveyResponse:
        response = self.get_response_by_id(response_id)
        if response is None:
            raise NotFoundError("Response not found")
        return response

    # --- Intake ---

    def _validate_identity(self, name: str, employee_id: str, email: str):
        for field_name, value in (("name", name), ("employee_id", employee_id), ("email", email)):
            if not (value or "").strip():
                raise MissingFieldError(field_name)
        if self.email_domain and self.email_domain.lower() not in email.lower():
            raise InvalidEmailError(email, self.email_domain)

    def _validate_self_ratings(self, skill_ratings: List[Dict[str, Any]]):
        seen = set()
        for entry in skill_ratings:
            if not (entry["skill"] or "").strip():
                raise MissingFieldError("skill")
            if not _in_range(entry["rating"]):
                raise RatingOutOfRangeError(entry["skill"], entry["rating"])
            _ensure_once(entry["skill"], seen)

    def _ensure_unique(self, employee_id: str, email: str, exclude_id: Optional[str] = None):
        query = self.db.query(SurveyResponse).filter(
            or_(SurveyResponse.employee_id == employee_id, SurveyResponse.email == email)
        )
        if exclude_id:
            query = query.filter(SurveyResponse.id != exclude_id)
        existing = query.first()
        if existing:
            self.log_warning(f"Duplicate submission rejected (matches response {existing.id})")
            raise DuplicateResponseError()

    def create_response(self, data: SurveyResponseCreate) -> SurveyResponse:
        self._validate_identity(data.name, data.employee_id, data.email)
        skill_ratings = _as_dicts(data.skill_ratings)
        self._validate_self_ratings(skill_ratings)
        self._ensure_unique(data.employee_id.strip(), data.email.strip())

        response = SurveyResponse(
            name=data.name.strip(),
            employee_id=data.employee_id.strip(),
            email=data.email.strip(),
            selected_skills=list(dict.fromkeys(data.selected_skills)),
            skill_ratings=skill_ratings,
            additional_skills=data.additional_skills or "",
        )
        self.db.add(response)
        self.commit("create response")
        self.db.refresh(response)

        self._logger.info(
            f"Created response {response.id} for employee {response.employee_id}",
            extra={"skills": len(response.selected_skills)},
        )
        return response

    def update_response(self, response_id: str, data: SurveyResponseUpdate) -> SurveyResponse:
        """
        Overwrite the employee-owned fields. A stored manager review is kept,
        narrowed to the skills still under review, with gaps recomputed.
        """
        response = self.get_response(response_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        name = changes.get("name", response.name)
        employee_id = changes.get("employee_id", response.employee_id)
        email = changes.get("email", response.email)
        self._validate_identity(name, employee_id, email)
        if "skill_ratings" in changes:
            self._validate_self_ratings(changes["skill_ratings"])
        if "employee_id" in changes or "email" in changes:
            self._ensure_unique(employee_id.strip(), email.strip(), exclude_id=response.id)

        response.name = name.strip()
        response.employee_id = employee_id.strip()
        response.email = email.strip()
        if "selected_skills" in changes:
            response.selected_skills = list(dict.fromkeys(changes["selected_skills"]))
        if "skill_ratings" in changes:
            response.skill_ratings = changes["skill_ratings"]
        if "additional_skills" in changes:
            response.additional_skills = changes["additional_skills"]
        if "selected_skills" in changes or "skill_ratings" in changes:
            self._realign_review(response)

        self.commit("update response")
        self.db.refresh(response)
        self._logger.info(f"Updated response {response.id}", extra={"fields": sorted(changes)})
        return response

    def _realign_review(self, response: SurveyResponse):
        reviewable = set(skills_to_review(response))
        manager_ratings = [e for e in response.manager_ratings or [] if e.get("skill") in reviewable]
        expectations = [e for e in response.company_expectations or [] if e.get("skill") in reviewable]

        dropped = len(response.manager_ratings or []) - len(manager_ratings)
        if dropped:
            self.log_warning(f"Dropped {dropped} manager rating(s) for skills no longer under review on {response.id}")

        gaps = _compute_gaps(
            index_entries(manager_ratings, "rating"),
            index_entries(response.skill_ratings, "rating"),
        )
        response.manager_ratings = manager_ratings
        response.company_expectations = expectations
        response.rating_gaps = [{"skill": skill, "gap": gap} for skill, gap in gaps.items()]

    def delete_response(self, response_id: str) -> None:
        response = self.get_response(response_id)
        self.db.delete(response)
        self.commit("delete response")
        self._logger.info(f"Deleted response {response_id}")

    # --- Manager review ---

    def validate_manager_review(self, response: SurveyResponse, review: ManagerReviewSave) -> List[Dict[str, Any]]:
        """
        Check a review against the stored self-assessment and return the gap
        list to persist, recomputed from the ratings.
        """
        reviewable = set(skills_to_review(response))
        self_ratings = index_entries(response.skill_ratings, "rating")

        manager_ratings: Dict[str, int] = {}
        seen_ratings: set = set()
        for entry in review.manager_ratings:
            if not _in_range(entry.rating):
                raise RatingOutOfRangeError(entry.skill, entry.rating)
            if entry.skill not in reviewable:
                raise SkillNotSelectedError(entry.skill)
            _ensure_once(entry.skill, seen_ratings)
            manager_ratings[entry.skill] = entry.rating

        seen_expectations: set = set()
        for entry in review.company_expectations:
            if not _in_range(entry.expectation):
                raise ExpectationOutOfRangeError(entry.skill, entry.expectation)
            if entry.skill not in reviewable:
                raise SkillNotSelectedError(entry.skill)
            _ensure_once(entry.skill, seen_expectations, "given an expectation")

        gaps = _compute_gaps(manager_ratings, self_ratings)
        seen_gaps: set = set()
        for entry in review.rating_gaps:
            _ensure_once(entry.skill, seen_gaps, "given a gap")
            expected = gaps.get(entry.skill)
            if expected is None or entry.gap != expected:
                raise GapInconsistentError(entry.skill, entry.gap, expected)

        return [{"skill": skill, "gap": gap} for skill, gap in gaps.items()]

    def save_manager_review(self, response_id: str, review: Union[ManagerReviewSave, Dict[str, Any]]) -> SurveyResponse:
        if not isinstance(review, ManagerReviewSave):
            review = ManagerReviewSave.model_validate(review)
        response = self.get_response(response_id)
        rating_gaps = self.validate_manager_review(response, review)

        # Whole-field overwrite: a re-opened review replaces the previous one.
        response.manager_ratings = _as_dicts(review.manager_ratings)
        response.company_expectations = _as_dicts(review.company_expectations)
        response.rating_gaps = rating_gaps
        response.overall_manager_review = review.overall_manager_review or ""
        response.manager_review_timestamp = datetime.now(timezone.utc)

        self.commit("save manager review")
        self.db.refresh(response)

        self._logger.info(
            f"Saved manager review for response {response.id}",
            extra={"rated": len(response.manager_ratings), "expectations": len(response.company_expectations)},
        )
        return response
