import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, JSON
from skillgap.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SurveyResponse(Base):
    """
    One employee self-assessment, later completed by a manager review.
    Rating lists are stored as JSON documents: [{"skill": ..., "rating": ...}].
    """
    __tablename__ = "employee_responses"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    employee_id = Column(String, nullable=False, index=True)
    email = Column(String, nullable=False, index=True)

    selected_skills = Column(JSON, nullable=False, default=list)
    skill_ratings = Column(JSON, nullable=False, default=list)
    additional_skills = Column(Text, nullable=False, default="")
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    # Manager review (empty until a review is saved)
    manager_ratings = Column(JSON, nullable=False, default=list)
    company_expectations = Column(JSON, nullable=False, default=list)
    rating_gaps = Column(JSON, nullable=False, default=list)
    overall_manager_review = Column(Text, nullable=True)
    manager_review_timestamp = Column(DateTime(timezone=True), nullable=True)

    @property
    def review_completed(self) -> bool:
        return bool(self.manager_ratings)

    def __repr__(self):
        return f"<SurveyResponse {self.id}: {self.employee_id}>"
