from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelInput(BaseModel):
    """Request bodies accept snake_case names and the camelCase names the web form sends."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Bounds are checked by the service layer so each violation maps to a distinct error code.
class SkillRating(BaseModel):
    skill: str
    rating: int

class CompanyExpectation(BaseModel):
    skill: str
    expectation: int

class RatingGap(BaseModel):
    skill: str
    gap: int


class SurveyResponseCreate(CamelInput):
    name: str = ""
    employee_id: str = ""
    email: str = ""
    selected_skills: List[str] = Field(default_factory=list)
    skill_ratings: List[SkillRating] = Field(default_factory=list)
    additional_skills: Optional[str] = ""

class SurveyResponseUpdate(CamelInput):
    name: Optional[str] = None
    employee_id: Optional[str] = None
    email: Optional[str] = None
    selected_skills: Optional[List[str]] = None
    skill_ratings: Optional[List[SkillRating]] = None
    additional_skills: Optional[str] = None

class ManagerReviewSave(CamelInput):
    manager_ratings: List[SkillRating] = Field(default_factory=list)
    company_expectations: List[CompanyExpectation] = Field(default_factory=list)
    rating_gaps: List[RatingGap] = Field(default_factory=list)
    overall_manager_review: Optional[str] = ""


class SurveyResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    employee_id: str
    email: str
    selected_skills: List[str] = []
    skill_ratings: List[SkillRating] = []
    additional_skills: Optional[str] = ""
    timestamp: Optional[datetime] = None
    manager_ratings: List[SkillRating] = []
    company_expectations: List[CompanyExpectation] = []
    rating_gaps: List[RatingGap] = []
    overall_manager_review: Optional[str] = None
    manager_review_timestamp: Optional[datetime] = None
    review_completed: bool = False

class CreatedResponse(BaseModel):
    id: str
    message: str = "Response created successfully"
