from fastapi import APIRouter, Depends
from typing import List

from skillgap.core.schemas import ApiResponse
from skillgap.dependencies import get_survey_service, get_taxonomy
from skillgap.schemas.response import (
    CreatedResponse,
    ManagerReviewSave,
    SurveyResponseCreate,
    SurveyResponseOut,
    SurveyResponseUpdate,
)
from skillgap.schemas.review import (
    NavigationOut,
    ReviewSummaryOut,
    ReviewView,
    SectionOut,
)
from skillgap.services.reconciliation import (
    ReviewNavigator,
    group_sections,
    is_review_completed,
    reconcile,
    summarize,
)
from skillgap.services.survey_service import SurveyResponseService
from skillgap.services.taxonomy import SkillTaxonomy

router = APIRouter(
    prefix="/responses",
    tags=["Responses"]
)

@router.get("", response_model=List[SurveyResponseOut])
def list_responses(service: SurveyResponseService = Depends(get_survey_service)):
    """All submissions, newest first."""
    return service.list_responses()

@router.post("", response_model=CreatedResponse)
def create_response(
    data: SurveyResponseCreate,
    service: SurveyResponseService = Depends(get_survey_service)
):
    response = service.create_response(data)
    return CreatedResponse(id=response.id)

@router.get("/{response_id}", response_model=SurveyResponseOut)
def get_response(response_id: str, service: SurveyResponseService = Depends(get_survey_service)):
    return service.get_response(response_id)

@router.put("/{response_id}", response_model=SurveyResponseOut)
def update_response(
    response_id: str,
    data: SurveyResponseUpdate,
    service: SurveyResponseService = Depends(get_survey_service)
):
    return service.update_response(response_id, data)

@router.delete("/{response_id}", response_model=ApiResponse[dict])
def delete_response(response_id: str, service: SurveyResponseService = Depends(get_survey_service)):
    service.delete_response(response_id)
    return ApiResponse.ok(message="Response deleted successfully")

@router.put("/{response_id}/manager-review", response_model=ApiResponse[SurveyResponseOut])
def save_manager_review(
    response_id: str,
    review: ManagerReviewSave,
    service: SurveyResponseService = Depends(get_survey_service)
):
    """
    Persist a manager review. Overwrites any previous review for the response;
    gaps are recomputed from the ratings.
    """
    response = service.save_manager_review(response_id, review)
    return ApiResponse.ok(
        data=SurveyResponseOut.model_validate(response),
        message="Manager review saved successfully",
    )

@router.get("/{response_id}/review", response_model=ReviewView)
def get_review(
    response_id: str,
    service: SurveyResponseService = Depends(get_survey_service),
    taxonomy: SkillTaxonomy = Depends(get_taxonomy)
):
    """Reconciled review: self vs manager vs expectation per skill, grouped by section."""
    response = service.get_response(response_id)
    reviews = reconcile(response, taxonomy)
    completed = is_review_completed(response)
    navigator = ReviewNavigator.for_reviews(reviews, taxonomy, completed=completed)

    return ReviewView(
        response_id=response.id,
        name=response.name,
        employee_id=response.employee_id,
        review_completed=completed,
        overall_manager_review=response.overall_manager_review,
        sections=[SectionOut.from_group(g) for g in group_sections(reviews, taxonomy)],
        navigation=NavigationOut.from_navigator(navigator),
        summary=ReviewSummaryOut.from_summary(summarize(reviews, response.overall_manager_review)),
    )
