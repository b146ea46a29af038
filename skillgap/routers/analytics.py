from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from skillgap.dependencies import get_survey_service, get_taxonomy
from skillgap.schemas.analytics import SectionBreakdownOut, SectionStatOut, SkillStatOut
from skillgap.services.analytics import aggregate_skills, overall_average, section_breakdown, top_skills
from skillgap.services.survey_service import SurveyResponseService
from skillgap.services.taxonomy import SkillTaxonomy

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"]
)

@router.get("/skills", response_model=List[SkillStatOut])
def skill_stats(
    top: Optional[int] = Query(None, ge=1),
    service: SurveyResponseService = Depends(get_survey_service)
):
    """Per-skill selection count and average self-rating, most selected first."""
    stats = aggregate_skills(service.list_responses())
    if top is not None:
        stats = top_skills(stats, top)
    return [SkillStatOut(skill=s.skill, count=s.count, average_rating=s.average_rating) for s in stats]

@router.get("/sections", response_model=SectionBreakdownOut)
def section_stats(
    service: SurveyResponseService = Depends(get_survey_service),
    taxonomy: SkillTaxonomy = Depends(get_taxonomy)
):
    responses = service.list_responses()
    stats = aggregate_skills(responses)
    return SectionBreakdownOut(
        total_responses=len(responses),
        overall_average=overall_average(stats),
        sections=[
            SectionStatOut(key=s.key, title=s.title, count=s.count, distinct_skills=s.distinct_skills)
            for s in section_breakdown(stats, taxonomy)
        ],
    )
