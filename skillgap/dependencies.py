"""
Shared FastAPI dependencies.

The taxonomy is resolved through get_taxonomy so tests (or a future
per-tenant setup) can swap it with app.dependency_overrides.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from skillgap.core.config import settings
from skillgap.database import get_db
from skillgap.services.form_schema_service import FormSchemaService
from skillgap.services.survey_service import SurveyResponseService
from skillgap.services.taxonomy import SkillTaxonomy, load_taxonomy


@lru_cache(maxsize=1)
def _configured_taxonomy() -> SkillTaxonomy:
    return load_taxonomy(settings.taxonomy_file)


def get_taxonomy() -> SkillTaxonomy:
    return _configured_taxonomy()


def get_survey_service(db: Session = Depends(get_db)) -> SurveyResponseService:
    return SurveyResponseService(db)


def get_form_schema_service(db: Session = Depends(get_db)) -> FormSchemaService:
    return FormSchemaService(db)
