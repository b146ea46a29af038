# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import survey_response, form_schema

# Explicit class exports for cleaner imports
from .survey_response import SurveyResponse
from .form_schema import FormSchema

__all__ = [
    "SurveyResponse",
    "FormSchema",
]
