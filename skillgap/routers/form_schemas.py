from fastapi import APIRouter, Depends
from typing import Optional

from skillgap.dependencies import get_form_schema_service
from skillgap.schemas.form_schema import FormSchemaIn, FormSchemaOut
from skillgap.services.form_schema_service import FormSchemaService

router = APIRouter(
    prefix="/schemas",
    tags=["Form Schema"]
)

@router.get("", response_model=Optional[FormSchemaOut])
def get_schema(service: FormSchemaService = Depends(get_form_schema_service)):
    """Latest form schema, or null when none has been saved yet."""
    return service.get_latest()

@router.post("", response_model=FormSchemaOut)
def create_schema(data: FormSchemaIn, service: FormSchemaService = Depends(get_form_schema_service)):
    return service.create_schema(data.fields)

@router.put("/{schema_id}", response_model=FormSchemaOut)
def update_schema(
    schema_id: int,
    data: FormSchemaIn,
    service: FormSchemaService = Depends(get_form_schema_service)
):
    return service.update_schema(schema_id, data.fields)
