from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

FieldType = Literal["text", "number", "single-select", "multi-select"]


class FieldDefinition(BaseModel):
    id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    type: FieldType
    options: Optional[List[str]] = None
    required: bool = False

class FormSchemaIn(BaseModel):
    # "schema" is the key the form builder posts; "fields" is accepted too.
    model_config = ConfigDict(populate_by_name=True)

    fields: List[FieldDefinition] = Field(default_factory=list, alias="schema")

class FormSchemaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fields: List[FieldDefinition]
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
