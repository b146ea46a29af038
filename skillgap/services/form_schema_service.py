import time
from typing import List, Optional

from skillgap.core.exceptions import InvalidSchemaError, NotFoundError
from skillgap.models.form_schema import FormSchema
from skillgap.schemas.form_schema import FieldDefinition
from skillgap.services.base import BaseService

SELECT_TYPES = {"single-select", "multi-select"}


def _now_millis() -> int:
    return int(time.time() * 1000)


class FormSchemaService(BaseService):
    """
    Versioned intake form definition. Only the latest version is ever read;
    concurrent edits are resolved by last writer wins.
    """

    def get_latest(self) -> Optional[FormSchema]:
        return self.db.query(FormSchema).order_by(FormSchema.version.desc()).first()

    def _next_version(self) -> int:
        latest = self.get_latest()
        now = _now_millis()
        # Clock skew or two saves in the same millisecond must still move forward.
        if latest is not None and latest.version >= now:
            return latest.version + 1
        return now

    def _validate(self, fields: List[FieldDefinition]):
        seen = set()
        for field in fields:
            if field.id in seen:
                raise InvalidSchemaError(f"Duplicate field id: {field.id}")
            seen.add(field.id)
            if field.type in SELECT_TYPES and not field.options:
                raise InvalidSchemaError(f"Field '{field.id}' of type {field.type} needs at least one option")

    def create_schema(self, fields: List[FieldDefinition]) -> FormSchema:
        self._validate(fields)
        schema = FormSchema(
            fields=[f.model_dump() for f in fields],
            version=self._next_version(),
        )
        self.db.add(schema)
        self.commit("create form schema")
        self.db.refresh(schema)
        self._logger.info(f"Created form schema {schema.id} (version {schema.version})")
        return schema

    def update_schema(self, schema_id: int, fields: List[FieldDefinition]) -> FormSchema:
        schema = self.db.query(FormSchema).filter(FormSchema.id == schema_id).first()
        if schema is None:
            raise NotFoundError("Schema not found")
        self._validate(fields)

        schema.fields = [f.model_dump() for f in fields]
        schema.version = self._next_version()
        self.commit("update form schema")
        self.db.refresh(schema)
        self._logger.info(f"Updated form schema {schema.id} (version {schema.version})")
        return schema
