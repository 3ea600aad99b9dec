# app/schemas/saved_project_schemas.py
from typing import Optional

from pydantic import Field, field_validator

from app.core.sanitization import sanitize_input
from app.schemas.base import PROJECT_NAME_PATTERN, CamelSchema


class SavedProjectCreate(CamelSchema):
    user_id: str = Field(..., min_length=5, max_length=100)
    project_name: str = Field(..., min_length=1, max_length=100, pattern=PROJECT_NAME_PATTERN)

    @field_validator('user_id', 'project_name', mode='before')
    @classmethod
    def _clean_text(cls, v):
        return sanitize_input(v)


class SavedProjectResult(CamelSchema):
    success: bool = True
    message: Optional[str] = None
