# app/schemas/rating_schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.core.sanitization import sanitize_input
from app.schemas.base import PROJECT_NAME_PATTERN, CamelSchema


class RatingCreate(CamelSchema):
    project_name: str = Field(..., min_length=1, max_length=100, pattern=PROJECT_NAME_PATTERN)
    user_id: str = Field(..., min_length=5, max_length=100)
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=2000)

    @field_validator('project_name', 'user_id', mode='before')
    @classmethod
    def _clean_text(cls, v):
        return sanitize_input(v)

    @field_validator('review', mode='before')
    @classmethod
    def _clean_review(cls, v):
        if v is None:
            return None
        return sanitize_input(v) or None


class RatingResponse(CamelSchema):
    id: int
    project_name: str
    user_id: str
    rating: int
    review: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RatingSummary(CamelSchema):
    project_name: str
    average: Optional[float] = None
    count: int = 0
    ratings: List[RatingResponse] = Field(default_factory=list)
