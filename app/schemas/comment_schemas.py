# app/schemas/comment_schemas.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from app.core.sanitization import sanitize_input
from app.schemas.base import PROJECT_NAME_PATTERN, CamelSchema


class CommentCreate(CamelSchema):
    project_name: str = Field(..., min_length=1, max_length=100, pattern=PROJECT_NAME_PATTERN)
    user_id: str = Field(..., min_length=5, max_length=50)
    text: str = Field(..., min_length=1, max_length=2000)
    parent_id: Optional[str] = None

    @field_validator('project_name', 'user_id', 'text', 'parent_id', mode='before')
    @classmethod
    def _clean_text(cls, v):
        if v is None:
            return None
        return sanitize_input(v)

    @field_validator('parent_id')
    @classmethod
    def _empty_parent(cls, v):
        return v or None


class CommentAction(CamelSchema):
    """PUT：like / unlike 任何人可操作，edit 仅作者"""
    user_id: str = Field(..., min_length=5, max_length=50)
    action: Literal['like', 'unlike', 'edit']
    text: Optional[str] = Field(None, max_length=2000)

    @field_validator('user_id', 'text', mode='before')
    @classmethod
    def _clean_text(cls, v):
        if v is None:
            return None
        return sanitize_input(v)

    @model_validator(mode='after')
    def _edit_needs_text(self):
        if self.action == 'edit' and not self.text:
            raise ValueError('Valid comment text is required for edit action')
        return self


class CommentResponse(CamelSchema):
    id: str
    project_name: str
    user_id: str
    text: str
    parent_id: Optional[str] = None
    likes: List[str] = Field(default_factory=list)
    edited: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('likes', mode='before')
    @classmethod
    def _null_likes(cls, v):
        return v or []

    @field_validator('edited', mode='before')
    @classmethod
    def _null_edited(cls, v):
        return bool(v)
