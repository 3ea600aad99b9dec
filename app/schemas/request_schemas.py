# app/schemas/request_schemas.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from app.core.sanitization import is_github_url, sanitize_input
from app.schemas.base import CamelSchema


class ProjectRequestCreate(CamelSchema):
    """用户提交的项目推荐"""
    title: str = Field(..., min_length=1, max_length=100)
    github_link: str
    description: Optional[str] = Field(None, max_length=2000)
    reason: Optional[str] = Field(None, max_length=2000)
    user_id: str = Field(..., min_length=1)

    @field_validator('title', 'description', 'reason', 'user_id', mode='before')
    @classmethod
    def _clean_text(cls, v):
        if v is None:
            return None
        return sanitize_input(v)

    @field_validator('github_link')
    @classmethod
    def _check_link(cls, v: str) -> str:
        v = v.strip()
        if not is_github_url(v):
            raise ValueError('githubLink must start with https://github.com/')
        return v


class ProjectRequestReview(CamelSchema):
    """管理员审核"""
    status: Literal['pending', 'accepted', 'declined']
    admin_notes: Optional[str] = None
    admin_id: Optional[str] = None

    @field_validator('admin_notes', 'admin_id', mode='before')
    @classmethod
    def _clean_text(cls, v):
        if v is None:
            return None
        return sanitize_input(v)


class ProjectRequestResponse(CamelSchema):
    id: str
    user_id: str
    title: str
    github_link: str
    description: Optional[str] = None
    reason: Optional[str] = None
    status: str
    admin_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
