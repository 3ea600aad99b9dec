# app/schemas/project_schemas.py
from datetime import datetime
from typing import Optional, Dict, List
from pydantic import Field, field_validator

from app.core.sanitization import sanitize_input, sanitize_tags, sanitize_url
from app.schemas.base import CamelSchema


class ProjectBase(CamelSchema):
    """项目基础模式"""
    name: str = Field(..., min_length=1, max_length=255, description="项目名称")
    description: str = Field(..., min_length=1, description="项目描述")
    url: str = Field(..., description="GitHub 仓库URL")
    stars: int = Field(0, ge=0)
    forks: int = Field(0, ge=0)
    tags: List[str] = Field(default_factory=list)
    languages: Dict[str, int] = Field(default_factory=dict, description="语言 -> 字节数")


class ProjectCreate(ProjectBase):
    """创建项目请求模式"""

    @field_validator('name', 'description', mode='before')
    @classmethod
    def _clean_text(cls, v):
        return sanitize_input(v)

    @field_validator('url', mode='before')
    @classmethod
    def _clean_url(cls, v):
        cleaned = sanitize_url(v)
        if cleaned is None:
            raise ValueError('url must be an http(s) URL')
        return cleaned

    @field_validator('tags', mode='before')
    @classmethod
    def _clean_tags(cls, v):
        return sanitize_tags(v) if isinstance(v, list) else []


class ProjectUpdate(CamelSchema):
    """更新项目请求模式；名称不可修改"""
    description: Optional[str] = None
    url: Optional[str] = None
    stars: Optional[int] = Field(None, ge=0)
    forks: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    languages: Optional[Dict[str, int]] = None

    @field_validator('description', mode='before')
    @classmethod
    def _clean_description(cls, v):
        if v is None:
            return None
        return sanitize_input(v) or None

    @field_validator('url', mode='before')
    @classmethod
    def _clean_url(cls, v):
        if v is None:
            return None
        cleaned = sanitize_url(v)
        if cleaned is None:
            raise ValueError('url must be an http(s) URL')
        return cleaned

    @field_validator('tags', mode='before')
    @classmethod
    def _clean_tags(cls, v):
        if v is None:
            return None
        return sanitize_tags(v) if isinstance(v, list) else []


class ProjectResponse(ProjectBase):
    """项目响应模式（返回 camelCase 别名）"""
    id: int
    description: Optional[str] = None
    url: Optional[str] = None
    stars: Optional[int] = 0
    forks: Optional[int] = 0
    tags: Optional[List[str]] = None
    languages: Optional[Dict[str, int]] = None
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
