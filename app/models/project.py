# app/models/project.py
from sqlalchemy import Column, String, Text, JSON, Integer, DateTime, UniqueConstraint

from app.models.base import BaseModel


class Project(BaseModel):
    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint('name', name='uq_projects_name'),
    )

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, default="")
    url = Column(String(500))
    stars = Column(Integer, default=0)
    forks = Column(Integer, default=0)
    tags = Column(JSON, default=list)       # ["cli", "rust", ...]
    languages = Column(JSON, default=dict)  # {"Python": 12345, ...} 字节数

    # NULL 表示从未从 GitHub 刷新过
    last_updated = Column(DateTime(timezone=True), nullable=True, index=True)
