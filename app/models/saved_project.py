# app/models/saved_project.py
from sqlalchemy import Column, String, UniqueConstraint

from app.models.base import BaseModel


class SavedProject(BaseModel):
    __tablename__ = "saved_projects"
    __table_args__ = (
        UniqueConstraint('user_id', 'project_name', name='uq_saved_projects_user_project'),
    )

    user_id = Column(String(100), nullable=False, index=True)
    project_name = Column(String(255), nullable=False)
