# app/models/project_request.py
from sqlalchemy import Column, String, Text, DateTime, func

from app.core.database import Base


REQUEST_STATUSES = ('pending', 'accepted', 'declined')


class ProjectRequest(Base):
    __tablename__ = "project_requests"

    id = Column(String(36), primary_key=True)  # uuid4
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    github_link = Column(String(500), nullable=False)
    description = Column(Text)
    reason = Column(Text)
    status = Column(String(20), default='pending', index=True)  # 'pending', 'accepted', 'declined'
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
