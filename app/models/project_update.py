# app/models/project_update.py
from sqlalchemy import Column, String, Text, DateTime, func

from app.core.database import Base


UPDATE_STATUSES = ('pending', 'in_progress', 'completed', 'failed')


class ProjectUpdate(Base):
    """每个项目一行的刷新记录，以 project_name 为 upsert 键"""
    __tablename__ = "project_updates"

    project_name = Column(String(255), primary_key=True)
    status = Column(String(20), default='pending', index=True)  # 'pending', 'in_progress', 'completed', 'failed'
    last_attempted = Column(DateTime(timezone=True), nullable=True)
    last_successful = Column(DateTime(timezone=True), nullable=True)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
