# app/models/comment.py
from sqlalchemy import Column, String, Text, JSON, Boolean, DateTime, func

from app.core.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True)  # uuid4
    project_name = Column(String(255), nullable=False, index=True)
    user_id = Column(String(100), nullable=False, index=True)
    text = Column(Text, nullable=False)
    # 回复指向父评论；删除父评论时一并删除
    parent_id = Column(String(36), nullable=True, index=True)
    likes = Column(JSON, default=list)  # 点赞的 user_id 列表
    edited = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
