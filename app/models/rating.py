# app/models/rating.py
from sqlalchemy import Column, String, Text, Integer, UniqueConstraint

from app.models.base import BaseModel


class Rating(BaseModel):
    """每个用户对每个项目只保留一条评分，重复提交即覆盖"""
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint('project_name', 'user_id', name='uq_ratings_project_user'),
    )

    project_name = Column(String(255), nullable=False, index=True)
    user_id = Column(String(100), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5
    review = Column(Text, nullable=True)
