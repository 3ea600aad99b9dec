# app/repositories/rating_repository.py
from typing import List, Optional, Tuple

from sqlalchemy import func

from app.models.rating import Rating
from app.repositories.base import BaseRepository


class RatingRepository(BaseRepository[Rating]):
    def get_for(self, project_name: str, user_id: str) -> Optional[Rating]:
        return self.db.query(Rating).filter(
            Rating.project_name == project_name, Rating.user_id == user_id
        ).first()

    def list_for_project(self, project_name: str) -> List[Rating]:
        return (
            self.db.query(Rating)
            .filter(Rating.project_name == project_name)
            .order_by(Rating.id.desc())
            .all()
        )

    def summary(self, project_name: str) -> Tuple[Optional[float], int]:
        """(平均分, 评分数)；没有评分时平均分为 None"""
        average, count = (
            self.db.query(func.avg(Rating.rating), func.count(Rating.id))
            .filter(Rating.project_name == project_name)
            .one()
        )
        return (float(average) if average is not None else None), count

    def upsert(self, project_name: str, user_id: str, fields: dict) -> Rating:
        rating = self.get_for(project_name, user_id)
        if rating is None:
            return self.create({'project_name': project_name, 'user_id': user_id, **fields})
        return self.update(rating.id, fields)

    def delete_for(self, project_name: str, user_id: str) -> bool:
        rating = self.get_for(project_name, user_id)
        if rating is None:
            return False
        self.db.delete(rating)
        self.db.commit()
        return True
