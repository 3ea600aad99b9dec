# app/services/rating_service.py
from typing import Dict

from app.models.project import Project
from app.models.rating import Rating
from app.repositories.project_repository import ProjectRepository
from app.repositories.rating_repository import RatingRepository


class RatingService:
    def __init__(self, db):
        self.repo = RatingRepository(Rating, db)
        self.project_repo = ProjectRepository(Project, db)

    def rate(self, data: dict) -> Rating:
        """同一用户再次评分时覆盖旧评分"""
        if not self.project_repo.get_by_name(data['project_name']):
            raise RuntimeError('project_not_found')
        return self.repo.upsert(data['project_name'], data['user_id'], {
            'rating': data['rating'],
            'review': data.get('review'),
        })

    def summary(self, project_name: str) -> Dict:
        average, count = self.repo.summary(project_name)
        return {
            'project_name': project_name,
            'average': round(average, 2) if average is not None else None,
            'count': count,
            'ratings': self.repo.list_for_project(project_name),
        }

    def remove(self, project_name: str, user_id: str) -> None:
        if not self.repo.delete_for(project_name, user_id):
            raise RuntimeError('rating_not_found')
