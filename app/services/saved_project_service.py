# app/services/saved_project_service.py
from typing import List

from sqlalchemy.exc import IntegrityError

from app.models.project import Project
from app.models.saved_project import SavedProject
from app.repositories.project_repository import ProjectRepository
from app.repositories.saved_project_repository import SavedProjectRepository


class SavedProjectService:
    def __init__(self, db):
        self.db = db
        self.repo = SavedProjectRepository(SavedProject, db)
        self.project_repo = ProjectRepository(Project, db)

    def list_saved(self, user_id: str) -> List[str]:
        return self.repo.list_names(user_id)

    def save(self, user_id: str, project_name: str) -> bool:
        """返回 False 表示此前已收藏"""
        if not self.project_repo.get_by_name(project_name):
            raise RuntimeError('project_not_found')
        if self.repo.get_for(user_id, project_name):
            return False
        try:
            self.repo.create({'user_id': user_id, 'project_name': project_name})
        except IntegrityError:
            # 并发收藏撞上唯一约束
            self.db.rollback()
            return False
        return True

    def remove(self, user_id: str, project_name: str) -> None:
        self.repo.delete_for(user_id, project_name)
