# app/services/project_service.py
from typing import List, Optional

from app.models.project import Project
from app.repositories.project_repository import ProjectRepository


class ProjectService:
    def __init__(self, db):
        self.project_repo = ProjectRepository(Project, db)

    def list_projects(self, skip: int = 0, limit: int = 100, tag: Optional[str] = None) -> List[Project]:
        return self.project_repo.list_filtered(skip=skip, limit=limit, tag=tag)

    def get_project(self, name: str) -> Optional[Project]:
        return self.project_repo.get_by_name(name)

    def create_project(self, project_data: dict) -> Project:
        """创建新项目；同名项目已存在时抛出 project_exists"""
        if self.project_repo.get_by_name(project_data['name']):
            raise RuntimeError('project_exists')
        return self.project_repo.create(project_data)

    def update_project(self, name: str, changes: dict) -> Project:
        """管理员编辑；未提供的字段保持不变"""
        project = self.project_repo.get_by_name(name)
        if not project:
            raise RuntimeError('project_not_found')
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return project
        return self.project_repo.update(project.id, changes)
