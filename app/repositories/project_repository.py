# app/repositories/project_repository.py
from datetime import datetime
from typing import Optional, List

from sqlalchemy import or_

from app.models.project import Project
from app.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    def get_by_name(self, name: str) -> Optional[Project]:
        return self.db.query(Project).filter(Project.name == name).first()

    def list_filtered(self, skip: int = 0, limit: int = 100, tag: Optional[str] = None) -> List[Project]:
        projects = self.db.query(Project).order_by(Project.name).all()
        if tag:
            # tags 存为 JSON 列表，跨方言过滤放在 Python 侧
            projects = [p for p in projects if tag in (p.tags or [])]
        return projects[skip:skip + limit]

    def _stale_filter(self, cutoff: datetime):
        return or_(Project.last_updated.is_(None), Project.last_updated < cutoff)

    def get_stale(self, cutoff: datetime, limit: int) -> List[Project]:
        """从未刷新或早于 cutoff 刷新的项目，最旧优先（NULL 最前）"""
        return (
            self.db.query(Project)
            .filter(self._stale_filter(cutoff))
            .order_by(Project.last_updated.asc().nulls_first(), Project.name)
            .limit(limit)
            .all()
        )

    def count_stale(self, cutoff: datetime) -> int:
        return self.db.query(Project).filter(self._stale_filter(cutoff)).count()

    def apply_refresh(self, name: str, fields: dict) -> Optional[Project]:
        project = self.get_by_name(name)
        if project:
            for field, value in fields.items():
                setattr(project, field, value)
            self.db.commit()
            self.db.refresh(project)
        return project
