# app/repositories/project_update_repository.py
from typing import Dict

from sqlalchemy import func

from app.models.project_update import ProjectUpdate, UPDATE_STATUSES
from app.repositories.base import BaseRepository


class ProjectUpdateRepository(BaseRepository[ProjectUpdate]):
    def upsert(self, project_name: str, fields: dict) -> ProjectUpdate:
        """按 project_name 插入或覆盖刷新记录"""
        record = self.get(project_name)
        if record is None:
            record = ProjectUpdate(project_name=project_name)
            self.db.add(record)
        for field, value in fields.items():
            setattr(record, field, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def count_by_status(self) -> Dict[str, int]:
        counts = {s: 0 for s in UPDATE_STATUSES}
        total = 0
        rows = self.db.query(ProjectUpdate.status, func.count()).group_by(ProjectUpdate.status).all()
        for status, count in rows:
            total += count
            if status in counts:
                counts[status] = count
        counts['total'] = total
        return counts
