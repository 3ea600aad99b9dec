# app/repositories/project_request_repository.py
from typing import List, Optional

from app.models.project_request import ProjectRequest
from app.repositories.base import BaseRepository


class ProjectRequestRepository(BaseRepository[ProjectRequest]):
    def search(self, user_id: Optional[str] = None, status: Optional[str] = None) -> List[ProjectRequest]:
        query = self.db.query(ProjectRequest)
        if user_id:
            query = query.filter(ProjectRequest.user_id == user_id)
        if status:
            query = query.filter(ProjectRequest.status == status)
        return query.order_by(ProjectRequest.created_at.desc()).all()
