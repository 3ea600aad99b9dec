# app/repositories/saved_project_repository.py
from typing import List, Optional

from app.models.saved_project import SavedProject
from app.repositories.base import BaseRepository


class SavedProjectRepository(BaseRepository[SavedProject]):
    def list_names(self, user_id: str) -> List[str]:
        rows = (
            self.db.query(SavedProject.project_name)
            .filter(SavedProject.user_id == user_id)
            .order_by(SavedProject.id)
            .all()
        )
        return [row.project_name for row in rows]

    def get_for(self, user_id: str, project_name: str) -> Optional[SavedProject]:
        return self.db.query(SavedProject).filter(
            SavedProject.user_id == user_id, SavedProject.project_name == project_name
        ).first()

    def delete_for(self, user_id: str, project_name: str) -> int:
        deleted = self.db.query(SavedProject).filter(
            SavedProject.user_id == user_id, SavedProject.project_name == project_name
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted
