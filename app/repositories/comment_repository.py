# app/repositories/comment_repository.py
from datetime import datetime
from typing import List, Optional

from app.models.comment import Comment
from app.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    def search(self, project_name: Optional[str] = None, user_id: Optional[str] = None,
               limit: int = 1000) -> List[Comment]:
        query = self.db.query(Comment)
        if project_name:
            query = query.filter(Comment.project_name == project_name)
        if user_id:
            query = query.filter(Comment.user_id == user_id)
        return query.order_by(Comment.created_at.desc()).limit(limit).all()

    def count_since(self, user_id: str, since: datetime) -> int:
        return self.db.query(Comment).filter(Comment.user_id == user_id, Comment.created_at >= since).count()

    def has_duplicate(self, user_id: str, project_name: str, text: str, since: datetime) -> bool:
        return self.db.query(Comment).filter(
            Comment.user_id == user_id,
            Comment.project_name == project_name,
            Comment.text == text,
            Comment.created_at >= since,
        ).first() is not None

    def delete_with_replies(self, comment: Comment) -> None:
        self.db.query(Comment).filter(Comment.parent_id == comment.id).delete(synchronize_session=False)
        self.db.delete(comment)
        self.db.commit()
