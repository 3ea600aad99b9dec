# app/services/comment_service.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from app.models.comment import Comment
from app.repositories.comment_repository import CommentRepository

# 防刷：5 分钟内最多 10 条；1 分钟内同一项目不可重复同样内容
RECENT_WINDOW = timedelta(minutes=5)
MAX_RECENT_COMMENTS = 10
DUPLICATE_WINDOW = timedelta(minutes=1)


class CommentService:
    """项目评论与回复。错误以 RuntimeError('code') 抛出，由路由层映射为 HTTP 状态码"""

    def __init__(self, db):
        self.repo = CommentRepository(Comment, db)

    def list_comments(self, project_name: Optional[str] = None, user_id: Optional[str] = None) -> List[Comment]:
        return self.repo.search(project_name=project_name, user_id=user_id)

    def create(self, data: dict) -> Comment:
        now = datetime.now(timezone.utc)
        if data.get('parent_id') and not self.repo.get(data['parent_id']):
            raise RuntimeError('parent_not_found')
        if self.repo.count_since(data['user_id'], now - RECENT_WINDOW) >= MAX_RECENT_COMMENTS:
            raise RuntimeError('too_many_comments')
        if self.repo.has_duplicate(data['user_id'], data['project_name'], data['text'], now - DUPLICATE_WINDOW):
            raise RuntimeError('duplicate_comment')
        return self.repo.create({
            'id': str(uuid.uuid4()),
            'likes': [],
            'edited': False,
            'created_at': now,
            **data,
        })

    def apply_action(self, comment_id: str, user_id: str, action: str, text: Optional[str] = None) -> Comment:
        comment = self.repo.get(comment_id)
        if not comment:
            raise RuntimeError('comment_not_found')

        # JSON 列需整体赋值才会被识别为修改
        likes = list(comment.likes or [])
        if action == 'like':
            if user_id not in likes:
                likes.append(user_id)
            changes = {'likes': likes}
        elif action == 'unlike':
            changes = {'likes': [u for u in likes if u != user_id]}
        else:
            if comment.user_id != user_id:
                raise RuntimeError('not_authorized')
            changes = {'text': text, 'edited': True}
        return self.repo.update(comment_id, changes)

    def delete(self, comment_id: str, user_id: str) -> None:
        comment = self.repo.get(comment_id)
        if not comment:
            raise RuntimeError('comment_not_found')
        if comment.user_id != user_id:
            raise RuntimeError('not_authorized')
        self.repo.delete_with_replies(comment)
