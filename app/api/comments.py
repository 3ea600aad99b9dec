# app/api/comments.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.base import PROJECT_NAME_PATTERN
from app.schemas.comment_schemas import CommentAction, CommentCreate, CommentResponse
from app.services.comment_service import CommentService

comment_router = APIRouter(prefix="/comments", tags=["comments"])
logger = logging.getLogger(__name__)

# RuntimeError code -> (status, error, message)
_ERRORS = {
    'comment_not_found': (status.HTTP_404_NOT_FOUND, "not_found", "Comment not found"),
    'parent_not_found': (status.HTTP_404_NOT_FOUND, "not_found", "Parent comment not found"),
    'not_authorized': (status.HTTP_403_FORBIDDEN, "forbidden", "Not authorized to change this comment"),
    'duplicate_comment': (status.HTTP_400_BAD_REQUEST, "bad_request", "Duplicate comment detected"),
    'too_many_comments': (status.HTTP_429_TOO_MANY_REQUESTS, "rate_limited",
                          "Too many recent comments. Please wait before posting again."),
}


def _to_http(e: RuntimeError) -> HTTPException:
    status_code, error, message = _ERRORS.get(
        str(e), (status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", str(e))
    )
    return HTTPException(status_code=status_code, detail={"error": error, "message": message})


def _db_error(db: Session, e: SQLAlchemyError, action: str) -> HTTPException:
    db.rollback()
    logger.error("Database error while %s: %s", action, e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "database_error", "message": f"Failed to {action}"},
    )


@comment_router.get("/", response_model=List[CommentResponse])
def list_comments(
        project: Optional[str] = Query(None, max_length=100, pattern=PROJECT_NAME_PATTERN),
        user_id: Optional[str] = Query(None, alias="userId", min_length=5, max_length=50),
        db: Session = Depends(get_db)
):
    """按项目和/或用户过滤，最新在前"""
    try:
        return CommentService(db).list_comments(project_name=project, user_id=user_id)
    except SQLAlchemyError as e:
        raise _db_error(db, e, "get comments")


@comment_router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(payload: CommentCreate, db: Session = Depends(get_db)):
    try:
        return CommentService(db).create(payload.model_dump())
    except RuntimeError as e:
        raise _to_http(e)
    except SQLAlchemyError as e:
        raise _db_error(db, e, "create comment")


@comment_router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(comment_id: str, payload: CommentAction, db: Session = Depends(get_db)):
    """like / unlike / edit"""
    try:
        return CommentService(db).apply_action(comment_id, payload.user_id, payload.action, payload.text)
    except RuntimeError as e:
        raise _to_http(e)
    except SQLAlchemyError as e:
        raise _db_error(db, e, "update comment")


@comment_router.delete("/{comment_id}")
def delete_comment(comment_id: str, user_id: str = Query(..., alias="userId"), db: Session = Depends(get_db)):
    """作者删除评论，回复一并删除"""
    try:
        CommentService(db).delete(comment_id, user_id)
    except RuntimeError as e:
        raise _to_http(e)
    except SQLAlchemyError as e:
        raise _db_error(db, e, "delete comment")
    return {"success": True}
