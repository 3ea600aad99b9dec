# app/api/project_requests.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import require_admin
from app.schemas.request_schemas import ProjectRequestCreate, ProjectRequestResponse, ProjectRequestReview
from app.services.request_service import ProjectRequestService

request_router = APIRouter(prefix="/project-requests", tags=["project-requests"])
logger = logging.getLogger(__name__)


@request_router.post("/", response_model=ProjectRequestResponse, status_code=status.HTTP_201_CREATED)
def submit_request(payload: ProjectRequestCreate, db: Session = Depends(get_db)):
    """用户提交项目推荐，状态为 pending"""
    try:
        return ProjectRequestService(db).submit(payload.model_dump())
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error storing project request: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "database_error", "message": "Failed to store project request"}
        )


@request_router.get("/", response_model=List[ProjectRequestResponse])
def list_my_requests(
        user_id: str = Query(..., alias="userId", min_length=1),
        status_filter: Optional[str] = Query(None, alias="status"),
        db: Session = Depends(get_db)
):
    """当前用户自己的请求"""
    return ProjectRequestService(db).list_for_user(user_id, status=status_filter)


@request_router.get("/admin", response_model=List[ProjectRequestResponse], dependencies=[Depends(require_admin)])
def list_all_requests(
        status_filter: Optional[str] = Query(None, alias="status"),
        db: Session = Depends(get_db)
):
    """管理员查看全部请求，可按状态过滤"""
    return ProjectRequestService(db).list_all(status=status_filter)


@request_router.get("/{request_id}", response_model=ProjectRequestResponse)
def get_request(request_id: str, user_id: str = Query(..., alias="userId"), db: Session = Depends(get_db)):
    request = ProjectRequestService(db).get(request_id)
    if not request or request.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "message": "Project request not found"}
        )
    return request


@request_router.put("/{request_id}", response_model=ProjectRequestResponse, dependencies=[Depends(require_admin)])
def review_request(request_id: str, review: ProjectRequestReview, db: Session = Depends(get_db)):
    """管理员审核：pending / accepted / declined"""
    try:
        return ProjectRequestService(db).review(request_id, review.status, review.admin_notes, review.admin_id)
    except RuntimeError as e:
        if 'request_not_found' in str(e):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": "not_found", "message": "Project request not found"}
            )
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error updating project request %s: %s", request_id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "database_error", "message": "Failed to update project request"}
        )
