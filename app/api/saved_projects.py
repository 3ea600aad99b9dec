# app/api/saved_projects.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.base import PROJECT_NAME_PATTERN
from app.schemas.saved_project_schemas import SavedProjectCreate, SavedProjectResult
from app.services.saved_project_service import SavedProjectService

saved_router = APIRouter(prefix="/saved-projects", tags=["saved-projects"])
logger = logging.getLogger(__name__)


@saved_router.get("/", response_model=List[str])
def list_saved_projects(
        user_id: str = Query(..., alias="userId", min_length=5, max_length=100),
        db: Session = Depends(get_db)
):
    """返回用户收藏的项目名列表"""
    return SavedProjectService(db).list_saved(user_id)


@saved_router.post("/", response_model=SavedProjectResult)
def save_project(payload: SavedProjectCreate, db: Session = Depends(get_db)):
    try:
        created = SavedProjectService(db).save(payload.user_id, payload.project_name)
    except RuntimeError as e:
        if 'project_not_found' in str(e):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": "not_found", "message": "Project not found"}
            )
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error saving project %s: %s", payload.project_name, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "database_error", "message": "Failed to save project"}
        )
    if not created:
        return SavedProjectResult(message="Project already saved")
    return SavedProjectResult()


@saved_router.delete("/", response_model=SavedProjectResult)
def remove_saved_project(
        user_id: str = Query(..., alias="userId", min_length=5, max_length=100),
        project_name: str = Query(..., alias="projectName", max_length=100, pattern=PROJECT_NAME_PATTERN),
        db: Session = Depends(get_db)
):
    try:
        SavedProjectService(db).remove(user_id, project_name)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error removing saved project %s: %s", project_name, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "database_error", "message": "Failed to remove saved project"}
        )
    return SavedProjectResult()
