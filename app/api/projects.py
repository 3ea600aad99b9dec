# app/api/projects.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import require_admin
from app.schemas.project_schemas import ProjectCreate, ProjectResponse, ProjectUpdate
from app.services.project_service import ProjectService

project_router = APIRouter(prefix="/projects", tags=["projects"])
logger = logging.getLogger(__name__)


def _db_error(e: SQLAlchemyError, action: str) -> HTTPException:
    logger.error("Database error while %s: %s", action, e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "database_error", "message": f"Failed to {action}"},
    )


@project_router.get("/", response_model=List[ProjectResponse])
def list_projects(
        skip: int = 0,
        limit: int = 100,
        tag: Optional[str] = None,
        db: Session = Depends(get_db)
):
    """获取项目列表，可按 tag 过滤"""
    try:
        return ProjectService(db).list_projects(skip=skip, limit=limit, tag=tag)
    except SQLAlchemyError as e:
        raise _db_error(e, "fetch projects")


@project_router.get("/{name}", response_model=ProjectResponse)
def get_project(name: str, db: Session = Depends(get_db)):
    """按名称获取单个项目"""
    project = ProjectService(db).get_project(name)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "message": "Project not found"}
        )
    return project


@project_router.post("/", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
                     dependencies=[Depends(require_admin)])
def create_project(project: ProjectCreate, db: Session = Depends(get_db)):
    """创建新项目（管理员）。last_updated 为空，下一批刷新会优先处理"""
    service = ProjectService(db)
    try:
        return service.create_project(project.model_dump())
    except RuntimeError as e:
        if 'project_exists' in str(e):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "bad_request", "message": "Project with this name already exists"}
            )
        raise
    except SQLAlchemyError as e:
        db.rollback()
        msg = str(e)
        if 'unique' in msg.lower() or 'duplicate' in msg.lower():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "bad_request", "message": "Project with this name already exists"}
            )
        raise _db_error(e, "add project")


@project_router.put("/{name}", response_model=ProjectResponse, dependencies=[Depends(require_admin)])
def update_project(name: str, changes: ProjectUpdate, db: Session = Depends(get_db)):
    """管理员编辑项目"""
    try:
        return ProjectService(db).update_project(name, changes.model_dump())
    except RuntimeError as e:
        if 'project_not_found' in str(e):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": "not_found", "message": "Project not found"}
            )
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise _db_error(e, "update project")
