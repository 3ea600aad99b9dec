# app/api/ratings.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.rating_schemas import RatingCreate, RatingResponse, RatingSummary
from app.services.rating_service import RatingService

rating_router = APIRouter(prefix="/ratings", tags=["ratings"])
logger = logging.getLogger(__name__)


@rating_router.get("/{project_name}", response_model=RatingSummary)
def get_ratings(project_name: str, db: Session = Depends(get_db)):
    """项目的平均分、评分数与评分列表"""
    summary = RatingService(db).summary(project_name)
    summary['ratings'] = [RatingResponse.model_validate(r) for r in summary['ratings']]
    return summary


@rating_router.post("/", response_model=RatingResponse)
def rate_project(payload: RatingCreate, db: Session = Depends(get_db)):
    try:
        return RatingService(db).rate(payload.model_dump())
    except RuntimeError as e:
        if 'project_not_found' in str(e):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": "not_found", "message": "Project not found"}
            )
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error saving rating for %s: %s", payload.project_name, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "database_error", "message": "Failed to save rating"}
        )


@rating_router.delete("/{project_name}")
def delete_rating(
        project_name: str,
        user_id: str = Query(..., alias="userId", min_length=5, max_length=100),
        db: Session = Depends(get_db)
):
    try:
        RatingService(db).remove(project_name, user_id)
    except RuntimeError as e:
        if 'rating_not_found' in str(e):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": "not_found", "message": "Rating not found"}
            )
        raise
    return {"success": True}
