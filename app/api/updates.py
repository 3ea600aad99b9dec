# app/api/updates.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import verify_cron_secret
from app.schemas.update_schemas import BatchRequest, BatchResponse, CronResponse, UpdaterStatusResponse
from app.services.github_client import GitHubClient
from app.services.project_updater import ProjectUpdater, get_update_status, seconds_until_reset
from app.services.update_coordinator import DEFAULT_BATCH_SIZE, UpdateCoordinator, update_coordinator

update_router = APIRouter(prefix="/projects/update", tags=["updates"])
cron_router = APIRouter(prefix="/cron", tags=["cron"])
logger = logging.getLogger(__name__)


def get_update_coordinator() -> UpdateCoordinator:
    return update_coordinator


def get_github_client() -> GitHubClient:
    return GitHubClient()


async def get_batch_size(request: Request) -> int:
    """读取 {"batchSize": n}；空体、非 JSON 或非对象一律使用默认批次"""
    try:
        body = await request.json()
    except ValueError:
        return DEFAULT_BATCH_SIZE
    if not isinstance(body, dict):
        return DEFAULT_BATCH_SIZE
    try:
        return BatchRequest.model_validate(body).batch_size
    except ValidationError:
        return DEFAULT_BATCH_SIZE


def _batch_message(success: bool, processed: int) -> str:
    if success:
        return f"Successfully processed {processed} projects"
    return "Failed to process updates"


@update_router.get("", response_model=UpdaterStatusResponse)
def get_status(
        db: Session = Depends(get_db),
        coordinator: UpdateCoordinator = Depends(get_update_coordinator),
):
    """返回更新器状态（队列、GitHub 限流、统计），供管理面板与前端轮询使用"""
    try:
        return get_update_status(db, coordinator)
    except Exception as e:
        logger.exception("Error getting update status")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "internal_error", "message": str(e) or "An unexpected error occurred"},
        )


@update_router.post("", response_model=BatchResponse)
def process_updates(
        batch_size: int = Depends(get_batch_size),
        db: Session = Depends(get_db),
        coordinator: UpdateCoordinator = Depends(get_update_coordinator),
        client: GitHubClient = Depends(get_github_client),
):
    """处理一批项目刷新。已在处理或限流耗尽时同样返回 200，success=false"""
    try:
        result = ProjectUpdater(db, client, coordinator).process_batch(batch_size)
    except Exception as e:
        logger.exception("Error processing project updates")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "update_failed", "message": str(e) or "Failed to process updates"},
        )

    return BatchResponse(
        success=result.success,
        message=_batch_message(result.success, result.processed_count),
        processed_count=result.processed_count,
        rate_limit_remaining=result.rate_limit_remaining,
        next_reset=result.next_reset,
    )


@cron_router.get("/update-projects", response_model=CronResponse, dependencies=[Depends(verify_cron_secret)])
def cron_update_projects(
        db: Session = Depends(get_db),
        coordinator: UpdateCoordinator = Depends(get_update_coordinator),
        client: GitHubClient = Depends(get_github_client),
):
    """供定时任务调用；批次较小以免一次耗尽配额"""
    rate_limit = coordinator.rate_limit
    if coordinator.is_exhausted():
        reset_time = datetime.fromtimestamp(rate_limit.reset, tz=timezone.utc).isoformat()
        return CronResponse(
            success=False,
            message=f"Rate limit exhausted. Will reset in {seconds_until_reset(coordinator)} seconds at {reset_time}",
            rate_limit_remaining=rate_limit.remaining,
            rate_limit_reset=reset_time,
        )

    if coordinator.is_processing:
        return CronResponse(
            success=False,
            message="Update already in progress",
            rate_limit_remaining=rate_limit.remaining,
        )

    try:
        result = ProjectUpdater(db, client, coordinator).process_batch(settings.CRON_BATCH_SIZE)
    except Exception as e:
        logger.exception("Error in cron job for updating projects")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "cron_failed", "message": str(e) or "Failed to run cron job"},
        )

    return CronResponse(
        success=result.success,
        message=_batch_message(result.success, result.processed_count),
        processed_count=result.processed_count,
        rate_limit_remaining=result.rate_limit_remaining,
        next_reset=result.next_reset,
    )
