# app/tasks/update_tasks.py
from celery.utils.log import get_task_logger

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.project_updater import ProjectUpdater
from app.tasks.celery_app import celery_app


logger = get_task_logger(__name__)


@celery_app.task(bind=True)
def refresh_stale_projects(self, batch_size: int = None):
    """定时刷新一批过期项目。限流状态为 worker 进程内状态，与 Web 进程互不共享"""
    batch_size = batch_size or settings.CRON_BATCH_SIZE
    db = SessionLocal()
    try:
        result = ProjectUpdater(db).process_batch(batch_size)
        logger.info(
            "Refresh batch | processed=%s | success=%s | remaining=%s",
            result.processed_count, result.success, result.rate_limit_remaining,
        )
        return {
            "success": result.success,
            "processed_count": result.processed_count,
            "rate_limit_remaining": result.rate_limit_remaining,
            "next_reset": result.next_reset.isoformat() if result.next_reset else None,
        }
    finally:
        db.close()
