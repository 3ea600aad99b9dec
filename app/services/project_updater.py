# app/services/project_updater.py
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.project_update import ProjectUpdate
from app.repositories.project_repository import ProjectRepository
from app.repositories.project_update_repository import ProjectUpdateRepository
from app.services.github_client import GitHubClient
from app.services.update_coordinator import (
    DEFAULT_BATCH_SIZE, MAX_BATCH_SIZE, UpdateCoordinator, update_coordinator,
)

logger = logging.getLogger(__name__)

STALE_AFTER = timedelta(hours=24)
FETCH_FAILED_MESSAGE = "Failed to fetch repository data"
PROJECT_MISSING_MESSAGE = "Project no longer exists"


@dataclass
class BatchResult:
    processed_count: int
    success: bool
    rate_limit_remaining: int
    next_reset: Optional[datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stale_cutoff(now: Optional[datetime] = None) -> datetime:
    return (now or _utcnow()) - STALE_AFTER


class ProjectUpdater:
    """按批次从 GitHub 刷新项目的 stars/forks/languages，逐个顺序处理"""

    def __init__(self, db: Session, client: Optional[GitHubClient] = None,
                 coordinator: Optional[UpdateCoordinator] = None):
        self.db = db
        self.coordinator = coordinator or update_coordinator
        self.client = client or GitHubClient()
        # 每次 GitHub 响应都回写到协调器的限流状态
        self.client.on_rate_limit = self.coordinator.record_call
        self.project_repo = ProjectRepository(Project, db)
        self.update_repo = ProjectUpdateRepository(ProjectUpdate, db)

    def _result(self, processed_count: int, success: bool) -> BatchResult:
        reset = self.coordinator.rate_limit.reset
        return BatchResult(
            processed_count=processed_count,
            success=success,
            rate_limit_remaining=self.coordinator.rate_limit.remaining,
            next_reset=datetime.fromtimestamp(reset, tz=timezone.utc) if reset else None,
        )

    def process_batch(self, batch_size: int = DEFAULT_BATCH_SIZE) -> BatchResult:
        if not self.coordinator.try_acquire(batch_size):
            logger.info("Project update already in progress, skipping batch")
            return self._result(0, False)

        try:
            if self.coordinator.is_exhausted():
                logger.info(
                    "Rate limit reached. Will reset at %s",
                    datetime.fromtimestamp(self.coordinator.rate_limit.reset, tz=timezone.utc).isoformat(),
                )
                return self._result(0, False)
            self.coordinator.refresh_if_expired()

            limit = min(batch_size, MAX_BATCH_SIZE)
            try:
                candidates = self.project_repo.get_stale(stale_cutoff(), limit)
            except SQLAlchemyError:
                logger.exception("Error fetching projects to update")
                self.db.rollback()
                return self._result(0, False)

            if not candidates:
                logger.info("No projects need updating at this time")
                return self._result(0, True)

            # 先取出字段，避免失败回滚后访问过期对象
            targets = [(p.name, p.url) for p in candidates]
            logger.info("Processing updates for %d projects", len(targets))

            processed = 0
            for name, url in targets:
                # 每个项目至少需要两次调用（仓库 + languages）
                if self.coordinator.rate_limit.remaining <= 1:
                    logger.info("Rate limit nearly exhausted, stopping batch processing")
                    break
                if self._update_project(name, url):
                    processed += 1

            self.coordinator.mark_run()
            return self._result(processed, True)
        finally:
            self.coordinator.release()

    def _update_project(self, name: str, url: str) -> bool:
        try:
            self.update_repo.upsert(name, {
                'status': 'in_progress',
                'last_attempted': _utcnow(),
            })

            repo_data = self.client.fetch_repository(url)
            if repo_data is None:
                self.update_repo.upsert(name, {'status': 'failed', 'error': FETCH_FAILED_MESSAGE})
                return False

            now = _utcnow()
            refreshed = self.project_repo.apply_refresh(name, {
                'stars': repo_data.stargazers_count,
                'forks': repo_data.forks_count,
                'description': repo_data.description,
                'languages': repo_data.languages,
                'last_updated': now,
            })
            if refreshed is None:
                # 选出之后被删除
                logger.warning("Project %s disappeared before its refresh was saved", name)
                self.update_repo.upsert(name, {'status': 'failed', 'error': PROJECT_MISSING_MESSAGE})
                return False
            self.update_repo.upsert(name, {
                'status': 'completed',
                'last_successful': now,
                'error': None,
            })
            logger.info("Successfully updated %s", name)
            return True
        except Exception as e:
            logger.exception("Error processing update for %s", name)
            self.db.rollback()
            self._record_failure(name, e)
            return False

    def _record_failure(self, name: str, error: Exception) -> None:
        message = str(error) or error.__class__.__name__
        if isinstance(error, SQLAlchemyError):
            message = f"Database update error: {message}"
        try:
            self.update_repo.upsert(name, {'status': 'failed', 'error': message})
        except SQLAlchemyError:
            logger.exception("Could not record failure for %s", name)
            self.db.rollback()


def get_update_status(db: Session, coordinator: Optional[UpdateCoordinator] = None) -> Dict:
    """协调器状态 + 数据库统计；只读，可频繁轮询"""
    coordinator = coordinator or update_coordinator
    status = coordinator.get_status()
    reset = status['rate_limit']['reset']

    statistics = {'pending': 0, 'in_progress': 0, 'completed': 0, 'failed': 0, 'total': 0}
    needing_update = 0
    try:
        statistics = ProjectUpdateRepository(ProjectUpdate, db).count_by_status()
        needing_update = ProjectRepository(Project, db).count_stale(stale_cutoff())
    except SQLAlchemyError:
        logger.exception("Error getting update counts")
        db.rollback()

    return {
        'queue': {
            'is_processing': status['is_processing'],
            'last_run': status['last_run'],
            'current_batch_size': status['current_batch_size'],
        },
        'rate_limit': {
            **status['rate_limit'],
            'reset_time': datetime.fromtimestamp(reset, tz=timezone.utc).isoformat() if reset else None,
        },
        'statistics': statistics,
        'projects_needing_update': needing_update,
    }


def seconds_until_reset(coordinator: Optional[UpdateCoordinator] = None) -> int:
    coordinator = coordinator or update_coordinator
    return max(0, int(coordinator.rate_limit.reset - time.time()))
