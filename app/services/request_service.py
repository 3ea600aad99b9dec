# app/services/request_service.py
import logging
import uuid
from typing import List, Optional

import requests

from app.core.config import settings
from app.models.project_request import ProjectRequest
from app.repositories.project_request_repository import ProjectRequestRepository

logger = logging.getLogger(__name__)


class ProjectRequestService:
    """用户提交项目推荐，管理员审核"""

    def __init__(self, db, webhook_url: Optional[str] = None):
        self.repo = ProjectRequestRepository(ProjectRequest, db)
        self.webhook_url = webhook_url if webhook_url is not None else settings.DISCORD_WEBHOOK_URL

    def submit(self, data: dict) -> ProjectRequest:
        request = self.repo.create({
            'id': str(uuid.uuid4()),
            'status': 'pending',
            **data,
        })
        self._notify(request)
        return request

    def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[ProjectRequest]:
        return self.repo.search(user_id=user_id, status=status)

    def list_all(self, status: Optional[str] = None) -> List[ProjectRequest]:
        return self.repo.search(status=status)

    def get(self, request_id: str) -> Optional[ProjectRequest]:
        return self.repo.get(request_id)

    def review(self, request_id: str, status: str, admin_notes: Optional[str], reviewer: Optional[str]) -> ProjectRequest:
        if not self.repo.get(request_id):
            raise RuntimeError('request_not_found')
        return self.repo.update(request_id, {
            'status': status,
            'admin_notes': admin_notes,
            'reviewed_by': reviewer,
        })

    def _notify(self, request: ProjectRequest) -> None:
        """Discord 通知失败只记录日志，不影响提交"""
        if not self.webhook_url:
            return
        payload = {
            "embeds": [{
                "title": f"New project request: {request.title}",
                "url": request.github_link,
                "description": (request.description or "")[:1000],
                "fields": [
                    {"name": "Reason", "value": (request.reason or "-")[:1000]},
                    {"name": "Request ID", "value": request.id},
                ],
            }]
        }
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=10)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Discord notification failed for request %s: %s", request.id, e)
