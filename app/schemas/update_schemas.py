# app/schemas/update_schemas.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from app.core.sanitization import sanitize_input
from app.schemas.base import CamelSchema
from app.services.update_coordinator import DEFAULT_BATCH_SIZE, MAX_BATCH_SIZE


class BatchRequest(CamelSchema):
    """POST /projects/update 请求体：{"batchSize": n}"""
    batch_size: int = DEFAULT_BATCH_SIZE

    @field_validator('batch_size', mode='before')
    @classmethod
    def _coerce_batch_size(cls, v: Any) -> int:
        if isinstance(v, bool) or v is None:
            return DEFAULT_BATCH_SIZE
        if isinstance(v, str):
            try:
                v = int(sanitize_input(v))
            except ValueError:
                return DEFAULT_BATCH_SIZE
        if not isinstance(v, (int, float)) or not v:
            return DEFAULT_BATCH_SIZE
        return min(MAX_BATCH_SIZE, max(1, int(v)))


class BatchResponse(CamelSchema):
    success: bool
    message: str
    processed_count: int
    rate_limit_remaining: int
    next_reset: Optional[datetime] = None


class QueueStatus(CamelSchema):
    is_processing: bool
    last_run: int
    current_batch_size: int


class RateLimitStatus(CamelSchema):
    remaining: int
    reset: int
    last_checked: int
    reset_time: Optional[str] = None


class UpdaterStatusResponse(CamelSchema):
    queue: QueueStatus
    rate_limit: RateLimitStatus
    # 保持 snake_case 键（pending / in_progress / ...）
    statistics: Dict[str, int] = Field(default_factory=dict)
    projects_needing_update: int = 0


class CronResponse(CamelSchema):
    success: bool
    message: str
    processed_count: int = 0
    rate_limit_remaining: int
    rate_limit_reset: Optional[str] = None
    next_reset: Optional[datetime] = None
