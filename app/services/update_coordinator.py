# app/services/update_coordinator.py
import logging
import threading
import time
from dataclasses import dataclass, asdict
from typing import Optional

from app.services.github_client import RateLimitInfo

logger = logging.getLogger(__name__)

# Unauthenticated GitHub quota, assumed until a live response says otherwise
DEFAULT_RATE_LIMIT = 60
DEFAULT_BATCH_SIZE = 5
# 单批上限，避免一次请求耗尽配额
MAX_BATCH_SIZE = 10


@dataclass
class RateLimitState:
    remaining: int = DEFAULT_RATE_LIMIT
    reset: int = 0          # epoch seconds, 0 = unknown
    last_checked: int = 0   # epoch seconds, 0 = never


@dataclass
class UpdateQueueState:
    is_processing: bool = False
    last_run: int = 0
    current_batch_size: int = DEFAULT_BATCH_SIZE


class UpdateCoordinator:
    """
    Process-local rate-limit bookkeeping and single-flight guard for batches.

    State lives in memory only: it is not shared between server instances and
    is lost on restart, at which point the default quota is assumed again.
    """

    def __init__(self, default_remaining: int = DEFAULT_RATE_LIMIT):
        self.default_remaining = default_remaining
        self._lock = threading.Lock()
        self.rate_limit = RateLimitState(remaining=default_remaining)
        self.queue = UpdateQueueState()

    @property
    def is_processing(self) -> bool:
        return self.queue.is_processing

    def try_acquire(self, batch_size: Optional[int] = None) -> bool:
        """Non-blocking: False when another batch already runs in this process."""
        if not self._lock.acquire(blocking=False):
            return False
        self.queue.is_processing = True
        if batch_size is not None:
            self.queue.current_batch_size = batch_size
        return True

    def release(self) -> None:
        self.queue.is_processing = False
        if self._lock.locked():
            self._lock.release()

    def mark_run(self, now: Optional[float] = None) -> None:
        self.queue.last_run = int(now if now is not None else time.time())

    def record_call(self, info: Optional[RateLimitInfo], now: Optional[float] = None) -> None:
        """Apply one response's rate-limit headers, or count the call manually."""
        if info is None:
            self.rate_limit.remaining = max(0, self.rate_limit.remaining - 1)
            return
        self.rate_limit.remaining = max(0, info.remaining)
        self.rate_limit.reset = info.reset
        self.rate_limit.last_checked = int(now if now is not None else time.time())

    def is_exhausted(self, now: Optional[float] = None) -> bool:
        now = now if now is not None else time.time()
        return self.rate_limit.remaining <= 1 and self.rate_limit.reset > now

    def refresh_if_expired(self, now: Optional[float] = None) -> None:
        now = now if now is not None else time.time()
        if self.rate_limit.remaining <= 1 and self.rate_limit.reset <= now:
            logger.info("Rate limit window has passed, assuming %d calls", self.default_remaining)
            self.rate_limit.remaining = self.default_remaining

    def update_rate_limit(self, **fields) -> None:
        """Manual override, e.g. after checking /rate_limit out of band."""
        for name, value in fields.items():
            if not hasattr(self.rate_limit, name):
                raise AttributeError(f"Unknown rate limit field: {name}")
            setattr(self.rate_limit, name, value)
        self.rate_limit.remaining = max(0, self.rate_limit.remaining)
        self.rate_limit.last_checked = int(time.time())

    def get_status(self) -> dict:
        return {
            "is_processing": self.queue.is_processing,
            "last_run": self.queue.last_run,
            "current_batch_size": self.queue.current_batch_size,
            "rate_limit": asdict(self.rate_limit),
        }


update_coordinator = UpdateCoordinator()
