# app/tasks/celery_app.py
from celery import Celery
from app.core.config import settings

celery_app = Celery(
    "code_gems_tasks",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["app.tasks.update_tasks"]
)

celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    beat_schedule={
        'refresh-stale-projects': {
            'task': 'app.tasks.update_tasks.refresh_stale_projects',
            'schedule': settings.UPDATE_INTERVAL_MINUTES * 60.0,
        },
    },
)
