# app/api/api.py
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Code Gems API"}


@api_router.get("/health")
def health(db: Session = Depends(get_db)):
    """返回关键依赖的运行状态（db、redis）"""
    status = {"ok": True, "db": "ok", "redis": "unknown"}
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        status["db"] = f"error: {str(e)}"
        status["ok"] = False

    # Redis 同时是 Celery broker
    try:
        import redis
        r = redis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
        r.ping()
        status["redis"] = "ok"
    except Exception as e:
        status["redis"] = f"error: {str(e)}"
        status["ok"] = False

    return status
