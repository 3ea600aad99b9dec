# app/core/security.py
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from app.core.config import settings


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


def require_admin(authorization: Optional[str] = Header(default=None)) -> str:
    """管理员鉴权依赖：Authorization: Bearer <ADMIN_API_KEY>"""
    if not settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "forbidden", "message": "Admin access is not configured"},
        )

    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Missing or invalid authorization header"},
        )
    if not secrets.compare_digest(token, settings.ADMIN_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "forbidden", "message": "Admin access required"},
        )
    return token


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """未配置 CRON_SECRET 时放行；否则要求 Bearer 令牌匹配"""
    if not settings.CRON_SECRET:
        return
    token = _bearer_token(authorization)
    if token is None or not secrets.compare_digest(token, settings.CRON_SECRET):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Invalid cron secret"},
        )
