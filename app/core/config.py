# app/core/config.py
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """应用配置管理"""
    APP_NAME: str = "Code Gems"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # 数据库配置
    DATABASE_URL: str

    # Redis配置
    REDIS_URL: str

    # 安全配置
    SECRET_KEY: str
    ADMIN_API_KEY: Optional[str] = None
    CRON_SECRET: Optional[str] = None

    # GitHub 配置
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_USER_AGENT: str = "CodeGems-Updater"
    GITHUB_TIMEOUT: float = 30.0

    # 定时更新配置
    UPDATE_INTERVAL_MINUTES: int = 15
    CRON_BATCH_SIZE: int = 3

    # 外部服务配置
    DISCORD_WEBHOOK_URL: Optional[str] = None

    class Config:
        env_file = ".env"


settings = Settings()
