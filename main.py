# main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.api import api_router
from app.api.updates import update_router, cron_router
from app.api.projects import project_router
from app.api.project_requests import request_router
from app.api.comments import comment_router
from app.api.ratings import rating_router
from app.api.saved_projects import saved_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Discover and curate GitHub projects"
)

# CORS配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由；/projects/update 必须先于 /projects/{name}
app.include_router(api_router, prefix="/api/v1")
app.include_router(update_router, prefix="/api/v1")
app.include_router(cron_router, prefix="/api/v1")
app.include_router(project_router, prefix="/api/v1")
app.include_router(request_router, prefix="/api/v1")
app.include_router(comment_router, prefix="/api/v1")
app.include_router(rating_router, prefix="/api/v1")
app.include_router(saved_router, prefix="/api/v1")

@app.on_event("startup")
async def startup_event():
    """应用启动事件"""
    # 创建数据库表
    from app.core.database import engine, Base
    from app.models import project, project_update, project_request, comment, rating, saved_project  # noqa: F401
    Base.metadata.create_all(bind=engine)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
