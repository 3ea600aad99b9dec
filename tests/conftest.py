"""Test configuration and fixtures."""

import os

# Settings are read at import time, so the environment must be set first
os.environ.update({
    'DATABASE_URL': 'sqlite://',
    'REDIS_URL': 'redis://localhost:6379/15',
    'SECRET_KEY': 'test-secret',
    'ADMIN_API_KEY': 'test-admin-key',
    'GITHUB_TOKEN': '',
})
os.environ.pop('CRON_SECRET', None)
os.environ.pop('DISCORD_WEBHOOK_URL', None)

from datetime import datetime, timezone
from typing import Dict, Optional
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.models.comment import Comment  # noqa: F401
from app.models.project import Project
from app.models.project_request import ProjectRequest  # noqa: F401
from app.models.project_update import ProjectUpdate  # noqa: F401
from app.models.rating import Rating  # noqa: F401
from app.models.saved_project import SavedProject  # noqa: F401
from app.services.github_client import GitHubClient
from app.services.update_coordinator import UpdateCoordinator

API_BASE = "https://api.github.com"
ADMIN_HEADERS = {"Authorization": "Bearer test-admin-key"}


def make_response(status_code: int = 200, payload=None, headers: Optional[Dict[str, str]] = None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = "OK" if response.ok else "Error"
    response.headers = headers or {}
    response.json.return_value = payload if payload is not None else {}
    return response


def rate_headers(remaining: int, reset: int = 0) -> Dict[str, str]:
    return {
        "x-ratelimit-limit": "60",
        "x-ratelimit-remaining": str(remaining),
        "x-ratelimit-reset": str(reset),
    }


class FakeGitHubSession:
    """Stands in for requests.Session; unknown URLs answer 404."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add_repo(self, owner, repo, stars=10, forks=2, description="A project",
                 languages=None, repo_headers=None, languages_headers=None, status_code=200):
        api_url = f"{API_BASE}/repos/{owner}/{repo}"
        languages_url = f"{api_url}/languages"
        payload = {
            "full_name": f"{owner}/{repo}",
            "stargazers_count": stars,
            "forks_count": forks,
            "description": description,
            "languages_url": languages_url,
        }
        self.routes[api_url] = make_response(status_code, payload, repo_headers)
        self.routes[languages_url] = make_response(
            200, languages if languages is not None else {"Python": 1000}, languages_headers
        )

    def get(self, url, timeout=None):
        self.calls.append(url)
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if route is None:
            return make_response(404, {"message": "Not Found"})
        return route

    def repo_calls(self):
        return [c for c in self.calls if not c.endswith("/languages")]


@pytest.fixture
def db_session():
    """Create test database session."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def coordinator():
    return UpdateCoordinator()


@pytest.fixture
def github():
    return FakeGitHubSession()


@pytest.fixture
def github_client(github):
    return GitHubClient(token="", api_url=API_BASE, timeout=5, session=github)


@pytest.fixture
def add_project(db_session):
    def _add(name, url=None, last_updated=None, stars=0, forks=0, tags=None):
        project = Project(
            name=name,
            description=f"{name} description",
            url=url or f"https://github.com/owner/{name}",
            stars=stars,
            forks=forks,
            tags=tags or [],
            languages={},
            last_updated=last_updated,
        )
        db_session.add(project)
        db_session.commit()
        return project
    return _add


@pytest.fixture
def api_client(db_session, coordinator, github_client):
    from main import app
    from app.api.updates import get_github_client, get_update_coordinator

    app.dependency_overrides[get_update_coordinator] = lambda: coordinator
    app.dependency_overrides[get_github_client] = lambda: github_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def utcnow():
    return datetime.now(timezone.utc)
