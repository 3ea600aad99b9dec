# app/services/github_client.py
"""
GitHub REST client used by the project updater.

One refresh costs two calls: the repository itself and its ``languages_url``.
Every response's rate-limit headers are handed to ``on_rate_limit`` so the
caller can keep its quota bookkeeping current.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

import requests

from app.core.config import settings

logger = logging.getLogger(__name__)

_REPO_URL_RE = re.compile(r"github\.com/([^/\s?#]+)/([^/\s?#]+)")


@dataclass
class RateLimitInfo:
    """Rate-limit headers of a single GitHub response."""
    remaining: int
    reset: int  # epoch seconds
    limit: int = 60


@dataclass
class RepoMetadata:
    stargazers_count: int
    forks_count: int
    description: str
    languages_url: Optional[str] = None
    languages: Dict[str, int] = field(default_factory=dict)


RateLimitCallback = Callable[[Optional[RateLimitInfo]], None]


def parse_repo_url(url: str) -> Optional[Tuple[str, str]]:
    """github.com/owner/repo[.git][/...] -> (owner, repo)"""
    if not url:
        return None
    match = _REPO_URL_RE.search(url)
    if not match:
        return None
    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[:-len(".git")]
    if not owner or not repo:
        return None
    return owner, repo


def parse_rate_limit(headers) -> Optional[RateLimitInfo]:
    """Extract x-ratelimit-* headers; None when the response carried none."""
    remaining = headers.get("x-ratelimit-remaining")
    if remaining is None:
        return None
    try:
        return RateLimitInfo(
            remaining=max(0, int(remaining)),
            reset=int(headers.get("x-ratelimit-reset") or 0),
            limit=int(headers.get("x-ratelimit-limit") or 60),
        )
    except (TypeError, ValueError):
        logger.warning("Unparseable rate limit headers: remaining=%r", remaining)
        return None


class GitHubClient:
    """Fetches repository metadata and language breakdowns from GitHub."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        on_rate_limit: Optional[RateLimitCallback] = None,
    ):
        self.token = token if token is not None else settings.GITHUB_TOKEN
        self.api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.GITHUB_TIMEOUT
        self.on_rate_limit = on_rate_limit
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": settings.GITHUB_USER_AGENT,
        })
        if self.token:
            session.headers["Authorization"] = f"token {self.token}"
        return session

    def api_url_for(self, repo_url: str) -> Optional[str]:
        parsed = parse_repo_url(repo_url)
        if parsed is None:
            return None
        owner, repo = parsed
        return f"{self.api_url}/repos/{owner}/{repo}"

    def _get(self, url: str) -> Optional[requests.Response]:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("GitHub request failed for %s: %s", url, e)
            return None

        if self.on_rate_limit is not None:
            self.on_rate_limit(parse_rate_limit(response.headers))
        return response

    def fetch_repository(self, repo_url: str) -> Optional[RepoMetadata]:
        """
        Fetch stars, forks, description and languages for a repository.

        Returns None when the URL is not a GitHub repository URL or the
        repository call fails. A failed languages call only leaves the
        language mapping empty.
        """
        api_url = self.api_url_for(repo_url)
        if api_url is None:
            logger.warning("Not a GitHub repository URL: %s", repo_url)
            return None

        response = self._get(api_url)
        if response is None:
            return None
        if not response.ok:
            logger.error("Error fetching repo data: %s %s", response.status_code, response.reason)
            return None

        try:
            data = response.json()
            metadata = RepoMetadata(
                stargazers_count=int(data.get("stargazers_count") or 0),
                forks_count=int(data.get("forks_count") or 0),
                description=data.get("description") or "",
                languages_url=data.get("languages_url"),
            )
        except (ValueError, AttributeError) as e:
            logger.error("Malformed repository payload from %s: %s", api_url, e)
            return None

        if metadata.languages_url:
            metadata.languages = self.fetch_languages(metadata.languages_url)
        return metadata

    def fetch_languages(self, languages_url: str) -> Dict[str, int]:
        response = self._get(languages_url)
        if response is None:
            return {}
        if not response.ok:
            logger.error("Error fetching languages: %s %s", response.status_code, response.reason)
            return {}
        try:
            data = response.json()
        except ValueError as e:
            logger.error("Malformed languages payload from %s: %s", languages_url, e)
            return {}
        if not isinstance(data, dict):
            return {}
        try:
            return {str(lang): int(size) for lang, size in data.items()}
        except (TypeError, ValueError) as e:
            logger.error("Malformed languages payload from %s: %s", languages_url, e)
            return {}
