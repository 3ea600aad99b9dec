"""Tests for the batch project updater and the status reporter."""

import time
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.models.project import Project
from app.models.project_update import ProjectUpdate
from app.repositories.project_repository import ProjectRepository
from app.services.project_updater import (
    FETCH_FAILED_MESSAGE, PROJECT_MISSING_MESSAGE, ProjectUpdater, get_update_status,
)
from conftest import rate_headers, utcnow


def _records(db_session):
    db_session.expire_all()
    return {r.project_name: r for r in db_session.query(ProjectUpdate).all()}


def _project(db_session, name):
    db_session.expire_all()
    return db_session.query(Project).filter(Project.name == name).one()


class TestProcessBatch:
    """Test ProjectUpdater.process_batch."""

    def test_three_stale_projects_are_refreshed(self, db_session, coordinator, github, github_client, add_project):
        for name in ("alpha", "beta", "gamma"):
            add_project(name)
            github.add_repo("owner", name, stars=100, forks=7, description=f"{name} upstream",
                            languages={"Go": 42})

        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 3
        assert result.success is True
        records = _records(db_session)
        assert {r.status for r in records.values()} == {"completed"}
        assert set(records) == {"alpha", "beta", "gamma"}
        for name in ("alpha", "beta", "gamma"):
            project = _project(db_session, name)
            assert project.stars == 100
            assert project.forks == 7
            assert project.description == f"{name} upstream"
            assert project.languages == {"Go": 42}
            assert project.last_updated is not None
            assert records[name].last_successful is not None
            assert records[name].error is None

    def test_busy_coordinator_skips_everything(self, db_session, coordinator, github, github_client, add_project):
        add_project("alpha")
        github.add_repo("owner", "alpha")
        assert coordinator.try_acquire()

        with patch.object(ProjectRepository, "get_stale") as get_stale:
            result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 0
        assert result.success is False
        get_stale.assert_not_called()
        assert github.calls == []
        assert _records(db_session) == {}
        # the running batch still owns the guard
        assert coordinator.is_processing
        coordinator.release()

    def test_exhausted_quota_aborts_without_calls(self, db_session, coordinator, github, github_client, add_project):
        add_project("alpha")
        github.add_repo("owner", "alpha")
        reset = int(time.time()) + 600
        coordinator.rate_limit.remaining = 1
        coordinator.rate_limit.reset = reset

        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 0
        assert result.success is False
        assert result.rate_limit_remaining == 1
        assert int(result.next_reset.timestamp()) == reset
        assert github.calls == []
        assert not coordinator.is_processing

    def test_expired_reset_restores_default_quota(self, db_session, coordinator, github, github_client, add_project):
        add_project("alpha")
        github.add_repo("owner", "alpha")
        coordinator.rate_limit.remaining = 0
        coordinator.rate_limit.reset = int(time.time()) - 10

        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 1
        # two calls without headers are counted manually from the default 60
        assert result.rate_limit_remaining == 58

    def test_batch_size_is_capped_at_ten(self, db_session, coordinator, github, github_client, add_project):
        for i in range(12):
            add_project(f"p{i:02d}")
            github.add_repo("owner", f"p{i:02d}")

        with patch.object(ProjectRepository, "get_stale", autospec=True,
                          side_effect=ProjectRepository.get_stale) as get_stale:
            result = ProjectUpdater(db_session, github_client, coordinator).process_batch(50)

        assert get_stale.call_args.args[2] == 10
        assert result.processed_count == 10
        assert len(github.repo_calls()) == 10

    def test_small_batch_queries_requested_size(self, db_session, coordinator, github, github_client, add_project):
        for i in range(5):
            add_project(f"p{i}")
            github.add_repo("owner", f"p{i}")

        with patch.object(ProjectRepository, "get_stale", autospec=True,
                          side_effect=ProjectRepository.get_stale) as get_stale:
            result = ProjectUpdater(db_session, github_client, coordinator).process_batch(2)

        assert get_stale.call_args.args[2] == 2
        assert result.processed_count == 2

    def test_fetch_failure_marks_failed_and_keeps_counts(self, db_session, coordinator, github, github_client,
                                                         add_project):
        add_project("gone", stars=5, forks=1)
        add_project("alive")
        github.add_repo("owner", "alive")
        # "gone" has no route, so the repository call answers 404

        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 1
        assert result.success is True
        records = _records(db_session)
        assert records["gone"].status == "failed"
        assert records["gone"].error == FETCH_FAILED_MESSAGE
        assert records["gone"].last_attempted is not None
        gone = _project(db_session, "gone")
        assert gone.stars == 5
        assert gone.forks == 1
        assert gone.last_updated is None
        assert records["alive"].status == "completed"

    def test_quota_exhausted_mid_batch_stops_after_that_project(self, db_session, coordinator, github,
                                                                github_client, add_project):
        reset = int(time.time()) + 3600
        for name in ("a", "b", "c", "d"):
            add_project(name)
        github.add_repo("owner", "a", repo_headers=rate_headers(10, reset), languages_headers=rate_headers(9, reset))
        github.add_repo("owner", "b", repo_headers=rate_headers(2, reset), languages_headers=rate_headers(1, reset))
        github.add_repo("owner", "c")
        github.add_repo("owner", "d")

        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(10)

        assert result.processed_count == 2
        assert result.rate_limit_remaining == 1
        assert int(result.next_reset.timestamp()) == reset
        assert github.repo_calls() == [f"https://api.github.com/repos/owner/{n}" for n in ("a", "b")]
        assert set(_records(db_session)) == {"a", "b"}

    def test_staleness_and_ordering(self, db_session, coordinator, github, github_client, add_project):
        now = utcnow()
        add_project("fresh", last_updated=now - timedelta(hours=1))
        add_project("old", last_updated=now - timedelta(hours=48))
        add_project("older", last_updated=now - timedelta(days=5))
        add_project("never")
        for name in ("fresh", "old", "older", "never"):
            github.add_repo("owner", name)

        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(10)

        assert result.processed_count == 3
        assert github.repo_calls() == [
            "https://api.github.com/repos/owner/never",
            "https://api.github.com/repos/owner/older",
            "https://api.github.com/repos/owner/old",
        ]
        assert "fresh" not in _records(db_session)

    def test_last_updated_strictly_advances(self, db_session, coordinator, github, github_client, add_project):
        previous = utcnow() - timedelta(days=2)
        add_project("alpha", last_updated=previous)
        github.add_repo("owner", "alpha")

        ProjectUpdater(db_session, github_client, coordinator).process_batch(1)

        refreshed = _project(db_session, "alpha").last_updated
        assert refreshed.replace(tzinfo=None) > previous.replace(tzinfo=None)

    def test_exception_in_one_project_does_not_stop_batch(self, db_session, coordinator, github, github_client,
                                                          add_project):
        add_project("broken")
        add_project("healthy")
        github.routes["https://api.github.com/repos/owner/broken"] = RuntimeError("boom")
        github.add_repo("owner", "healthy")

        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 1
        assert result.success is True
        records = _records(db_session)
        assert records["broken"].status == "failed"
        assert records["broken"].error == "boom"
        assert records["healthy"].status == "completed"

    def test_database_error_on_save_is_recorded_and_batch_continues(self, db_session, coordinator, github,
                                                                    github_client, add_project):
        add_project("a", stars=4)
        add_project("b")
        github.add_repo("owner", "a", stars=900)
        github.add_repo("owner", "b")
        real_apply_refresh = ProjectRepository.apply_refresh

        def apply_refresh(repo, name, fields):
            if name == "a":
                raise OperationalError("UPDATE projects", {}, Exception("disk full"))
            return real_apply_refresh(repo, name, fields)

        with patch.object(ProjectRepository, "apply_refresh", autospec=True, side_effect=apply_refresh):
            result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 1
        assert result.success is True
        records = _records(db_session)
        assert records["a"].status == "failed"
        assert records["a"].error.startswith("Database update error: ")
        assert "disk full" in records["a"].error
        assert _project(db_session, "a").stars == 4
        assert records["b"].status == "completed"
        assert records["b"].error is None

    def test_project_deleted_before_save_is_failed(self, db_session, coordinator, github, github_client,
                                                   add_project):
        add_project("a")
        add_project("b")
        github.add_repo("owner", "a")
        github.add_repo("owner", "b")
        real_apply_refresh = ProjectRepository.apply_refresh

        def apply_refresh(repo, name, fields):
            if name == "a":
                return None
            return real_apply_refresh(repo, name, fields)

        with patch.object(ProjectRepository, "apply_refresh", autospec=True, side_effect=apply_refresh):
            result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 1
        records = _records(db_session)
        assert records["a"].status == "failed"
        assert records["a"].error == PROJECT_MISSING_MESSAGE
        assert records["a"].last_successful is None
        assert records["b"].status == "completed"

    def test_candidate_query_failure_reports_unsuccessful(self, db_session, coordinator, github, github_client):
        error = OperationalError("SELECT", {}, Exception("database is down"))
        with patch.object(ProjectRepository, "get_stale", side_effect=error):
            result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 0
        assert result.success is False
        assert github.calls == []
        assert not coordinator.is_processing

    def test_no_candidates_is_success(self, db_session, coordinator, github_client):
        result = ProjectUpdater(db_session, github_client, coordinator).process_batch(5)

        assert result.processed_count == 0
        assert result.success is True

    def test_batch_records_last_run_and_releases_guard(self, db_session, coordinator, github, github_client,
                                                       add_project):
        add_project("alpha")
        github.add_repo("owner", "alpha")
        before = int(time.time())

        ProjectUpdater(db_session, github_client, coordinator).process_batch(3)

        assert coordinator.queue.last_run >= before
        assert coordinator.queue.current_batch_size == 3
        assert not coordinator.is_processing
        assert coordinator.try_acquire()
        coordinator.release()


class TestUpdateStatus:
    """Test get_update_status."""

    def test_status_combines_coordinator_and_counts(self, db_session, coordinator, add_project):
        now = utcnow()
        add_project("stale")
        add_project("fresh", last_updated=now)
        db_session.add_all([
            ProjectUpdate(project_name="stale", status="failed", error="x"),
            ProjectUpdate(project_name="fresh", status="completed"),
            ProjectUpdate(project_name="other", status="completed"),
        ])
        db_session.commit()
        coordinator.rate_limit.reset = 1700000000

        status = get_update_status(db_session, coordinator)

        assert status["queue"] == {"is_processing": False, "last_run": 0, "current_batch_size": 5}
        assert status["rate_limit"]["remaining"] == 60
        assert status["rate_limit"]["reset_time"].startswith("2023-11-14T22:13:20")
        assert status["statistics"] == {
            "pending": 0, "in_progress": 0, "completed": 2, "failed": 1, "total": 3,
        }
        assert status["projects_needing_update"] == 1

    def test_status_survives_count_errors(self, db_session, coordinator):
        error = OperationalError("SELECT", {}, Exception("database is down"))
        with patch.object(ProjectRepository, "count_stale", side_effect=error):
            status = get_update_status(db_session, coordinator)

        assert status["projects_needing_update"] == 0
        assert status["rate_limit"]["reset_time"] is None
