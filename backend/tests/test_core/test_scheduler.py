"""Tests for the background scheduler setup."""

from unittest.mock import patch

import pytest

import core.scheduler as scheduler_module
from core.scheduler import (
    get_scheduler_status,
    session_cleanup_job,
    setup_scheduler,
    shutdown_scheduler,
)
from services.login_throttle import LoginThrottle


@pytest.fixture
def scheduler():
    setup_scheduler()
    yield scheduler_module.scheduler
    shutdown_scheduler()


class TestScheduler:
    def test_status_when_not_started(self) -> None:
        assert get_scheduler_status() == {"running": False, "jobs": []}

    def test_session_sweep_is_scheduled(self, scheduler) -> None:
        status = get_scheduler_status()

        assert status["running"] is True
        assert [job["id"] for job in status["jobs"]] == ["session_cleanup"]
        assert status["jobs"][0]["next_run_time"] is not None

    def test_setup_twice_keeps_one_scheduler(self, scheduler) -> None:
        setup_scheduler()
        assert scheduler_module.scheduler is scheduler
        assert len(scheduler.get_jobs()) == 1

    def test_throttle_purge_is_scheduled_with_throttle(self) -> None:
        setup_scheduler(LoginThrottle())
        try:
            job_ids = [job["id"] for job in get_scheduler_status()["jobs"]]
            assert sorted(job_ids) == ["login_throttle_purge", "session_cleanup"]
        finally:
            shutdown_scheduler()

    def test_shutdown_resets(self) -> None:
        setup_scheduler()
        shutdown_scheduler()
        assert scheduler_module.scheduler is None


class TestSessionCleanupJob:
    def test_failure_is_logged_not_raised(self) -> None:
        with patch(
            "tasks.cleanup_sessions.cleanup_expired_sessions",
            side_effect=RuntimeError("database is locked"),
        ) as mock_cleanup:
            session_cleanup_job()
        mock_cleanup.assert_called_once()

    def test_runs_cleanup(self) -> None:
        with patch(
            "tasks.cleanup_sessions.cleanup_expired_sessions",
            return_value={"deleted_count": 3},
        ) as mock_cleanup:
            session_cleanup_job()
        mock_cleanup.assert_called_once_with()
