"""
Background task scheduler for session maintenance.

Uses APScheduler so the expired-session sweep runs on its own thread for the
lifetime of the process.
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from models.config import settings
from services.login_throttle import LoginThrottle


# Global scheduler instance
scheduler: BackgroundScheduler | None = None


def session_cleanup_job() -> None:
    """
    Scheduled job to delete expired sessions.

    A failure is logged and the job simply runs again on the next interval;
    it never propagates into the scheduler thread.
    """
    from tasks.cleanup_sessions import cleanup_expired_sessions

    try:
        cleanup_expired_sessions()
    except Exception as e:
        logger.error(f"Scheduled session cleanup failed, will retry next cycle: {e}")


def setup_scheduler(login_throttle: LoginThrottle | None = None) -> None:
    """
    Configure and start the background scheduler.

    Schedules:
    - Session cleanup: every SESSION_SWEEP_INTERVAL_MINUTES (hourly by default)
    - Login throttle purge: same interval, when a throttle is given
    """
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already initialized")
        return

    scheduler = BackgroundScheduler()

    interval = settings.SESSION_SWEEP_INTERVAL_MINUTES
    scheduler.add_job(
        session_cleanup_job,
        IntervalTrigger(minutes=interval),
        id="session_cleanup",
        name="Expired Session Cleanup",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    if login_throttle is not None:
        scheduler.add_job(
            login_throttle.purge,
            IntervalTrigger(minutes=interval),
            id="login_throttle_purge",
            name="Login Throttle Purge",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )

    scheduler.start()
    logger.info(f"Background scheduler started with session cleanup every {interval} min")


def shutdown_scheduler() -> None:
    """Gracefully shutdown the scheduler."""
    global scheduler

    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Background scheduler stopped")
    scheduler = None


def get_scheduler_status() -> dict:
    """Get current scheduler status for monitoring."""
    if scheduler is None:
        return {"running": False, "jobs": []}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": (
                    job.next_run_time.isoformat() if job.next_run_time else None
                ),
            }
        )

    return {"running": scheduler.running, "jobs": jobs}
