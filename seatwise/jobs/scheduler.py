"""Scheduler configuration for periodic jobs"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
import structlog

from seatwise.jobs import tasks
from seatwise.state import AppState

logger = structlog.get_logger()


def create_scheduler(state: AppState) -> AsyncIOScheduler:
    """Build (but do not start) the scheduler for one application state"""
    settings = state.settings
    scheduler = AsyncIOScheduler(timezone="UTC")

    scheduler.add_job(
        tasks.expire_pending_approvals,
        "interval",
        seconds=settings.approval_check_interval_seconds,
        id="expire_pending_approvals",
        kwargs={"state": state},
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        tasks.promote_waitlists,
        "interval",
        seconds=settings.waitlist_check_interval_seconds,
        id="promote_waitlists",
        kwargs={"state": state},
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        tasks.sweep_idempotency,
        "interval",
        seconds=settings.idempotency_sweep_interval_seconds,
        id="sweep_idempotency",
        kwargs={"state": state},
    )
    scheduler.add_job(
        tasks.sweep_locks,
        "interval",
        seconds=settings.lock_sweep_interval_seconds,
        id="sweep_locks",
        kwargs={"state": state},
    )

    logger.info("Scheduler configured", jobs=[job.id for job in scheduler.get_jobs()])
    return scheduler
