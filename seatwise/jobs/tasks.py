"""Periodic job bodies"""

from typing import Optional
import structlog

from seatwise.state import AppState, get_state

logger = structlog.get_logger()


async def expire_pending_approvals(state: Optional[AppState] = None) -> int:
    """Reject large-party bookings nobody approved in time"""
    state = state or get_state()
    rejected = await state.bookings.expire_pending_approvals()
    if rejected:
        logger.info("Expired pending approvals", rejected=rejected)
    return rejected


async def promote_waitlists(state: Optional[AppState] = None):
    """Promotion pass over every live waitlist queue"""
    state = state or get_state()
    summary = await state.waitlist.process_all()
    if summary.promoted or summary.expired:
        logger.info(
            "Waitlist pass finished",
            promoted=summary.promoted,
            expired=summary.expired,
            waiting=summary.waiting,
        )
    return summary


async def sweep_idempotency(state: Optional[AppState] = None) -> int:
    """Evict expired idempotency records"""
    state = state or get_state()
    return state.idempotency.sweep()


async def sweep_locks(state: Optional[AppState] = None) -> int:
    state = state or get_state()
    return state.locks.sweep()
