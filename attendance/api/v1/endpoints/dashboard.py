"""Instructor dashboard endpoint."""
from typing import Optional
from fastapi import APIRouter, Cookie, Depends, Request

from attendance.api.deps import get_current_teacher_id, get_store
from attendance.schemas import DashboardResponse, SessionDetail
from attendance.services.store import AttendanceStore
from attendance.core.constants import FOCUSED_SESSION_COOKIE
from attendance.core.rate_limit import limiter, RATE_LIMITS

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
@limiter.limit(RATE_LIMITS["teacher_read"])
async def dashboard_endpoint(
    request: Request,
    focused_session: Optional[str] = Cookie(None, alias=FOCUSED_SESSION_COOKIE),
    teacher_id: str = Depends(get_current_teacher_id),
    store: AttendanceStore = Depends(get_store),
):
    """
    The session the instructor is looking at plus their session history.

    Which session is focused is dashboard state kept in a cookie; the store
    itself allows any number of sessions to be active at once.
    """
    now = store.clock()
    sessions = store.registry.list_for_teacher(teacher_id)
    details = {s.id: SessionDetail.build(s, store.ledger.summary(s.id), now) for s in sessions}

    return DashboardResponse(
        session=details.get(focused_session) if focused_session else None,
        sessions=list(details.values()),
    )
