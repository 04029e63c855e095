"""Instructor session endpoints."""
from typing import List
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from attendance.api.deps import (
    get_current_teacher_id,
    get_db,
    get_owned_session,
    get_store,
    get_timezone,
    persist,
)
from attendance.schemas import ClaimResponse, OtpResponse, SessionDetail, SuccessResponse
from attendance.models import AttendanceSession
from attendance.services.store import AttendanceStore
from attendance.services.export import XLSX_MEDIA_TYPE, build_workbook, export_filename
from attendance.services.join_link import render_join_qr
from attendance.core.constants import FOCUSED_SESSION_COOKIE
from attendance.core.rate_limit import limiter, RATE_LIMITS
from attendance.core.utils import seconds_remaining, to_timezone
from attendance.core.logging_config import get_logger
from attendance.core import config

logger = get_logger(__name__)
router = APIRouter()


def _detail(store: AttendanceStore, session: AttendanceSession) -> SessionDetail:
    return SessionDetail.build(session, store.ledger.summary(session.id), store.clock())


@router.post("", response_model=SessionDetail)
@limiter.limit(RATE_LIMITS["teacher_write"])
async def create_session_endpoint(
    request: Request,
    response: Response,
    teacher_id: str = Depends(get_current_teacher_id),
    store: AttendanceStore = Depends(get_store),
    db: Session = Depends(get_db),
):
    """
    Open a new attendance session and focus the dashboard on it.

    The response carries the join link students scan; no code is issued
    until the instructor asks for one.

    Example:
        Response (200):
            {
                "id": "0f6c1c3e-...",
                "join_link": "https://attend.example.edu/attend/0f6c1c3e-...",
                "is_active": true,
                "otp": null,
                ...
            }
    """
    with persist(db, store):
        session = store.registry.create_session(teacher_id)

    response.set_cookie(
        key=FOCUSED_SESSION_COOKIE,
        value=session.id,
        httponly=True,
        secure=config.settings.ENVIRONMENT == "production",
        samesite="lax",
    )
    return _detail(store, session)


@router.get("", response_model=List[SessionDetail])
@limiter.limit(RATE_LIMITS["teacher_read"])
async def list_sessions_endpoint(
    request: Request,
    teacher_id: str = Depends(get_current_teacher_id),
    store: AttendanceStore = Depends(get_store),
):
    """List every session the teacher opened, oldest first, ended ones included."""
    return [_detail(store, s) for s in store.registry.list_for_teacher(teacher_id)]


@router.get("/{session_id}", response_model=SessionDetail)
@limiter.limit(RATE_LIMITS["teacher_read"])
async def get_session_endpoint(
    request: Request,
    session: AttendanceSession = Depends(get_owned_session),
    store: AttendanceStore = Depends(get_store),
):
    """Session detail with the live code and its countdown."""
    return _detail(store, session)


@router.post("/{session_id}/otp", response_model=OtpResponse)
@limiter.limit(RATE_LIMITS["teacher_write"])
async def issue_otp_endpoint(
    request: Request,
    session: AttendanceSession = Depends(get_owned_session),
    store: AttendanceStore = Depends(get_store),
    db: Session = Depends(get_db),
):
    """
    Issue a fresh 6-digit code valid for 20 seconds.

    Any earlier code for this session stops working immediately, including
    for claims that were submitted while it was live.

    Raises:
        HTTPException: 409 if the session has ended
    """
    with persist(db, store):
        code = store.registry.issue_otp(session.id)
        updated = store.registry.get(session.id)

    return OtpResponse(
        session_id=updated.id,
        otp=code,
        otp_generated_at=updated.otp_generated_at,
        expires_at=updated.expires_at,
        seconds_remaining=seconds_remaining(updated.expires_at, store.clock()),
    )


@router.post("/{session_id}/end", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["teacher_write"])
async def end_session_endpoint(
    request: Request,
    session: AttendanceSession = Depends(get_owned_session),
    store: AttendanceStore = Depends(get_store),
    db: Session = Depends(get_db),
):
    """Close the session. Ending an already-ended session succeeds again."""
    with persist(db, store):
        store.registry.end_session(session.id)
    return SuccessResponse(success=True, message="The attendance session has been closed.")


@router.get("/{session_id}/claims", response_model=List[ClaimResponse])
@limiter.limit(RATE_LIMITS["teacher_read"])
async def list_claims_endpoint(
    request: Request,
    session: AttendanceSession = Depends(get_owned_session),
    store: AttendanceStore = Depends(get_store),
):
    """Roster of the session in submission order."""
    return [ClaimResponse.build(c) for c in store.list_by_session(session.id)]


@router.get("/{session_id}/export")
@limiter.limit(RATE_LIMITS["teacher_read"])
async def export_claims_endpoint(
    request: Request,
    session: AttendanceSession = Depends(get_owned_session),
    store: AttendanceStore = Depends(get_store),
):
    """Download the roster as an .xlsx workbook."""
    tz = get_timezone()
    claims = store.list_by_session(session.id)
    buffer = build_workbook(claims, tz)
    filename = export_filename(to_timezone(store.clock(), tz).date())

    logger.info("roster_exported", session_id=session.id, rows=len(claims))
    return StreamingResponse(
        buffer,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{session_id}/qr")
@limiter.limit(RATE_LIMITS["teacher_read"])
async def join_qr_endpoint(
    request: Request,
    session: AttendanceSession = Depends(get_owned_session),
):
    """SVG QR code of the session's join link."""
    return StreamingResponse(render_join_qr(session.join_link), media_type="image/svg+xml")
