"""Server-Sent Events endpoints."""
import asyncio
import json
from fastapi import APIRouter, Request, Depends
from fastapi.responses import StreamingResponse

from attendance.api.deps import get_owned_session, get_store
from attendance.models import AttendanceSession
from attendance.services.store import AttendanceStore
from attendance.core.config import settings
from attendance.core.exceptions import AttendanceError
from attendance.core.logging_config import get_logger
from attendance.core.utils import seconds_remaining

logger = get_logger(__name__)
router = APIRouter()


def countdown_payload(store: AttendanceStore, session_id: str) -> dict:
    """
    One countdown tick for the instructor's display.

    Re-reads the session each tick so a reissued code or an ended session
    shows up on the next update. Display only; verification does its own
    expiry check.
    """
    session = store.registry.get(session_id)
    summary = store.ledger.summary(session_id)
    return {
        "session_id": session.id,
        "is_active": session.is_active,
        "otp": session.otp,
        "expires_at": session.expires_at.isoformat() if session.expires_at else None,
        "seconds_remaining": seconds_remaining(session.expires_at, store.clock()),
        "total_claims": summary.total,
        "verified_claims": summary.verified,
    }


async def event_generator(request: Request, data_func, interval: int = 1):
    """
    Generic SSE event generator.

    Args:
        request: FastAPI request object to check for client disconnect
        data_func: Function that returns the data to send
        interval: Seconds between updates
    """
    try:
        while True:
            if await request.is_disconnected():
                break

            try:
                data = data_func()
                yield f"data: {json.dumps(data)}\n\n"
            except AttendanceError as e:
                yield f"event: error\ndata: {json.dumps({'error': e.message})}\n\n"
                break
            except Exception as e:
                logger.exception("sse_unexpected_error", error=str(e))
                yield f"event: error\ndata: {json.dumps({'error': 'Internal error'})}\n\n"
                break

            await asyncio.sleep(interval)

    except asyncio.CancelledError:
        # Client disconnected
        pass


@router.get("/sse/sessions/{session_id}")
async def sse_session_countdown(
    request: Request,
    session: AttendanceSession = Depends(get_owned_session),
    store: AttendanceStore = Depends(get_store),
):
    """
    SSE stream of the code countdown and roster counts for one session.

    Requires teacher authentication via cookie. Updates once per second.
    The client should reconnect automatically if disconnected.
    """
    def get_data():
        return countdown_payload(store, session.id)

    return StreamingResponse(
        event_generator(request, get_data, interval=settings.SSE_COUNTDOWN_INTERVAL),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering in nginx
        }
    )
