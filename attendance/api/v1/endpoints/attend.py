"""Student-facing attendance endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from attendance.api.deps import get_db, get_store, persist, valid_claim_id
from attendance.schemas import (
    ClaimCreate,
    ClaimResponse,
    PublicSession,
    VerificationResponse,
    VerifyRequest,
)
from attendance.models import VerificationOutcome
from attendance.services.store import AttendanceStore
from attendance.services.join_link import extract_session_id
from attendance.services.throttle import AttemptThrottle
from attendance.core.constants import ATTEMPTS_COOKIE_PREFIX
from attendance.core.sanitization import validate_identifier
from attendance.core.exceptions import NotFoundError
from attendance.core.rate_limit import limiter, RATE_LIMITS
from attendance.core import config

router = APIRouter()

INACTIVE_SESSION_MESSAGE = "This attendance session is not active or doesn't exist."


def _resolve_session_id(token: str) -> str:
    try:
        return validate_identifier(extract_session_id(token), "Session id")
    except ValueError:
        raise NotFoundError(INACTIVE_SESSION_MESSAGE)


def _attempts_cookie(claim_id: str) -> str:
    return f"{ATTEMPTS_COOKIE_PREFIX}{claim_id}"


def _retry_message(remaining: int) -> str:
    noun = "attempt" if remaining == 1 else "attempts"
    return f"Incorrect or expired OTP. {remaining} {noun} remaining."


@router.get("/attend/{token}", response_model=PublicSession)
@limiter.limit(RATE_LIMITS["attend_lookup"])
async def attend_lookup_endpoint(
    request: Request,
    token: str,
    store: AttendanceStore = Depends(get_store),
):
    """
    Resolve the session behind a join link for the claim form.

    Only active sessions are returned and the live code is never included.

    Raises:
        HTTPException: 404 if the session has ended or never existed
    """
    session = store.registry.find_active_by_id(_resolve_session_id(token))
    if session is None:
        raise HTTPException(status_code=404, detail=INACTIVE_SESSION_MESSAGE)

    return PublicSession(
        id=session.id,
        created_at=session.created_at,
        is_active=session.is_active,
        otp_validity_seconds=config.settings.OTP_VALIDITY_SECONDS,
    )


@router.post("/attend/{token}/claims", response_model=ClaimResponse)
@limiter.limit(RATE_LIMITS["submit_claim"])
async def submit_claim_endpoint(
    request: Request,
    token: str,
    claim: ClaimCreate,
    store: AttendanceStore = Depends(get_store),
    db: Session = Depends(get_db),
):
    """
    Step one: file the student's details as a pending claim.

    Example:
        Request:
            POST /api/v1/attend/0f6c1c3e-.../claims
            {
                "name": "John Doe",
                "roll_number": "CS12345",
                "student_id": "STD12345"
            }

        Response (200):
            {
                "id": "9b2d...",
                "session_id": "0f6c1c3e-...",
                "verified": false,
                "status": "Pending",
                ...
            }

    Raises:
        HTTPException: 400 if a field is empty, 404 for unknown sessions,
            409 once the session has ended
    """
    session_id = _resolve_session_id(token)
    with persist(db, store):
        record = store.ledger.submit_claim(
            session_id,
            claim.name,
            claim.roll_number,
            claim.student_id,
        )
    return ClaimResponse.build(record)


@router.post("/claims/{claim_id}/verify", response_model=VerificationResponse)
@limiter.limit(RATE_LIMITS["verify_otp"])
async def verify_claim_endpoint(
    request: Request,
    response: Response,
    body: VerifyRequest,
    claim_id: str = Depends(valid_claim_id),
    store: AttendanceStore = Depends(get_store),
    db: Session = Depends(get_db),
):
    """
    Step two: check the code the instructor announced.

    The failed-attempt count travels in a per-claim cookie. After the third
    failure the response tells the client to leave the page; any further
    call answers 429 with the same instruction.

    Example:
        Response (200, wrong code):
            {
                "verified": false,
                "message": "Incorrect or expired OTP. 2 attempts remaining.",
                "failed_attempts": 1,
                "attempts_remaining": 2,
                "locked_out": false
            }
    """
    settings = config.settings
    cookie_name = _attempts_cookie(claim_id)
    throttle = AttemptThrottle.from_cookie(
        request.cookies.get(cookie_name),
        max_attempts=settings.MAX_VERIFICATION_ATTEMPTS,
        redirect_after_seconds=settings.LOCKOUT_REDIRECT_SECONDS,
    )
    throttle.ensure_can_attempt()

    with persist(db, store):
        outcome = store.ledger.verify(claim_id, body.otp)

    throttle.record(outcome)

    if outcome is VerificationOutcome.SUCCESS:
        response.delete_cookie(key=cookie_name)
        return VerificationResponse(
            verified=True,
            message="Your attendance has been successfully verified.",
            failed_attempts=throttle.failures,
            attempts_remaining=throttle.remaining,
        )

    response.set_cookie(
        key=cookie_name,
        value=throttle.to_cookie(),
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
    )

    if throttle.locked_out:
        return VerificationResponse(
            verified=False,
            message="You've reached the maximum number of attempts.",
            failed_attempts=throttle.failures,
            attempts_remaining=0,
            locked_out=True,
            redirect_to=throttle.redirect_to,
            redirect_after_seconds=throttle.redirect_after_seconds,
        )

    return VerificationResponse(
        verified=False,
        message=_retry_message(throttle.remaining),
        failed_attempts=throttle.failures,
        attempts_remaining=throttle.remaining,
    )
