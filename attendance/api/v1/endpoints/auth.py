"""Authentication endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from attendance.schemas import (
    SuccessResponse,
    TeacherLoginRequest,
    TeacherLoginResponse,
    TeacherProfile,
)
from attendance.core.security import authenticate_teacher, create_access_token, get_configured_teacher
from attendance.core.constants import FOCUSED_SESSION_COOKIE, TEACHER_TOKEN_COOKIE
from attendance.core.rate_limit import limiter, RATE_LIMITS
from attendance.core.logging_config import get_logger
from attendance.core import config
from attendance.api.deps import get_current_teacher_id

logger = get_logger(__name__)
router = APIRouter()


@router.post("/teacher/login", response_model=TeacherLoginResponse)
@limiter.limit(RATE_LIMITS["teacher_login"])
async def teacher_login(
    request: Request,
    credentials: TeacherLoginRequest,
    response: Response,
) -> TeacherLoginResponse:
    """
    Log the instructor in and set a JWT in an httpOnly cookie.

    The account lookup is a placeholder for a real identity provider; the
    cookie only tells the dashboard which teacher owns which sessions.

    Example:
        Request:
            POST /api/v1/auth/teacher/login
            {
                "email": "prof@example.com",
                "password": "password123"
            }

        Response (200):
            {
                "success": true,
                "message": "Welcome back! You're now logged in.",
                "teacher": {"id": "1", "name": "Professor Smith", "email": "prof@example.com"}
            }
            Set-Cookie: teacher_token=eyJhbGc...; HttpOnly; SameSite=Lax

        Response (401):
            {
                "detail": "Incorrect email or password"
            }
    """
    teacher = authenticate_teacher(credentials.email, credentials.password)
    if teacher is None:
        logger.info("teacher_login_failed")
        raise HTTPException(status_code=401, detail="Incorrect email or password")

    access_token = create_access_token(data={"sub": teacher.id})

    response.set_cookie(
        key=TEACHER_TOKEN_COOKIE,
        value=access_token,
        httponly=True,
        secure=config.settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

    logger.info("teacher_logged_in", teacher_id=teacher.id)
    return TeacherLoginResponse(
        message="Welcome back! You're now logged in.",
        teacher=TeacherProfile(id=teacher.id, name=teacher.name, email=teacher.email),
    )


@router.post("/teacher/logout", response_model=SuccessResponse)
async def teacher_logout(response: Response) -> SuccessResponse:
    """
    Clear the authentication cookie and the dashboard's focused session.

    Can be called even if the user is not logged in.
    """
    response.delete_cookie(key=TEACHER_TOKEN_COOKIE)
    response.delete_cookie(key=FOCUSED_SESSION_COOKIE)
    return SuccessResponse(success=True, message="Logged out successfully")


@router.get("/me", response_model=TeacherProfile)
async def current_teacher(teacher_id: str = Depends(get_current_teacher_id)) -> TeacherProfile:
    """Return the logged-in teacher."""
    teacher = get_configured_teacher()
    if teacher.id != teacher_id:
        raise HTTPException(status_code=401, detail="Unknown teacher")
    return TeacherProfile(id=teacher.id, name=teacher.name, email=teacher.email)
