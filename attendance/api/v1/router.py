"""Main API router for v1."""
from fastapi import APIRouter

from attendance.api.v1.endpoints import attend, auth, dashboard, sessions, sse

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(dashboard.router, tags=["Dashboard"])
api_router.include_router(attend.router, tags=["Attendance"])
api_router.include_router(sse.router, tags=["SSE"])
