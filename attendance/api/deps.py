"""Shared API dependencies."""
from contextlib import contextmanager
from typing import Iterator
from zoneinfo import ZoneInfo
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from attendance.core import config
from attendance.core.exceptions import NotFoundError, PersistenceError
from attendance.core.sanitization import validate_identifier
from attendance.core.security import verify_teacher_token
from attendance.db import get_db, get_db_context
from attendance.models import AttendanceSession
from attendance.services.persistence import save_store
from attendance.services.store import AttendanceStore


def get_timezone() -> ZoneInfo:
    return ZoneInfo(config.settings.TIMEZONE)


def get_store(request: Request) -> AttendanceStore:
    """The process-wide store loaded during application startup."""
    return request.app.state.store


def get_current_teacher_id(payload: dict = Depends(verify_teacher_token)) -> str:
    return payload["sub"]


def valid_session_id(session_id: str) -> str:
    """Malformed ids cannot name a session, so they are reported as unknown."""
    try:
        return validate_identifier(session_id, "Session id")
    except ValueError:
        raise NotFoundError("Session not found")


def valid_claim_id(claim_id: str) -> str:
    try:
        return validate_identifier(claim_id, "Claim id")
    except ValueError:
        raise NotFoundError("Attendance record not found")


def get_owned_session(
    session_id: str = Depends(valid_session_id),
    teacher_id: str = Depends(get_current_teacher_id),
    store: AttendanceStore = Depends(get_store),
) -> AttendanceSession:
    """Resolve a session the logged-in teacher created (403 for anyone else's)."""
    session = store.registry.get(session_id)
    if session.teacher_id != teacher_id:
        raise HTTPException(status_code=403, detail="Not authorized for this session")
    return session


@contextmanager
def persist(db: Session, store: AttendanceStore) -> Iterator[AttendanceStore]:
    """
    Apply the mutations in the block and save them before releasing the lock.

    Nothing is written when the block leaves the store unchanged. If the
    save fails the store is restored to its state before the block, so the
    caller that receives the 500 never sees its change later.

    Example:
        with persist(db, store):
            store.registry.end_session(session_id)
    """
    with store.lock:
        before = store.snapshot()
        yield store
        if store.snapshot() == before:
            return
        try:
            save_store(db, store, config.settings.STORAGE_KEY)
        except PersistenceError:
            store.restore(before)
            raise


__all__ = [
    "get_db",
    "get_db_context",
    "get_store",
    "get_timezone",
    "get_current_teacher_id",
    "get_owned_session",
    "valid_session_id",
    "valid_claim_id",
    "persist",
    "verify_teacher_token",
]
