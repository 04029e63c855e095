"""Database package."""
from attendance.db.session import engine, SessionLocal, get_db, get_db_context, create_tables
from attendance.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "create_tables", "Base"]
