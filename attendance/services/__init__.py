from .export import build_export_rows, build_workbook, export_filename
from .join_link import build_join_link, extract_session_id, render_join_qr
from .ledger import AttendanceLedger, AttendanceSummary
from .otp import generate_otp
from .persistence import StateRepository, load_store, save_store
from .registry import SessionRegistry
from .store import AttendanceStore
from .throttle import AttemptThrottle

__all__ = [
    # otp
    "generate_otp",
    # sessions
    "SessionRegistry",
    "build_join_link",
    "extract_session_id",
    "render_join_qr",
    # claims
    "AttendanceLedger",
    "AttendanceSummary",
    "AttemptThrottle",
    # state
    "AttendanceStore",
    "StateRepository",
    "load_store",
    "save_store",
    # export
    "build_export_rows",
    "build_workbook",
    "export_filename",
]
