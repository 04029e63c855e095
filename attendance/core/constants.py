"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# One-Time Code Configuration
# Codes are 6-digit numeric strings drawn uniformly from 100000..999999
OTP_LENGTH = 6
OTP_MIN_VALUE = 100000
OTP_MAX_VALUE = 999999
OTP_VALIDITY_SECONDS = 20

# Verification Attempts
# Exactly 3 total tries per claim before the student is locked out
MAX_VERIFICATION_ATTEMPTS = 3
LOCKOUT_REDIRECT_SECONDS = 3
LOCKOUT_REDIRECT_PATH = "/"

# Join Links
# Students reach a session through {PUBLIC_BASE_URL}/attend/{session_id}
JOIN_PATH_SEGMENT = "attend"

# Persisted State
# Bump STATE_SCHEMA_VERSION whenever the snapshot layout changes
STATE_SCHEMA_VERSION = 1
DEFAULT_STORAGE_KEY = "attendance-app-storage"

# Export
EXPORT_SHEET_NAME = "Attendance"
EXPORT_COLUMNS = ("Student ID", "Name", "Roll Number", "Time", "Status")
STATUS_VERIFIED = "Verified"
STATUS_PENDING = "Pending"

# Cookies
TEACHER_TOKEN_COOKIE = "teacher_token"
FOCUSED_SESSION_COOKIE = "focused_session"
ATTEMPTS_COOKIE_PREFIX = "otp_attempts_"

# JWT Token Configuration
# Token expiration time in minutes (8 hours)
ACCESS_TOKEN_EXPIRE_MINUTES = 480
