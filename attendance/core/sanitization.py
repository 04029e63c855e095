"""Input sanitization utilities."""
import re
import uuid
from typing import Optional

from attendance.core.constants import OTP_LENGTH


# Maximum length constraints for student-declared fields
MAX_NAME_LENGTH = 200
MAX_ROLL_NUMBER_LENGTH = 50
MAX_STUDENT_ID_LENGTH = 50
MAX_EMAIL_LENGTH = 254

_OTP_PATTERN = re.compile(rf"^\d{{{OTP_LENGTH}}}$", re.ASCII)


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input to prevent XSS attacks.

    Strips HTML tags and normalizes whitespace without escaping entities;
    the dashboard escapes output when rendering. With ``strip_html=False``
    angle brackets are kept verbatim as ordinary characters.

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce
        strip_html: Whether to strip HTML tags (default True)

    Returns:
        Sanitized text with HTML tags removed and whitespace normalized

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

        # Malformed tags or encoded attacks left over after stripping
        if '<' in sanitized or '>' in sanitized:
            raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized).strip()

    return sanitized


def validate_otp_format(code: str) -> str:
    """
    Validate a supplied one-time code.

    Codes are exactly six ASCII digits. Surrounding whitespace is ignored.

    Raises:
        ValueError: If the code is not six digits
    """
    if not isinstance(code, str):
        raise ValueError("OTP must be a string")

    code = code.strip()
    if not _OTP_PATTERN.match(code):
        raise ValueError(f"OTP must be exactly {OTP_LENGTH} digits")

    return code


def validate_identifier(value: str, label: str = "Identifier") -> str:
    """
    Validate a session or claim id.

    Ids are UUID strings. Rejecting anything else early keeps arbitrary
    path segments out of the lookups and the logs.

    Raises:
        ValueError: If the value is not a canonical UUID string
    """
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")

    value = value.strip()
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        raise ValueError(f"{label} format is invalid")

    if str(parsed) != value.lower():
        raise ValueError(f"{label} format is invalid")

    return value.lower()
