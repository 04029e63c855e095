"""One-time code generation."""
import random
import secrets
from datetime import timedelta
from typing import Optional

from attendance.core.constants import OTP_MAX_VALUE, OTP_MIN_VALUE, OTP_VALIDITY_SECONDS
from attendance.core.utils import Clock, utc_now
from attendance.models import OneTimeCode

_system_random = secrets.SystemRandom()


def generate_otp(
    validity_seconds: int = OTP_VALIDITY_SECONDS,
    clock: Clock = utc_now,
    rng: Optional[random.Random] = None,
) -> OneTimeCode:
    """
    Mint a 6-digit code valid for ``validity_seconds`` from now.

    The code is drawn uniformly from 100000..999999, so it is always six
    characters with a non-zero leading digit.

    Args:
        validity_seconds: Lifetime of the code
        clock: Source of the current time
        rng: Random source; defaults to the OS CSPRNG

    Returns:
        OneTimeCode with code, issued_at and expires_at = issued_at + validity
    """
    rng = rng or _system_random
    code = str(rng.randint(OTP_MIN_VALUE, OTP_MAX_VALUE))
    issued_at = clock()
    return OneTimeCode(
        code=code,
        issued_at=issued_at,
        expires_at=issued_at + timedelta(seconds=validity_seconds),
    )
