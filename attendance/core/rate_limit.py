"""Rate limiting configuration."""
import os
from slowapi import Limiter
from slowapi.util import get_remote_address


def get_client_ip(request):
    """Get client IP for rate limiting, considering proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()

    return get_remote_address(request)


# Uses Redis if REDIS_URL is set, falls back to memory for local dev.
# Limits are keyed by client and endpoint, not by URL, so one client shares
# a single verify budget across every claim id.
limiter = Limiter(
    key_func=get_client_ip,
    key_style="endpoint",
    default_limits=["100/minute"],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window"
)

# A classroom shares one NAT address on campus WiFi, so public limits are
# sized for a full lecture hall submitting within the same minute.
# The per-claim attempt counter is client-held; the verify limit is the
# server-side backstop against code guessing.
RATE_LIMITS = {
    # Public endpoints
    "attend_lookup": "300/minute",
    "submit_claim": "200/minute",
    "verify_otp": "120/minute",
    "teacher_login": "10/minute",

    # Teacher endpoints
    "teacher_read": "200/minute",
    "teacher_write": "60/minute",
}
