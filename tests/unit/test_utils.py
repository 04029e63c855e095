from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from attendance.core.utils import format_local, seconds_remaining, to_timezone, to_utc

NOW = datetime(2025, 3, 4, 9, 0, 0, tzinfo=timezone.utc)


def test_seconds_remaining_counts_down():
    expires_at = NOW + timedelta(seconds=20)

    assert seconds_remaining(expires_at, NOW) == 20
    assert seconds_remaining(expires_at, NOW + timedelta(seconds=7.5)) == 12
    assert seconds_remaining(expires_at, NOW + timedelta(seconds=19.9)) == 0


def test_seconds_remaining_never_negative():
    expires_at = NOW + timedelta(seconds=20)
    assert seconds_remaining(expires_at, NOW + timedelta(minutes=5)) == 0


def test_seconds_remaining_without_code():
    assert seconds_remaining(None, NOW) == 0


def test_seconds_remaining_naive_is_utc():
    expires_at = datetime(2025, 3, 4, 9, 0, 10)
    assert seconds_remaining(expires_at, NOW) == 10


def test_to_utc():
    # Naive datetimes are assumed to be UTC
    assert to_utc(datetime(2025, 3, 4, 9, 0)) == NOW

    eastern = NOW.astimezone(ZoneInfo("America/New_York"))
    assert to_utc(eastern).tzinfo == timezone.utc
    assert to_utc(eastern) == NOW


def test_to_timezone():
    local = to_timezone(NOW, ZoneInfo("Asia/Kolkata"))
    assert (local.hour, local.minute) == (14, 30)


def test_format_local():
    assert format_local(NOW, ZoneInfo("UTC")) == "2025-03-04 09:00:00"
    assert format_local(NOW, ZoneInfo("Europe/Berlin")) == "2025-03-04 10:00:00"
