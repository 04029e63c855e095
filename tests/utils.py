"""Shared helpers for tests."""
import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from attendance.services.store import AttendanceStore

BASE_URL = "https://attend.example.edu"
START = datetime(2025, 3, 4, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock; call it to read the time, ``advance`` to move it."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


def make_store(clock: FakeClock, seed: Optional[int] = 1234) -> AttendanceStore:
    """Store with a fake clock and a seeded random source."""
    rng = random.Random(seed) if seed is not None else None
    return AttendanceStore(BASE_URL, clock=clock, rng=rng)
