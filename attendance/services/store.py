"""In-process attendance store grouping the registry and the ledger."""
import random
import threading
from typing import List, Optional

from attendance.core.constants import OTP_VALIDITY_SECONDS
from attendance.core.utils import Clock, utc_now
from attendance.models import AttendanceClaim, StateSnapshot
from attendance.services.ledger import AttendanceLedger
from attendance.services.registry import SessionRegistry


class AttendanceStore:
    """
    The registry and ledger of one process plus the lock that serializes them.

    Callers hold ``lock`` around a mutation and the write-through save that
    follows it, so a snapshot never captures half of a request.
    """

    def __init__(
        self,
        base_url: str,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
        otp_validity_seconds: int = OTP_VALIDITY_SECONDS,
    ):
        self.clock = clock
        self.registry = SessionRegistry(
            base_url,
            clock=clock,
            rng=rng,
            otp_validity_seconds=otp_validity_seconds,
        )
        self.ledger = AttendanceLedger(self.registry, clock=clock)
        self.lock = threading.RLock()

    def list_by_session(self, session_id: str) -> List[AttendanceClaim]:
        """Roster for a known session (NotFoundError for unknown ids)."""
        session = self.registry.get(session_id)
        return self.ledger.list_by_session(session.id)

    def snapshot(self) -> StateSnapshot:
        with self.lock:
            return StateSnapshot(sessions=self.registry.all(), claims=self.ledger.all())

    def restore(self, snapshot: StateSnapshot) -> None:
        with self.lock:
            self.registry.load(snapshot.sessions)
            self.ledger.load(snapshot.claims)
