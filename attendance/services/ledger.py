"""Attendance ledger: student claims and the code verification protocol."""
import uuid
from typing import Dict, Iterable, List, NamedTuple

from attendance.core.exceptions import InactiveSessionError, NotFoundError, ValidationError
from attendance.core.logging_config import get_logger
from attendance.core.sanitization import (
    MAX_NAME_LENGTH,
    MAX_ROLL_NUMBER_LENGTH,
    MAX_STUDENT_ID_LENGTH,
    sanitize_text,
)
from attendance.core.utils import Clock, utc_now
from attendance.models import AttendanceClaim, VerificationOutcome
from attendance.services.registry import SessionRegistry

logger = get_logger(__name__)

_IDENTITY_FIELDS = (
    ("student_name", "Name", MAX_NAME_LENGTH),
    ("roll_number", "Roll number", MAX_ROLL_NUMBER_LENGTH),
    ("student_id", "Student ID", MAX_STUDENT_ID_LENGTH),
)


class AttendanceSummary(NamedTuple):
    total: int
    verified: int

    @property
    def pending(self) -> int:
        return self.total - self.verified


def _clean_identity_field(value: str, field: str, label: str, max_length: int) -> str:
    try:
        # Free text: markup is escaped by whoever renders it, never rewritten here
        cleaned = sanitize_text(
            value if value is not None else "",
            max_length=max_length,
            strip_html=False,
        )
    except ValueError as e:
        raise ValidationError(f"{label}: {e}", field=field)

    if not cleaned:
        raise ValidationError(f"{label} is required", field=field)
    return cleaned


class AttendanceLedger:
    """
    Owns attendance claims and is the only writer of ``verified``.

    The registry is consulted read-only: at submission time to check that
    the session is active, and at verification time for the live code.
    """

    def __init__(self, registry: SessionRegistry, clock: Clock = utc_now):
        self._registry = registry
        self._clock = clock
        self._claims: Dict[str, AttendanceClaim] = {}

    def __len__(self) -> int:
        return len(self._claims)

    def submit_claim(
        self,
        session_id: str,
        student_name: str,
        roll_number: str,
        student_id: str,
    ) -> AttendanceClaim:
        """
        Record a pending claim against an active session.

        Raises:
            NotFoundError: Unknown session id
            InactiveSessionError: The session has ended
            ValidationError: An identity field is empty, too long or contains markup
        """
        session = self._registry.get(session_id)
        if not session.is_active:
            raise InactiveSessionError("This attendance session is not active")

        values = {}
        raw = {"student_name": student_name, "roll_number": roll_number, "student_id": student_id}
        for field, label, max_length in _IDENTITY_FIELDS:
            values[field] = _clean_identity_field(raw[field], field, label, max_length)

        claim = AttendanceClaim(
            id=str(uuid.uuid4()),
            session_id=session.id,
            timestamp=self._clock(),
            **values,
        )
        self._claims[claim.id] = claim

        logger.info("claim_submitted", claim_id=claim.id, session_id=session.id)
        return claim

    def verify(self, claim_id: str, supplied_code: str) -> VerificationOutcome:
        """
        Check ``supplied_code`` against the session's live code.

        The code is read from the registry at call time, so a code reissued
        after the claim was filed is the only one that can succeed. Unknown
        claims, wrong codes and expired codes all fail the same way and
        leave the claim untouched. ``now == expires_at`` counts as expired.
        """
        claim = self._claims.get(claim_id)
        if claim is None:
            logger.warning("verification_failed", claim_id=claim_id, reason="unknown_claim")
            return VerificationOutcome.FAILURE

        session = self._registry.find_active_by_id(claim.session_id)
        if session is None:
            logger.warning("verification_failed", claim_id=claim_id, reason="session_inactive")
            return VerificationOutcome.FAILURE

        code_matches = session.otp is not None and session.otp == supplied_code
        not_expired = session.expires_at is not None and session.expires_at > self._clock()

        if code_matches and not_expired:
            if not claim.verified:
                self._claims[claim_id] = claim.model_copy(update={"verified": True})
            logger.info("claim_verified", claim_id=claim_id, session_id=session.id)
            return VerificationOutcome.SUCCESS

        logger.info(
            "verification_failed",
            claim_id=claim_id,
            session_id=session.id,
            reason="expired" if code_matches else "mismatch",
        )
        return VerificationOutcome.FAILURE

    def get(self, claim_id: str) -> AttendanceClaim:
        claim = self._claims.get(claim_id)
        if claim is None:
            raise NotFoundError("Attendance record not found")
        return claim

    def list_by_session(self, session_id: str) -> List[AttendanceClaim]:
        """Claims for one session in submission order."""
        return [c for c in self._claims.values() if c.session_id == session_id]

    def summary(self, session_id: str) -> AttendanceSummary:
        claims = self.list_by_session(session_id)
        return AttendanceSummary(total=len(claims), verified=sum(1 for c in claims if c.verified))

    def all(self) -> List[AttendanceClaim]:
        return list(self._claims.values())

    def load(self, claims: Iterable[AttendanceClaim]) -> None:
        """Replace the ledger contents with previously persisted claims."""
        self._claims = {c.id: c for c in claims}
