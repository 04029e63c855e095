"""Session registry: attendance sessions and their one-time codes."""
import random
import uuid
from typing import Dict, Iterable, List, Optional

from attendance.core.constants import OTP_VALIDITY_SECONDS
from attendance.core.exceptions import InactiveSessionError, NotFoundError, ValidationError
from attendance.core.logging_config import get_logger
from attendance.core.utils import Clock, utc_now
from attendance.models import AttendanceSession
from attendance.services.join_link import build_join_link
from attendance.services.otp import generate_otp

logger = get_logger(__name__)


class SessionRegistry:
    """
    Owns every attendance session and is the only writer of OTP fields.

    Sessions are kept in creation order and never removed; ending a session
    only flips ``is_active``. The registry does not track which session an
    instructor is looking at; that pointer belongs to the dashboard.

    Args:
        base_url: Origin used to build join links
        clock: Source of the current time
        rng: Random source for codes (OS CSPRNG when None)
        otp_validity_seconds: Lifetime of each issued code
    """

    def __init__(
        self,
        base_url: str,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
        otp_validity_seconds: int = OTP_VALIDITY_SECONDS,
    ):
        self._base_url = base_url
        self._clock = clock
        self._rng = rng
        self._otp_validity_seconds = otp_validity_seconds
        self._sessions: Dict[str, AttendanceSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self, teacher_id: str) -> AttendanceSession:
        """Open a new active session with no code issued yet."""
        teacher_id = (teacher_id or "").strip()
        if not teacher_id:
            raise ValidationError("Teacher id is required", field="teacher_id")

        session_id = str(uuid.uuid4())
        session = AttendanceSession(
            id=session_id,
            teacher_id=teacher_id,
            created_at=self._clock(),
            join_link=build_join_link(self._base_url, session_id),
        )
        self._sessions[session_id] = session

        logger.info("session_created", session_id=session_id, teacher_id=teacher_id)
        return session

    def issue_otp(self, session_id: str) -> str:
        """
        Mint a fresh code for the session, replacing any previous one.

        The previous code stops matching the moment this returns; there is
        no overlap window.

        Raises:
            NotFoundError: Unknown session id
            InactiveSessionError: The session has ended
        """
        session = self.get(session_id)
        if not session.is_active:
            raise InactiveSessionError("Cannot issue a code for an ended session")

        code = generate_otp(self._otp_validity_seconds, clock=self._clock, rng=self._rng)
        self._sessions[session_id] = session.with_otp(code)

        logger.info(
            "otp_issued",
            session_id=session_id,
            expires_at=code.expires_at.isoformat(),
        )
        return code.code

    def end_session(self, session_id: str) -> None:
        """Close the session. Ending an already-ended session is a no-op."""
        session = self.get(session_id)
        if not session.is_active:
            return

        self._sessions[session_id] = session.ended()
        logger.info("session_ended", session_id=session_id)

    def get(self, session_id: str) -> AttendanceSession:
        """Return the session with ``session_id``, active or not."""
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def find_active_by_id(self, session_id: str) -> Optional[AttendanceSession]:
        """Student-facing lookup; ended sessions are invisible here."""
        session = self._sessions.get(session_id)
        if session is None or not session.is_active:
            return None
        return session

    def list_for_teacher(self, teacher_id: str) -> List[AttendanceSession]:
        return [s for s in self._sessions.values() if s.teacher_id == teacher_id]

    def all(self) -> List[AttendanceSession]:
        return list(self._sessions.values())

    def load(self, sessions: Iterable[AttendanceSession]) -> None:
        """Replace the registry contents with previously persisted sessions."""
        self._sessions = {s.id: s for s in sessions}
