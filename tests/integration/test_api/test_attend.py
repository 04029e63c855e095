"""Integration tests for the student attendance flow."""
import uuid

import pytest

from attendance.core.constants import ATTEMPTS_COOKIE_PREFIX

STUDENT = {"name": "John Doe", "roll_number": "CS12345", "student_id": "STD12345"}


@pytest.fixture
def session(store):
    return store.registry.create_session("1")


@pytest.fixture
def claim_id(client, session):
    response = client.post(f"/api/v1/attend/{session.id}/claims", json=STUDENT)
    assert response.status_code == 200
    return response.json()["id"]


def _wrong(code: str) -> str:
    return "100000" if code != "100000" else "100001"


@pytest.mark.integration
class TestAttendLookup:
    """Test resolving a join link."""

    def test_lookup_active_session(self, client, session):
        response = client.get(f"/api/v1/attend/{session.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == session.id
        assert data["is_active"] is True
        assert data["otp_validity_seconds"] == 20

    def test_lookup_never_exposes_code(self, client, session, store):
        store.registry.issue_otp(session.id)

        data = client.get(f"/api/v1/attend/{session.id}").json()

        assert "otp" not in data
        assert "expires_at" not in data

    def test_lookup_ended_session(self, client, session, store):
        store.registry.end_session(session.id)

        response = client.get(f"/api/v1/attend/{session.id}")

        assert response.status_code == 404
        assert response.json()["detail"] == "This attendance session is not active or doesn't exist."

    @pytest.mark.parametrize("token", [str(uuid.uuid4()), "garbage"])
    def test_lookup_unknown_or_malformed(self, client, token):
        response = client.get(f"/api/v1/attend/{token}")
        assert response.status_code == 404


@pytest.mark.integration
class TestSubmitClaim:
    """Test step one of the student flow."""

    def test_submit_claim(self, client, session):
        response = client.post(f"/api/v1/attend/{session.id}/claims", json=STUDENT)

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == session.id
        assert data["student_name"] == "John Doe"
        assert data["verified"] is False
        assert data["status"] == "Pending"

    def test_submit_after_end(self, client, session, store):
        store.registry.end_session(session.id)

        response = client.post(f"/api/v1/attend/{session.id}/claims", json=STUDENT)

        assert response.status_code == 409
        assert response.json()["code"] == "inactive_session"
        assert store.ledger.list_by_session(session.id) == []

    def test_submit_unknown_session(self, client):
        response = client.post(f"/api/v1/attend/{uuid.uuid4()}/claims", json=STUDENT)
        assert response.status_code == 404

    def test_submit_blank_field(self, client, session):
        response = client.post(
            f"/api/v1/attend/{session.id}/claims",
            json={**STUDENT, "roll_number": "   "},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_submit_missing_field(self, client, session):
        response = client.post(f"/api/v1/attend/{session.id}/claims", json={"name": "John Doe"})
        assert response.status_code == 422

    def test_submit_too_long(self, client, session):
        response = client.post(
            f"/api/v1/attend/{session.id}/claims",
            json={**STUDENT, "roll_number": "x" * 51},
        )
        assert response.status_code == 422


@pytest.mark.integration
class TestVerifyClaim:
    """Test step two of the student flow."""

    def test_verify_success(self, client, session, claim_id, store, fake_clock):
        code = store.registry.issue_otp(session.id)
        fake_clock.advance(5)

        response = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": code})

        assert response.status_code == 200
        data = response.json()
        assert data["verified"] is True
        assert data["message"] == "Your attendance has been successfully verified."
        assert store.ledger.get(claim_id).verified is True

    def test_wrong_code(self, client, session, claim_id, store):
        code = store.registry.issue_otp(session.id)

        response = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": _wrong(code)})

        assert response.status_code == 200
        data = response.json()
        assert data["verified"] is False
        assert data["message"] == "Incorrect or expired OTP. 2 attempts remaining."
        assert data["failed_attempts"] == 1
        assert data["attempts_remaining"] == 2
        assert data["locked_out"] is False
        assert store.ledger.get(claim_id).verified is False

    def test_expired_code(self, client, session, claim_id, store, fake_clock):
        code = store.registry.issue_otp(session.id)
        fake_clock.advance(25)

        data = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": code}).json()

        assert data["verified"] is False
        assert data["attempts_remaining"] == 2

    def test_reissued_code_supersedes(self, client, session, claim_id, store, fake_clock):
        old = store.registry.issue_otp(session.id)
        fake_clock.advance(3)
        new = store.registry.issue_otp(session.id)

        assert client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": old}).json()["verified"] is False
        assert client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": new}).json()["verified"] is True

    def test_lockout_after_three_failures(self, client, session, claim_id, store):
        code = store.registry.issue_otp(session.id)
        wrong = _wrong(code)

        first = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": wrong}).json()
        second = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": wrong}).json()
        third = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": wrong}).json()

        assert first["attempts_remaining"] == 2
        assert second["message"] == "Incorrect or expired OTP. 1 attempt remaining."
        assert third["locked_out"] is True
        assert third["message"] == "You've reached the maximum number of attempts."
        assert third["redirect_to"] == "/"
        assert third["redirect_after_seconds"] == 3

        # Even the right code is refused once locked out
        fourth = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": code})
        assert fourth.status_code == 429
        assert fourth.json()["code"] == "too_many_attempts"
        assert fourth.json()["redirect_to"] == "/"
        assert store.ledger.get(claim_id).verified is False

    def test_retry_after_failure_can_succeed(self, client, session, claim_id, store):
        code = store.registry.issue_otp(session.id)

        client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": _wrong(code)})
        response = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": code})

        assert response.json()["verified"] is True
        assert f"{ATTEMPTS_COOKIE_PREFIX}{claim_id}" not in client.cookies

    def test_attempts_are_per_claim(self, client, session, claim_id, store):
        code = store.registry.issue_otp(session.id)
        for _ in range(3):
            client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": _wrong(code)})

        other = client.post(f"/api/v1/attend/{session.id}/claims", json=STUDENT).json()["id"]
        response = client.post(f"/api/v1/claims/{other}/verify", json={"otp": code})

        assert response.status_code == 200
        assert response.json()["verified"] is True

    @pytest.mark.parametrize("otp", ["12345", "abcdef", "1234567", ""])
    def test_malformed_code_is_not_an_attempt(self, client, session, claim_id, otp):
        response = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": otp})

        assert response.status_code == 422
        assert f"{ATTEMPTS_COOKIE_PREFIX}{claim_id}" not in client.cookies

    def test_verify_after_end(self, client, session, claim_id, store):
        code = store.registry.issue_otp(session.id)
        store.registry.end_session(session.id)

        data = client.post(f"/api/v1/claims/{claim_id}/verify", json={"otp": code}).json()
        assert data["verified"] is False

    def test_verify_unknown_claim(self, client, session, store):
        code = store.registry.issue_otp(session.id)

        response = client.post(f"/api/v1/claims/{uuid.uuid4()}/verify", json={"otp": code})

        assert response.status_code == 200
        assert response.json()["verified"] is False

    def test_verify_malformed_claim_id(self, client):
        response = client.post("/api/v1/claims/nope/verify", json={"otp": "123456"})
        assert response.status_code == 404

    def test_full_flow(self, client, teacher_client, store, fake_clock):
        """Instructor opens a session, student joins, instructor reads the code aloud."""
        created = teacher_client.post("/api/v1/sessions").json()
        token = created["join_link"].rsplit("/", 1)[-1]

        assert client.get(f"/api/v1/attend/{token}").status_code == 200
        claim = client.post(f"/api/v1/attend/{token}/claims", json=STUDENT).json()

        code = teacher_client.post(f"/api/v1/sessions/{created['id']}/otp").json()["otp"]
        fake_clock.advance(5)
        result = client.post(f"/api/v1/claims/{claim['id']}/verify", json={"otp": code}).json()
        assert result["verified"] is True

        roster = teacher_client.get(f"/api/v1/sessions/{created['id']}/claims").json()
        assert roster[0]["status"] == "Verified"
