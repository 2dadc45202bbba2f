import pytest
import jwt
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from shared.config import Settings
from modules.auth.exceptions import ExpiredSessionTokenError, InvalidSessionTokenError
from modules.auth.models import UserSummary
from modules.auth.tokens import AUDIENCE, decode_session_token, issue_session_token


@pytest.fixture
def settings():
    return Settings(
        session_secret="test-secret",
        session_ttl_minutes=30,
        persistent_session_ttl_days=7,
    )


@pytest.fixture
def user():
    return UserSummary(user_id="user-123", user_name="jane", household_id=uuid4())


class TestSessionTokens:
    def test_round_trip(self, settings, user):
        """A freshly issued token decodes to the same user."""
        issued = issue_session_token(user, settings=settings)
        principal = decode_session_token(issued.token, settings=settings)
        assert principal.user_id == "user-123"
        assert principal.persistent is False

    def test_token_carries_no_household(self, settings, user):
        """Household membership is never encoded in the token."""
        issued = issue_session_token(user, settings=settings)
        claims = jwt.decode(issued.token, "test-secret", algorithms=["HS256"], audience=AUDIENCE)
        assert "household_id" not in claims
        assert str(user.household_id) not in issued.token

    def test_session_lifetime(self, settings, user):
        before = datetime.now(timezone.utc)
        issued = issue_session_token(user, settings=settings)
        assert timedelta(minutes=29) < issued.expires_at - before <= timedelta(minutes=31)

    def test_persistent_lifetime(self, settings, user):
        before = datetime.now(timezone.utc)
        issued = issue_session_token(user, persistent=True, settings=settings)
        assert issued.expires_at - before > timedelta(days=6)
        assert decode_session_token(issued.token, settings=settings).persistent is True

    def test_expired_token(self, settings):
        """Should raise ExpiredSessionTokenError for an expired token."""
        payload = {
            "sub": "user-123",
            "aud": AUDIENCE,
            "iat": datetime.now(timezone.utc) - timedelta(hours=2),
            "exp": datetime.now(timezone.utc) - timedelta(hours=1),
        }
        token = jwt.encode(payload, "test-secret", algorithm="HS256")
        with pytest.raises(ExpiredSessionTokenError):
            decode_session_token(token, settings=settings)

    def test_wrong_signature(self, settings, user):
        issued = issue_session_token(user, settings=Settings(session_secret="other-secret"))
        with pytest.raises(InvalidSessionTokenError):
            decode_session_token(issued.token, settings=settings)

    def test_wrong_audience(self, settings):
        payload = {
            "sub": "user-123",
            "aud": "authenticated",
            "iat": datetime.now(timezone.utc),
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        }
        token = jwt.encode(payload, "test-secret", algorithm="HS256")
        with pytest.raises(InvalidSessionTokenError):
            decode_session_token(token, settings=settings)

    def test_malformed_token(self, settings):
        with pytest.raises(InvalidSessionTokenError):
            decode_session_token("not-a-jwt", settings=settings)

    def test_empty_token(self, settings):
        with pytest.raises(InvalidSessionTokenError):
            decode_session_token("", settings=settings)

    def test_missing_secret(self, user):
        """Issuing without a configured secret is a configuration error."""
        with pytest.raises(RuntimeError, match="HEARTH_SESSION_SECRET"):
            issue_session_token(user, settings=Settings(session_secret=""))
