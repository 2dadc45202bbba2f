"""
Tests for the sign-in endpoints and session handling.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import jwt
from fastapi.testclient import TestClient

from api import app
from api.dependencies import get_container
from modules.auth.exceptions import IdentityStoreUnavailableError
from modules.auth.tokens import AUDIENCE

from tests.conftest import (
    ADMIN_PASSWORD,
    CHILD_PIN,
    PARENT_PASSWORD,
    TEST_SESSION_SECRET,
)

client = TestClient(app)


@pytest.fixture
def seeded(identity_store):
    """Install the shared test identity store into the service container."""
    container = get_container()
    container._identity_store = identity_store
    container._household_repository = identity_store.households
    return identity_store


def _login(credential: dict):
    return client.post("/api/auth/login", json={"credential": credential})


def _password_login(user_name: str, password: str, **extra):
    return _login({"kind": "password", "user_name": user_name, "password": password, **extra})


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestLogin:
    def test_password_login_returns_token(self, seeded, smith_family):
        response = _password_login("jane.smith", PARENT_PASSWORD)

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["success"] is True
        assert data["result"]["user"]["household_id"] == str(smith_family.id)
        assert data["access_token"]
        assert data["token_type"] == "bearer"

    def test_wrong_password_is_401(self, seeded):
        response = _password_login("jane.smith", "wrong")

        assert response.status_code == 401
        result = response.json()["result"]
        assert result["success"] is False
        assert result["error_code"] == "InvalidCredentials"
        assert response.json()["access_token"] is None

    def test_unknown_user_matches_wrong_password(self, seeded):
        unknown = _password_login("nobody", "wrong").json()["result"]
        wrong = _password_login("jane.smith", "wrong").json()["result"]
        assert unknown == wrong

    def test_malformed_pin(self, seeded):
        response = _login({"kind": "pin", "pin": "12"})
        assert response.status_code == 401
        assert response.json()["result"]["error_code"] == "InvalidFormat"

    def test_unknown_credential_kind_is_422(self, seeded):
        response = _login({"kind": "biometric", "token": "x"})
        assert response.status_code == 422

    def test_remember_device_then_pin(self, seeded):
        first = _password_login(
            "jane.smith", PARENT_PASSWORD, remember_device=True, device_id="kitchen-tablet"
        )
        assert first.status_code == 200

        response = _login({"kind": "pin", "pin": CHILD_PIN, "device_id": "kitchen-tablet"})

        assert response.status_code == 200
        assert response.json()["result"]["user"]["user_id"] == "smith-child"

    def test_store_unavailable_is_503(self, seeded):
        with patch.object(
            seeded,
            "find_by_user_name",
            AsyncMock(side_effect=IdentityStoreUnavailableError("down")),
        ):
            response = _password_login("jane.smith", PARENT_PASSWORD)

        assert response.status_code == 503
        assert response.json()["result"]["error_code"] == "Unavailable"


class TestMe:
    def test_me_returns_household(self, seeded, smith_family):
        token = _password_login("jane.smith", PARENT_PASSWORD).json()["access_token"]

        response = client.get("/api/auth/me", headers=_bearer(token))

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "smith-parent"
        assert data["household_id"] == str(smith_family.id)
        assert data["roles"] == ["Parent"]

    def test_me_for_admin(self, seeded):
        token = _password_login("admin", ADMIN_PASSWORD).json()["access_token"]
        data = client.get("/api/auth/me", headers=_bearer(token)).json()
        assert data["household_id"] is None

    def test_me_without_token(self, seeded):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["error"] == "MISSING_SESSION"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_me_with_invalid_token(self, seeded):
        response = client.get("/api/auth/me", headers=_bearer("invalid-token"))
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_TOKEN"

    def test_me_with_expired_token(self, seeded):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "smith-parent",
                "aud": AUDIENCE,
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
            },
            TEST_SESSION_SECRET,
            algorithm="HS256",
        )
        response = client.get("/api/auth/me", headers=_bearer(token))
        assert response.status_code == 401
        assert response.json()["error"] == "TOKEN_EXPIRED"

    def test_deactivated_household_ends_session(self, seeded, smith_family):
        """Household membership is re-read on every request."""
        token = _password_login("jane.smith", PARENT_PASSWORD).json()["access_token"]
        seeded.add_household(smith_family.model_copy(update={"is_active": False}))

        response = client.get("/api/auth/me", headers=_bearer(token))

        assert response.status_code == 401

    def test_store_unavailable_during_request_is_503(self, seeded):
        token = _password_login("jane.smith", PARENT_PASSWORD).json()["access_token"]
        with patch.object(
            seeded,
            "find_by_id",
            AsyncMock(side_effect=IdentityStoreUnavailableError("down")),
        ):
            response = client.get("/api/auth/me", headers=_bearer(token))

        assert response.status_code == 503
        assert response.json()["error"] == "IDENTITY_STORE_UNAVAILABLE"


class TestLogout:
    def test_logout(self, seeded):
        token = _password_login("jane.smith", PARENT_PASSWORD).json()["access_token"]
        response = client.post("/api/auth/logout", headers=_bearer(token))
        assert response.status_code == 204

    def test_logout_requires_session(self, seeded):
        assert client.post("/api/auth/logout").status_code == 401
