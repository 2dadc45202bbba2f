"""
Session tokens.

A successful sign-in is turned into an HS256 JWT carrying only the user
ID. Household membership is never put in the token: CurrentUserContext
re-reads it from the identity store on every request, so a deactivated
household takes effect immediately.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from shared.config import Settings, get_settings
from shared.models import AuthenticatedPrincipal

from .exceptions import ExpiredSessionTokenError, InvalidSessionTokenError
from .models import SessionToken, UserSummary

ALGORITHM = "HS256"
AUDIENCE = "hearth-session"


def _secret(settings: Settings) -> str:
    if not settings.session_secret:
        raise RuntimeError(
            "Session signing not configured. Set the HEARTH_SESSION_SECRET environment variable."
        )
    return settings.session_secret


def issue_session_token(
    user: UserSummary,
    persistent: bool = False,
    settings: Optional[Settings] = None,
) -> SessionToken:
    """
    Issue a session token for a signed-in user.

    Persistent tokens (remembered devices) live for
    persistent_session_ttl_days, others for session_ttl_minutes.
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    if persistent:
        expires_at = now + timedelta(days=settings.persistent_session_ttl_days)
    else:
        expires_at = now + timedelta(minutes=settings.session_ttl_minutes)

    payload = {
        "sub": user.user_id,
        "aud": AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "persistent": persistent,
    }
    token = jwt.encode(payload, _secret(settings), algorithm=ALGORITHM)
    return SessionToken(token=token, expires_at=expires_at)


def decode_session_token(token: str, settings: Optional[Settings] = None) -> AuthenticatedPrincipal:
    """
    Validate a session token and return the principal it names.

    Raises:
        ExpiredSessionTokenError: If the token has expired
        InvalidSessionTokenError: If the token is malformed or badly signed
    """
    if not token:
        raise InvalidSessionTokenError("Missing session token")

    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            _secret(settings),
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredSessionTokenError()
    except jwt.InvalidTokenError as e:
        raise InvalidSessionTokenError(f"Invalid session token: {e}")

    return AuthenticatedPrincipal(
        user_id=payload["sub"],
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        persistent=bool(payload.get("persistent", False)),
    )
